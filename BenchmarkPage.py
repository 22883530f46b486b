"""Streamlit entrypoint for the athenahealth workflow benchmark."""

from __future__ import annotations

import streamlit as st

from athenabench import CriticalStepError, SetupError
from athenabench.analytics import history_rows
from athenabench.metrics import StepResult
from athenabench.services import WorkflowBenchmark
from athenabench.ui import collect_inputs_ui, render_run_report
from athenabench.workflow import build_workflow
from shared_data import append_run, load_history

st.set_page_config(page_title="athenahealth → Workflow Timings", page_icon="⏱️", layout="wide")
st.title("⏱️ athenahealth SSO → Patient Search Benchmark")


def _firefox_retry_warning(_: Exception) -> None:
    st.warning("Firefox headless failed; retrying with a visible window.", icon="⚠️")


def run_app() -> None:
    driver_cfg, cfg = collect_inputs_ui()

    if st.button("🚀 Run Benchmark", type="primary", use_container_width=True, key="btn_run"):
        try:
            planned = build_workflow(cfg)
        except (SetupError, ValueError) as exc:
            st.error(str(exc))
            return

        benchmark = WorkflowBenchmark(driver_cfg, cfg, firefox_retry_notifier=_firefox_retry_warning)
        progress = st.progress(0.0, text="Running workflow…")

        def step_hook(idx: int, total: int, result: StepResult) -> None:
            progress.progress(idx / total if total else 1.0, text=f"Running workflow… ({idx}/{total})")
            if result.status.value == "succeeded":
                st.toast(f"✔ {result.name}: {result.duration_ms} ms", icon="✅")
            else:
                st.toast(f"⚠️ {result.name} {result.status.value}: {result.reason}", icon="⚠️")

        try:
            with st.spinner("Starting browser, logging in, and timing the workflow…"):
                report = benchmark.run(step_hook=step_hook)
        except CriticalStepError as exc:
            st.error(f"{exc.step} failed: {exc}")
            return
        except SetupError as exc:
            st.error(str(exc))
            return
        except Exception as exc:  # pragma: no cover
            st.error(f"Unexpected error: {exc}")
            return
        finally:
            progress.empty()

        saved_path = append_run(history_rows(report))
        st.info(f"Appended to: {saved_path}")

        render_run_report(report, planned.thresholds, history=load_history())


if __name__ == "__main__":
    run_app()
