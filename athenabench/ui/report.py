"""Streamlit rendering of a run report and the run history."""

from __future__ import annotations

import io

import pandas as pd
import plotly.express as px
import streamlit as st

from athenabench.analytics import (
    dataframe_to_excel_bytes,
    generate_excel_report,
    report_to_frame,
    summarize_history,
    summarize_run,
    violations_to_frame,
)
from athenabench.config import Thresholds
from athenabench.metrics import RunReport

STATUS_COLORS = {"succeeded": "#2f9e44", "skipped": "#adb5bd", "failed": "#e03131"}


def render_run_report(report: RunReport, thresholds: Thresholds | None = None, history: pd.DataFrame | None = None) -> None:
    """Headline metrics, per-step chart and table, violations and downloads."""
    st.header("Run Results")
    frame = report_to_frame(report, thresholds)

    _render_metric_row(report)
    _render_timing_chart(frame)

    st.dataframe(frame, use_container_width=True, hide_index=True)

    violations = violations_to_frame(report)
    if violations.empty:
        st.success("All performance thresholds met.")
    else:
        st.error("Performance thresholds exceeded.")
        st.dataframe(violations, use_container_width=True, hide_index=True)

    if history is not None and not history.empty:
        _render_history(history)

    _render_download_section(report, frame, thresholds, history)


def _render_metric_row(report: RunReport) -> None:
    summary = summarize_run(report)
    cols = st.columns(4)
    cols[0].metric("Total Workflow", f"{summary.total_ms:,} ms")
    cols[1].metric("Total Login", f"{summary.login_ms:,} ms")
    cols[2].metric("Steps Run", f"{summary.steps_run}")
    cols[3].metric("Skipped / Failed", f"{summary.steps_skipped} / {summary.steps_failed}")
    if summary.stopped_at_checkpoint:
        st.caption("Run stopped at the search checkpoint.")


def _render_timing_chart(frame: pd.DataFrame) -> None:
    if frame.empty:
        return
    fig = px.bar(
        frame,
        x="Duration (ms)",
        y="Step",
        color="Status",
        orientation="h",
        color_discrete_map=STATUS_COLORS,
        title="Step durations",
    )
    fig.update_layout(yaxis={"categoryorder": "array", "categoryarray": frame["Step"].tolist()[::-1]}, height=80 + 40 * len(frame))
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def _render_history(history: pd.DataFrame) -> None:
    st.subheader("History")
    stats = summarize_history(history)
    if stats.empty:
        st.info("No measured steps in the history yet.")
        return
    st.dataframe(stats, use_container_width=True, hide_index=True)
    st.download_button(
        "Download History (Excel)",
        data=dataframe_to_excel_bytes(history, sheet_name="History"),
        file_name="athena_run_history.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key="download_history",
    )

    totals = history.loc[history["Step"] == "total"]
    if len(totals) > 1:
        fig = px.line(totals, x="Run At", y="Duration (ms)", color="Variant", markers=True, title="Total workflow over time")
        st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def _render_download_section(
    report: RunReport,
    frame: pd.DataFrame,
    thresholds: Thresholds | None,
    history: pd.DataFrame | None,
) -> None:
    with st.expander("Download results"):
        csv_buffer = io.StringIO()
        frame.to_csv(csv_buffer, index=False)
        st.download_button(
            "Download CSV",
            data=csv_buffer.getvalue().encode("utf-8"),
            file_name=f"athena_{report.variant}_timings.csv",
            mime="text/csv",
            use_container_width=True,
            key="download_csv",
        )

        try:
            workbook_bytes = generate_excel_report(report, thresholds, history=history)
        except Exception as exc:  # noqa: BLE001
            st.error(f"Excel export failed: {exc}")
        else:
            st.download_button(
                "Download Excel Workbook",
                data=workbook_bytes,
                file_name=f"athena_{report.variant}_timings.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True,
                key="download_excel",
            )
