"""Tabular views of a run report and of accumulated run history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from athenabench.config import Thresholds
from athenabench.metrics import RunReport

STEP_COLUMNS = ["Step", "Duration (ms)", "Status", "Note", "Limit (ms)", "Within Limit"]
HISTORY_COLUMNS = ["Run ID", "Run At", "Variant", "Step", "Duration (ms)", "Status", "Passed"]


@dataclass(slots=True)
class RunSummary:
    """Headline numbers for dashboards and exports."""

    variant: str
    steps_run: int
    steps_skipped: int
    steps_failed: int
    login_ms: int
    total_ms: int
    passed: bool
    stopped_at_checkpoint: bool


def summarize_run(report: RunReport) -> RunSummary:
    statuses = [s.status.value for s in report.steps]
    return RunSummary(
        variant=report.variant,
        steps_run=len(report.steps),
        steps_skipped=statuses.count("skipped"),
        steps_failed=statuses.count("failed"),
        login_ms=report.login_ms,
        total_ms=report.total_ms,
        passed=report.passed,
        stopped_at_checkpoint=report.stopped_at_checkpoint,
    )


def report_to_frame(report: RunReport, thresholds: Thresholds | None = None) -> pd.DataFrame:
    """One row per executed step, with its bound when one applies."""
    limits = thresholds.per_step if thresholds else {}
    rows = []
    for result in report.steps:
        limit = limits.get(result.name)
        within = None if limit is None or result.duration_ms == 0 else result.duration_ms < limit
        rows.append(
            {
                "Step": result.name,
                "Duration (ms)": result.duration_ms,
                "Status": result.status.value,
                "Note": result.reason or "",
                "Limit (ms)": limit,
                "Within Limit": within,
            }
        )
    return pd.DataFrame(rows, columns=STEP_COLUMNS)


def summary_to_frame(summary: RunSummary) -> pd.DataFrame:
    return pd.DataFrame(
        [
            ("Variant", summary.variant),
            ("Steps Run", summary.steps_run),
            ("Steps Skipped", summary.steps_skipped),
            ("Steps Failed", summary.steps_failed),
            ("Total Login (ms)", summary.login_ms),
            ("Total Workflow (ms)", summary.total_ms),
            ("Stopped At Checkpoint", summary.stopped_at_checkpoint),
            ("Passed", summary.passed),
        ],
        columns=["Metric", "Value"],
    )


def violations_to_frame(report: RunReport) -> pd.DataFrame:
    return pd.DataFrame(
        [(v.metric, v.actual_ms, v.limit_ms) for v in report.violations],
        columns=["Metric", "Actual (ms)", "Limit (ms)"],
    )


def history_rows(report: RunReport, *, run_at: datetime | None = None) -> pd.DataFrame:
    """Flatten a report into history rows keyed by a run id derived from the timestamp."""
    run_at = run_at or datetime.now()
    run_id = run_at.strftime("%Y%m%d-%H%M%S")
    rows = [
        (run_id, run_at.isoformat(timespec="seconds"), report.variant, s.name, s.duration_ms, s.status.value, report.passed)
        for s in report.steps
    ]
    rows.append((run_id, run_at.isoformat(timespec="seconds"), report.variant, "total", report.total_ms, "total", report.passed))
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def summarize_history(history: pd.DataFrame) -> pd.DataFrame:
    """Per variant/step statistics over measured (non-zero) durations."""
    columns = ["Variant", "Step", "Runs", "Mean (ms)", "Median (ms)", "P95 (ms)", "Max (ms)"]
    if history is None or history.empty:
        return pd.DataFrame(columns=columns)

    measured = history.loc[history["Duration (ms)"] > 0]
    if measured.empty:
        return pd.DataFrame(columns=columns)

    grouped = measured.groupby(["Variant", "Step"], sort=False)["Duration (ms)"]
    out = grouped.agg(
        Runs="count",
        Mean="mean",
        Median="median",
        P95=lambda s: s.quantile(0.95),
        Max="max",
    ).reset_index()
    out = out.rename(columns={"Mean": "Mean (ms)", "Median": "Median (ms)", "P95": "P95 (ms)", "Max": "Max (ms)"})
    for col in ("Mean (ms)", "Median (ms)", "P95 (ms)"):
        out[col] = out[col].round(1)
    return out[columns]
