"""Excel export helpers for benchmark results."""

from __future__ import annotations

import io

import pandas as pd

from athenabench.config import Thresholds
from athenabench.metrics import RunReport

from .summaries import report_to_frame, summarize_history, summarize_run, summary_to_frame, violations_to_frame


def generate_excel_report(
    report: RunReport,
    thresholds: Thresholds | None = None,
    *,
    history: pd.DataFrame | None = None,
) -> bytes:
    """Create a workbook with step timings, the run summary, violations and optional history."""
    buffer = io.BytesIO()
    violations = violations_to_frame(report)
    history_stats = summarize_history(history) if history is not None else pd.DataFrame()

    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:  # type: ignore[arg-type]
        report_to_frame(report, thresholds).to_excel(writer, sheet_name="Steps", index=False)
        summary_to_frame(summarize_run(report)).to_excel(writer, sheet_name="Summary", index=False)

        if not violations.empty:
            violations.to_excel(writer, sheet_name="Threshold Violations", index=False)

        if not history_stats.empty:
            history_stats.to_excel(writer, sheet_name="History", index=False)

    buffer.seek(0)
    return buffer.getvalue()


def dataframe_to_excel_bytes(df: pd.DataFrame, *, sheet_name: str = "Timings") -> bytes:
    """Serialize a single dataframe to an Excel worksheet for download controls."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:  # type: ignore[arg-type]
        df.to_excel(writer, sheet_name=sheet_name[:31], index=False)
    buffer.seek(0)
    return buffer.getvalue()


__all__ = [
    "dataframe_to_excel_bytes",
    "generate_excel_report",
]
