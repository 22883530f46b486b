"""Analytics helpers for run reports and run history."""

from .exports import dataframe_to_excel_bytes, generate_excel_report
from .summaries import (
    RunSummary,
    history_rows,
    report_to_frame,
    summarize_history,
    summarize_run,
    summary_to_frame,
    violations_to_frame,
)

__all__ = [
    "RunSummary",
    "dataframe_to_excel_bytes",
    "generate_excel_report",
    "history_rows",
    "report_to_frame",
    "summarize_history",
    "summarize_run",
    "summary_to_frame",
    "violations_to_frame",
]
