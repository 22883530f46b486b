"""UI helpers for Streamlit components."""

from .report import render_run_report
from .sidebar import collect_inputs_ui

__all__ = ["collect_inputs_ui", "render_run_report"]
