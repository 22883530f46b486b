# shared_data.py
# =============================================================================
# Run history shared by the Streamlit page and the CLI
# - Appends each run's step timings to data/shared/athena_runs.csv
# - Keeps the last run in a small in-memory cache for the current session
# - Loads the full history for trend tables
#
# Requires: pandas
# =============================================================================

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

# Storage directory (relative to project root)
SHARED_DIR = Path("data/shared")
HISTORY_FILE = "athena_runs.csv"

# In-memory cache (only valid for the current Python process)
_MEMORY_CACHE: dict[str, pd.DataFrame] = {}


def _history_path(directory: Path | None = None) -> Path:
    return (directory or SHARED_DIR) / HISTORY_FILE


def append_run(rows: pd.DataFrame, directory: Path | None = None) -> Path:
    """
    Append one run's history rows to the CSV history (creating it with a header
    on first use) and cache them as the latest run. Returns the CSV path.
    """
    if rows is None or rows.empty:
        raise ValueError("append_run: DataFrame is empty or None.")

    path = _history_path(directory)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows.to_csv(path, mode="a", header=not path.exists(), index=False)

    _MEMORY_CACHE["latest"] = rows.copy()
    return path


def get_cached_run() -> Optional[pd.DataFrame]:
    cached = _MEMORY_CACHE.get("latest")
    return cached.copy() if isinstance(cached, pd.DataFrame) else None


def load_history(directory: Path | None = None) -> Optional[pd.DataFrame]:
    """Read the full run history, or None when nothing has been recorded yet."""
    path = _history_path(directory)
    if not path.exists():
        return None
    return pd.read_csv(path)
