"""Sidebar form collection for the Streamlit front end."""

from __future__ import annotations

import os
from pathlib import Path
from shutil import which
from typing import Optional, Tuple

import streamlit as st

from athenabench.config import (
    BASE_URL_ENV,
    DEFAULT_PATIENT_ID,
    DEFAULT_PRACTICE,
    DEFAULT_SEARCH_TERM,
    VARIANTS,
    BenchmarkConfig,
    Credentials,
    DriverConfig,
    Thresholds,
    WaitConfig,
)
from athenabench.workflow.variants import DEFAULT_THRESHOLDS


def collect_inputs_ui() -> Tuple[DriverConfig, BenchmarkConfig]:
    """Render sidebar inputs and return driver and benchmark configuration."""
    with st.sidebar:
        st.header("Driver")
        browser = st.selectbox("Browser", ["chrome", "firefox"], index=0, key="drv_browser")
        headless = st.toggle("Headless", value=True, key="drv_headless")

        ch_bin = ""
        ff_bin = ""
        ch_insec = False
        if browser == "chrome":
            st.markdown("### ⚙️ Advanced (Chrome)")
            ch_pls = st.selectbox("page_load_strategy", ["normal", "eager", "none"], index=0, key="drv_pls")
            ch_insec = st.toggle("accept_insecure_certs", value=False, key="drv_insec")
            ch_bin = st.text_input(
                "Chrome/Chromium binary (optional)",
                value=_auto_find_chrome_binary() or "",
                help="Leave empty to auto-detect.",
                key="drv_chrome_bin",
            )
        else:
            ch_pls = "normal"
            st.markdown("### ⚙️ Advanced (Firefox)")
            ff_bin = st.text_input(
                "Firefox binary (optional)",
                value=_auto_find_firefox_binary() or "",
                help="Leave empty to auto-detect (e.g. /usr/bin/firefox or /snap/bin/firefox)",
                key="drv_ff_bin",
            )

        driver_cfg = DriverConfig(
            browser=browser,
            headless=headless,
            ch_page_load_strategy=ch_pls,
            ch_accept_insecure_certs=ch_insec,
            chrome_binary_override=ch_bin.strip() or None,
            ff_binary_override=ff_bin.strip() or None,
        )

        st.header("Waits")
        lookup = st.number_input("Element lookup timeout (s)", min_value=0.0, value=10.0, step=1.0, key="wait_element")
        results = st.number_input("Search results timeout (s)", min_value=1.0, value=30.0, step=5.0, key="wait_results")
        manual = st.number_input("Manual login wait (s)", min_value=0.0, value=30.0, step=5.0, key="wait_manual")
        hold = st.number_input("Hold final page open (s)", min_value=0.0, value=0.0, step=5.0, key="wait_hold")
        waits = WaitConfig(
            locate_timeout_s=float(lookup),
            results_timeout_s=float(results),
            manual_login_wait_s=float(manual),
            hold_open_s=float(hold),
        )

    st.subheader("Target")
    base_url = st.text_input(
        "Sandbox URL",
        value=os.environ.get(BASE_URL_ENV, ""),
        help=f"Defaults to ${BASE_URL_ENV}.",
        key="tgt_url",
    )
    variant = st.radio("Workflow", VARIANTS, index=0, horizontal=True, key="tgt_variant")

    col_term, col_id, col_practice = st.columns(3)
    with col_term:
        term = st.text_input("Patient search", value=DEFAULT_SEARCH_TERM, key="tgt_term")
    with col_id:
        patient_id = st.text_input("Patient ID (scheduling)", value=DEFAULT_PATIENT_ID, key="tgt_pid")
    with col_practice:
        practice = st.text_input("Practice (scheduling)", value=DEFAULT_PRACTICE, key="tgt_practice")

    st.subheader("Credentials (SSO pre-fill; required for direct login)")
    col_user, col_pass = st.columns(2)
    with col_user:
        username = st.text_input("Username", value=os.environ.get("SSO_USERNAME", ""), key="cred_user")
    with col_pass:
        password = st.text_input("Password", type="password", value=os.environ.get("SSO_PASSWORD", ""), key="cred_pass")

    thresholds = _collect_thresholds(variant)

    cfg = BenchmarkConfig(
        base_url=base_url.strip(),
        variant=variant,
        credentials=Credentials(username=username, password=password),
        search_term=term.strip() or DEFAULT_SEARCH_TERM,
        patient_id=patient_id.strip() or DEFAULT_PATIENT_ID,
        practice_name=practice.strip() or DEFAULT_PRACTICE,
        waits=waits,
        thresholds=thresholds,
    )
    return driver_cfg, cfg


def _collect_thresholds(variant: str) -> Thresholds:
    defaults = DEFAULT_THRESHOLDS[variant]
    with st.expander("Performance thresholds (ms)"):
        cols = st.columns(2)
        login = cols[0].number_input("Total login", min_value=0, value=defaults.login_ms or 0, step=1000, key=f"thr_login_{variant}")
        total = cols[1].number_input("Total workflow", min_value=0, value=defaults.total_ms or 0, step=1000, key=f"thr_total_{variant}")
        per_step = {}
        for name, limit in defaults.per_step.items():
            per_step[name] = int(st.number_input(name, min_value=0, value=limit, step=500, key=f"thr_{variant}_{name}"))
    return Thresholds(
        per_step={k: v for k, v in per_step.items() if v > 0},
        login_ms=int(login) or None,
        total_ms=int(total) or None,
    )


def _auto_find_firefox_binary() -> Optional[str]:
    for path in (which("firefox"), "/usr/bin/firefox", "/snap/bin/firefox", "/usr/local/bin/firefox"):
        if path and Path(path).exists():
            return path
    return None


def _auto_find_chrome_binary() -> Optional[str]:
    for path in (
        which("google-chrome"),
        which("chromium-browser"),
        which("chromium"),
        "/usr/bin/google-chrome",
        "/usr/bin/chromium",
        "/snap/bin/chromium",
        "/usr/local/bin/google-chrome",
    ):
        if path and Path(path).exists():
            return path
    return None
