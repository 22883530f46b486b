"""Load-state waits on top of WebDriverWait."""

from __future__ import annotations

import time
from typing import Callable

from selenium import webdriver
from selenium.webdriver.support.ui import WebDriverWait

READY_STATE_SCRIPT = "return document.readyState"
RESOURCE_COUNT_SCRIPT = "return window.performance ? window.performance.getEntriesByType('resource').length : 0;"

LOAD_STATES = ("domcontentloaded", "load", "networkidle")


def wait_dom_ready(driver: webdriver.Remote, timeout: float = 30) -> None:
    """Wait until the document reaches the 'complete' readyState."""
    WebDriverWait(driver, timeout).until(lambda d: d.execute_script(READY_STATE_SCRIPT) == "complete")


def wait_for_load_state(
    driver: webdriver.Remote,
    state: str = "load",
    *,
    timeout: float = 30,
    idle_window_s: float = 0.5,
    poll_s: float = 0.1,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Block until ``state`` is reached or raise ``TimeoutException``.

    ``networkidle`` is approximated as: readyState complete and the number of
    resource timing entries unchanged for ``idle_window_s``.
    """
    if state not in LOAD_STATES:
        raise ValueError(f"Unknown load state {state!r}; expected one of {', '.join(LOAD_STATES)}.")

    wait = WebDriverWait(driver, timeout, poll_frequency=poll_s)
    if state == "domcontentloaded":
        wait.until(lambda d: d.execute_script(READY_STATE_SCRIPT) in ("interactive", "complete"))
        return
    if state == "load":
        wait.until(lambda d: d.execute_script(READY_STATE_SCRIPT) == "complete")
        return

    last = {"count": -1, "since": clock()}

    def _idle(d: webdriver.Remote) -> bool:
        if d.execute_script(READY_STATE_SCRIPT) != "complete":
            last["count"] = -1
            return False
        count = d.execute_script(RESOURCE_COUNT_SCRIPT)
        now = clock()
        if count != last["count"]:
            last["count"] = count
            last["since"] = now
            return idle_window_s <= 0
        return now - last["since"] >= idle_window_s

    wait.until(_idle)
