from __future__ import annotations

import pytest
from selenium.common.exceptions import TimeoutException

from athenabench.selenium.waits import wait_dom_ready, wait_for_load_state
from fakes import FakeDocument, FakeDriver


class SteppingClock:
    """Advances by ``step`` every time it is read."""

    def __init__(self, step: float) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


def test_domcontentloaded_accepts_interactive_document():
    driver = FakeDriver(FakeDocument(ready_state="interactive"))
    wait_for_load_state(driver, "domcontentloaded", timeout=0, poll_s=0.001)


def test_load_requires_complete_document():
    driver = FakeDriver(FakeDocument(ready_state="interactive"))
    with pytest.raises(TimeoutException):
        wait_for_load_state(driver, "load", timeout=0, poll_s=0.001)

    driver.root.ready_state = "complete"
    wait_for_load_state(driver, "load", timeout=0, poll_s=0.001)
    wait_dom_ready(driver, timeout=0)


def test_unknown_load_state_is_rejected():
    with pytest.raises(ValueError, match="Unknown load state"):
        wait_for_load_state(FakeDriver(), "idle")


def test_networkidle_waits_for_a_quiet_resource_window():
    driver = FakeDriver(FakeDocument())
    driver.root.resource_count = 12
    clock = SteppingClock(0.2)

    wait_for_load_state(driver, "networkidle", timeout=5, idle_window_s=0.5, poll_s=0.001, clock=clock)

    assert clock.now >= 0.8


def test_networkidle_needs_complete_ready_state():
    driver = FakeDriver(FakeDocument(ready_state="loading"))
    with pytest.raises(TimeoutException):
        wait_for_load_state(driver, "networkidle", timeout=0, idle_window_s=0, poll_s=0.001)


def test_networkidle_with_zero_window_returns_on_complete():
    wait_for_load_state(FakeDriver(), "networkidle", timeout=0, idle_window_s=0, poll_s=0.001)
