from __future__ import annotations

import pytest

from athenabench.exceptions import CriticalStepError
from athenabench.metrics import StepStatus
from athenabench.workflow.runner import WorkflowRunner, WorkflowStep


def _timed(seconds: float, *, trigger_after: float | None = None):
    def action(ctx):
        if trigger_after is not None:
            ctx.pause(trigger_after)
            ctx.trigger()
        ctx.pause(seconds)

    return action


def _skipping(reason: str):
    def action(ctx):
        ctx.skip(reason)

    return action


def _failing(message: str):
    def action(ctx):
        raise RuntimeError(message)

    return action


@pytest.fixture
def runner(driver, clock, make_config):
    return WorkflowRunner(driver, make_config(), clock=clock, sleep=clock.sleep)


def test_duration_is_measured_from_the_trigger(runner):
    report = runner.run([WorkflowStep("searchDuration", _timed(0.75, trigger_after=5))])
    assert report.metrics["searchDuration"] == 750


def test_untriggered_step_is_timed_from_entry(runner):
    report = runner.run([WorkflowStep("patientMenuDuration", _timed(1.2))])
    assert report.metrics["patientMenuDuration"] == 1200
    assert report.step("patientMenuDuration").status is StepStatus.SUCCEEDED


def test_skipped_step_records_zero_and_workflow_continues(runner):
    report = runner.run(
        [
            WorkflowStep("initialLoginDuration", _timed(2)),
            WorkflowStep("departmentSelectionDuration", _skipping("Second Go button not found")),
            WorkflowStep("searchDuration", _timed(0.5)),
        ]
    )

    assert report.metrics.as_dict() == {
        "initialLoginDuration": 2000,
        "departmentSelectionDuration": 0,
        "searchDuration": 500,
    }
    skipped = report.step("departmentSelectionDuration")
    assert skipped.status is StepStatus.SKIPPED
    assert skipped.reason == "Second Go button not found"
    assert report.total_ms == 2500


def test_failed_optional_step_records_zero(runner):
    report = runner.run([WorkflowStep("chartLoadDuration", _failing("chart never rendered")), WorkflowStep("closeDuration", _timed(1))])

    failed = report.step("chartLoadDuration")
    assert failed.status is StepStatus.FAILED
    assert failed.duration_ms == 0
    assert "chart never rendered" in failed.reason
    assert report.metrics["closeDuration"] == 1000


@pytest.mark.parametrize("action", [_failing("Search results page not found."), _skipping("Search results page not found.")])
def test_critical_step_failure_aborts_run(runner, action):
    ran = []
    steps = [
        WorkflowStep("searchDuration", action, critical=True),
        WorkflowStep("chartLoadDuration", lambda ctx: ran.append(ctx.step)),
    ]

    with pytest.raises(CriticalStepError, match="Search results page not found.") as excinfo:
        runner.run(steps)

    assert excinfo.value.step == "searchDuration"
    assert ran == []


def test_checkpoint_stops_only_when_requested(runner, driver, clock, make_config):
    steps = [
        WorkflowStep("searchDuration", _timed(0.3), checkpoint=True),
        WorkflowStep("chartLoadDuration", _timed(1)),
    ]

    stopped = runner.run(steps, stop_at_checkpoint=True)
    assert list(stopped.metrics) == ["searchDuration"]
    assert stopped.stopped_at_checkpoint

    full = WorkflowRunner(driver, make_config(), clock=clock, sleep=clock.sleep).run(steps)
    assert list(full.metrics) == ["searchDuration", "chartLoadDuration"]
    assert not full.stopped_at_checkpoint


def test_checkpoint_as_last_step_is_not_an_early_stop(runner):
    report = runner.run([WorkflowStep("searchDuration", _timed(0.3), checkpoint=True)], stop_at_checkpoint=True)
    assert not report.stopped_at_checkpoint


def test_step_hook_sees_each_result(driver, clock, make_config):
    seen = []
    runner = WorkflowRunner(
        driver,
        make_config(),
        clock=clock,
        sleep=clock.sleep,
        step_hook=lambda idx, total, result: seen.append((idx, total, result.name, result.status)),
    )
    runner.run([WorkflowStep("a", _timed(0.1)), WorkflowStep("b", _skipping("nope"))])

    assert seen == [(1, 2, "a", StepStatus.SUCCEEDED), (2, 2, "b", StepStatus.SKIPPED)]


def test_each_step_starts_in_the_top_document(runner, driver):
    from fakes import FakeFrameElement

    frame_doc = driver.root.add_frame()
    positions = []

    def enter_frame(ctx):
        ctx.driver.switch_to.frame(FakeFrameElement(frame_doc))

    def record(ctx):
        positions.append(ctx.driver.document)

    runner.run([WorkflowStep("a", enter_frame), WorkflowStep("b", record)])
    assert positions == [driver.root]
