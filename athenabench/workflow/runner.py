"""Step boundary: timing, skip/fail/critical policy and checkpoint termination."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from selenium import webdriver

from athenabench.config import BenchmarkConfig
from athenabench.exceptions import CriticalStepError, StepSkipped
from athenabench.metrics import RunReport, StepResult, StepStatus
from athenabench.selenium import actions
from athenabench.selenium.frames import Resolution, resolve
from athenabench.selenium.waits import wait_for_load_state

logger = logging.getLogger(__name__)

StepHook = Callable[[int, int, StepResult], None]


@dataclass
class StepContext:
    """What a step sees: the session, its config and the step's stopwatch."""

    driver: webdriver.Remote
    config: BenchmarkConfig
    step: str
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    started_at: float = field(default=0.0)
    manual: bool = False

    def trigger(self) -> None:
        """Start the measured interval at the user-meaningful action."""
        self.started_at = self.clock()

    def elapsed_ms(self) -> int:
        return max(0, int(round((self.clock() - self.started_at) * 1000)))

    def skip(self, reason: str) -> None:
        raise StepSkipped(reason)

    def complete_manually(self, seconds: float) -> None:
        """Give the operator ``seconds`` to finish by hand; the step is kept out of threshold checks."""
        self.manual = True
        self.pause(seconds)

    def pause(self, seconds: float) -> None:
        if seconds > 0:
            self.sleep(seconds)

    def find(
        self,
        locators: Sequence,
        *,
        timeout_s: Optional[float] = None,
        search_frames: bool = True,
    ) -> Optional[Resolution]:
        waits = self.config.waits
        return resolve(
            self.driver,
            locators,
            timeout_s=waits.locate_timeout_s if timeout_s is None else timeout_s,
            poll_s=waits.poll_interval_s,
            search_frames=search_frames,
        )

    def require(self, locators: Sequence, what: str, **kwargs) -> Resolution:
        """Resolve ``locators`` or skip the step naming the missing control."""
        hit = self.find(locators, **kwargs)
        if hit is None:
            self.skip(f"{what} not found")
        return hit

    def act(self, hit: Resolution, action: str, value: str | None = None) -> None:
        actions.perform(
            self.driver,
            hit.element,
            action,
            value,
            type_delay_s=self.config.waits.type_delay_s,
            sleep=self.sleep,
        )

    def wait_for(self, state: str, timeout_s: Optional[float] = None) -> None:
        self.driver.switch_to.default_content()
        wait_for_load_state(
            self.driver,
            state,
            timeout=self.config.waits.load_state_timeout_s if timeout_s is None else timeout_s,
            idle_window_s=self.config.waits.network_idle_window_s,
            clock=self.clock,
        )


StepAction = Callable[[StepContext], None]


@dataclass(frozen=True)
class WorkflowStep:
    name: str
    action: StepAction
    critical: bool = False
    checkpoint: bool = False


class WorkflowRunner:
    """Execute steps strictly in order against one session and collect their timings."""

    def __init__(
        self,
        driver: webdriver.Remote,
        config: BenchmarkConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        step_hook: StepHook | None = None,
    ) -> None:
        self.driver = driver
        self.config = config
        self._clock = clock
        self._sleep = sleep
        self._step_hook = step_hook

    def run(
        self,
        steps: Sequence[WorkflowStep],
        *,
        variant: str | None = None,
        stop_at_checkpoint: bool = False,
    ) -> RunReport:
        report = RunReport(variant=variant or self.config.variant)
        total = len(steps)

        for idx, step in enumerate(steps, start=1):
            logger.info("Starting %s (%d/%d)...", step.name, idx, total)
            result = self._run_step(step)
            report.metrics.record(step.name, result.duration_ms)
            report.steps.append(result)
            if self._step_hook:
                self._step_hook(idx, total, result)

            if step.checkpoint and stop_at_checkpoint and idx < total:
                logger.info("Checkpoint reached after %s; skipping the remaining %d step(s).", step.name, total - idx)
                report.stopped_at_checkpoint = True
                break

        logger.info("Total workflow duration: %d ms", report.total_ms)
        return report

    def _run_step(self, step: WorkflowStep) -> StepResult:
        ctx = StepContext(
            driver=self.driver,
            config=self.config,
            step=step.name,
            clock=self._clock,
            sleep=self._sleep,
        )
        self.driver.switch_to.default_content()
        ctx.started_at = self._clock()

        try:
            step.action(ctx)
        except StepSkipped as exc:
            if step.critical:
                raise CriticalStepError(step.name, exc.reason) from exc
            logger.warning("Skipping %s: %s", step.name, exc.reason)
            return StepResult(step.name, StepStatus.SKIPPED, 0, exc.reason)
        except CriticalStepError:
            raise
        except Exception as exc:
            if step.critical:
                logger.error("Critical step %s failed: %s", step.name, exc)
                raise CriticalStepError(step.name, str(exc)) from exc
            logger.warning("%s failed, continuing: %s", step.name, exc)
            return StepResult(step.name, StepStatus.FAILED, 0, str(exc))

        duration = ctx.elapsed_ms()
        if ctx.manual:
            logger.info("%s completed manually after %d ms", step.name, duration)
            return StepResult(step.name, StepStatus.SUCCEEDED, duration, "completed manually", manual=True)
        logger.info("%s completed in %d ms", step.name, duration)
        return StepResult(step.name, StepStatus.SUCCEEDED, duration)
