"""Service object that owns the driver for one run and evaluates the result."""

from __future__ import annotations

import logging
import time
from typing import Callable

from selenium.webdriver.remote.webdriver import WebDriver

from athenabench.config import BenchmarkConfig, DriverConfig
from athenabench.metrics import RunReport, evaluate_thresholds
from athenabench.selenium.driver import cleanup_temp_profile, create_driver
from athenabench.workflow.runner import StepHook, WorkflowRunner
from athenabench.workflow.variants import build_workflow

logger = logging.getLogger(__name__)


class WorkflowBenchmark:
    """Coordinate driver start-up, the timed workflow and the threshold check."""

    def __init__(
        self,
        driver_cfg: DriverConfig,
        config: BenchmarkConfig,
        *,
        driver_factory: Callable[..., WebDriver] = create_driver,
        firefox_retry_notifier: Callable[[Exception], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.driver_cfg = driver_cfg
        self.config = config
        self._driver_factory = driver_factory
        self._firefox_retry_notifier = firefox_retry_notifier
        self._clock = clock
        self._sleep = sleep

    def run(self, *, step_hook: StepHook | None = None) -> RunReport:
        # Validation happens before any browser is started.
        workflow = build_workflow(self.config)

        driver = self._start_driver()
        try:
            runner = WorkflowRunner(driver, self.config, clock=self._clock, sleep=self._sleep, step_hook=step_hook)
            report = runner.run(workflow.steps, variant=workflow.variant, stop_at_checkpoint=workflow.stop_at_checkpoint)
            report.violations = evaluate_thresholds(report, workflow.thresholds)

            log_summary(report)
            if self.config.waits.hold_open_s > 0:
                logger.info("Holding the final page open for %.0f s...", self.config.waits.hold_open_s)
                self._sleep(self.config.waits.hold_open_s)
            return report
        finally:
            try:
                driver.quit()
            finally:
                cleanup_temp_profile(driver)

    def _start_driver(self) -> WebDriver:
        return self._driver_factory(self.driver_cfg, firefox_retry_notifier=self._firefox_retry_notifier)


def log_summary(report: RunReport) -> None:
    logger.info("=== %s WORKFLOW PERFORMANCE SUMMARY ===", report.variant.upper())
    for idx, result in enumerate(report.steps, start=1):
        suffix = f" ({result.status.value}: {result.reason})" if result.reason else ""
        logger.info("%d. %s: %d ms%s", idx, result.name, result.duration_ms, suffix)
    logger.info("---")
    logger.info("Total Login Process: %d ms", report.login_ms)
    logger.info("Total Workflow Time: %d ms", report.total_ms)
    if report.passed:
        logger.info("All performance thresholds met.")
    for violation in report.violations:
        logger.error("Threshold exceeded - %s", violation)
