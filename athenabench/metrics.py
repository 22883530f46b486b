"""Metrics record, step outcomes and threshold evaluation for one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional

from athenabench.config import Thresholds
from athenabench.exceptions import ThresholdExceededError

LOGIN_METRICS = ("loginDuration", "initialLoginDuration", "practiceSelectionDuration", "departmentSelectionDuration")


class MetricsRecord(Mapping[str, int]):
    """Append-only mapping of step name to elapsed milliseconds."""

    def __init__(self) -> None:
        self._values: Dict[str, int] = {}

    def record(self, name: str, duration_ms: int) -> None:
        if name in self._values:
            raise ValueError(f"Metric {name!r} already recorded.")
        duration_ms = int(duration_ms)
        if duration_ms < 0:
            raise ValueError(f"Metric {name!r} cannot be negative ({duration_ms} ms).")
        self._values[name] = duration_ms

    @property
    def total(self) -> int:
        return sum(self._values.values())

    def __getitem__(self, name: str) -> int:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"MetricsRecord({self._values!r})"


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    name: str
    status: StepStatus
    duration_ms: int = 0
    reason: Optional[str] = None
    manual: bool = False  # waited out for an operator instead of measuring the app


@dataclass
class ThresholdViolation:
    metric: str
    limit_ms: int
    actual_ms: int

    def __str__(self) -> str:
        return f"{self.metric}: {self.actual_ms} ms exceeds limit of {self.limit_ms} ms"


@dataclass
class RunReport:
    variant: str
    metrics: MetricsRecord = field(default_factory=MetricsRecord)
    steps: List[StepResult] = field(default_factory=list)
    stopped_at_checkpoint: bool = False
    violations: List[ThresholdViolation] = field(default_factory=list)

    @property
    def total_ms(self) -> int:
        return self.metrics.total

    @property
    def login_ms(self) -> int:
        return sum(self.metrics.get(name, 0) for name in LOGIN_METRICS)

    @property
    def measured_login_ms(self) -> int:
        """Login time excluding steps completed by hand."""
        manual = {s.name for s in self.steps if s.manual}
        return sum(self.metrics.get(name, 0) for name in LOGIN_METRICS if name not in manual)

    @property
    def passed(self) -> bool:
        return not self.violations

    def step(self, name: str) -> Optional[StepResult]:
        return next((s for s in self.steps if s.name == name), None)

    def raise_for_thresholds(self) -> None:
        if self.violations:
            raise ThresholdExceededError("; ".join(str(v) for v in self.violations))


def evaluate_thresholds(report: RunReport, thresholds: Thresholds) -> List[ThresholdViolation]:
    """Compare measured durations against their bounds.

    Unmeasured (zero) metrics and manually completed steps are ignored; the
    total is always checked.
    """
    violations: list[ThresholdViolation] = []
    manual = {s.name for s in report.steps if s.manual}

    for name, limit in thresholds.per_step.items():
        actual = 0 if name in manual else report.metrics.get(name, 0)
        if actual > 0 and actual >= limit:
            violations.append(ThresholdViolation(name, limit, actual))

    login = report.measured_login_ms
    if thresholds.login_ms is not None and login > 0 and login >= thresholds.login_ms:
        violations.append(ThresholdViolation("totalLoginDuration", thresholds.login_ms, login))

    if thresholds.total_ms is not None and report.total_ms >= thresholds.total_ms:
        violations.append(ThresholdViolation("totalWorkflowDuration", thresholds.total_ms, report.total_ms))

    return violations
