"""Timed browser workflows against the athenahealth clinical web application."""

from .config import BenchmarkConfig, Credentials, DriverConfig, Thresholds, WaitConfig
from .exceptions import (
    CriticalStepError,
    ElementNotFoundError,
    MissingEnvironmentError,
    SetupError,
    StepSkipped,
    ThresholdExceededError,
)

__all__ = [
    "BenchmarkConfig",
    "Credentials",
    "CriticalStepError",
    "DriverConfig",
    "ElementNotFoundError",
    "MissingEnvironmentError",
    "SetupError",
    "StepSkipped",
    "ThresholdExceededError",
    "Thresholds",
    "WaitConfig",
]
