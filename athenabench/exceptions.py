"""Custom exception hierarchy for the benchmark flow."""


class SetupError(RuntimeError):
    ...


class MissingEnvironmentError(SetupError):
    def __init__(self, variable: str) -> None:
        super().__init__(f"Missing required environment variable: {variable}")
        self.variable = variable


class ElementNotFoundError(RuntimeError):
    ...


class StepSkipped(Exception):
    """Raised inside a step when its trigger element is absent."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CriticalStepError(RuntimeError):
    def __init__(self, step: str, message: str) -> None:
        super().__init__(message)
        self.step = step


class ThresholdExceededError(AssertionError):
    ...
