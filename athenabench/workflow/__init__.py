"""Timed workflow runner and the athenahealth stages it drives."""

from .runner import StepContext, WorkflowRunner, WorkflowStep
from .steps import Completion, Interaction, UiStep
from .variants import DEFAULT_THRESHOLDS, Workflow, build_workflow

__all__ = [
    "Completion",
    "DEFAULT_THRESHOLDS",
    "Interaction",
    "StepContext",
    "UiStep",
    "Workflow",
    "WorkflowRunner",
    "WorkflowStep",
    "build_workflow",
]
