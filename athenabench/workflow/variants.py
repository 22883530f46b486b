"""The workflow variants and their default performance bounds."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import List

from athenabench.config import BenchmarkConfig, Thresholds
from athenabench.workflow.athena import (
    PATIENT_MENU_TRIGGER,
    PatientSearch,
    department_selection,
    direct_login_steps,
    practice_selection,
    sso_login,
)
from athenabench.workflow.clinical import clinical_steps, scheduling_steps
from athenabench.workflow.runner import WorkflowStep

DEFAULT_THRESHOLDS = {
    "search": Thresholds(login_ms=20_000, total_ms=180_000),
    "clinical": Thresholds(per_step={"chartLoadDuration": 15_000}, login_ms=20_000, total_ms=180_000),
    "scheduling": Thresholds(per_step={"patientSearchDuration": 3_000}, login_ms=15_000, total_ms=60_000),
    "direct": Thresholds(per_step={"chartLoadDuration": 10_000}, login_ms=15_000, total_ms=120_000),
}


@dataclass
class Workflow:
    variant: str
    steps: List[WorkflowStep]
    stop_at_checkpoint: bool
    thresholds: Thresholds

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]


def _experience_steps(cfg: BenchmarkConfig) -> list[WorkflowStep]:
    search = PatientSearch(term=cfg.search_term, results_url_fragment=cfg.results_url_fragment)
    steps = [
        WorkflowStep("initialLoginDuration", sso_login),
        WorkflowStep("departmentSelectionDuration", department_selection),
        WorkflowStep("searchDuration", search, critical=True, checkpoint=True),
    ]
    steps.extend(step.as_workflow_step() for step in clinical_steps(cfg.search_term))
    return steps


def _scheduling_steps(cfg: BenchmarkConfig) -> list[WorkflowStep]:
    search = PatientSearch(
        term=cfg.patient_id,
        results_url_fragment=None,
        results_indicators=PATIENT_MENU_TRIGGER,
        use_autocomplete=False,
    )
    steps = [
        WorkflowStep("practiceSelectionDuration", practice_selection),
        WorkflowStep("departmentSelectionDuration", department_selection),
        WorkflowStep("patientSearchDuration", search, critical=True),
    ]
    steps.extend(step.as_workflow_step() for step in scheduling_steps())
    return steps


def _direct_steps(cfg: BenchmarkConfig) -> list[WorkflowStep]:
    steps = direct_login_steps(cfg) + clinical_steps(cfg.search_term)
    return [step.as_workflow_step() for step in steps]


def build_workflow(cfg: BenchmarkConfig) -> Workflow:
    cfg.validate()
    thresholds = cfg.thresholds if cfg.thresholds is not None else deepcopy(DEFAULT_THRESHOLDS[cfg.variant])
    if cfg.variant == "scheduling":
        return Workflow("scheduling", _scheduling_steps(cfg), stop_at_checkpoint=False, thresholds=thresholds)
    if cfg.variant == "direct":
        return Workflow("direct", _direct_steps(cfg), stop_at_checkpoint=False, thresholds=thresholds)
    return Workflow(
        cfg.variant,
        _experience_steps(cfg),
        stop_at_checkpoint=cfg.variant == "search",
        thresholds=thresholds,
    )
