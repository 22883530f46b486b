"""Declarative UI steps: interactions on resolved controls followed by a completion condition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from athenabench.exceptions import ElementNotFoundError
from athenabench.workflow.runner import StepContext, WorkflowStep

Value = Union[str, Callable[[], str], None]


@dataclass(frozen=True)
class Interaction:
    target: Tuple
    action: str = "click"
    value: Value = None
    label: str = "control"
    optional: bool = False
    timeout_s: Optional[float] = None

    def resolved_value(self) -> Optional[str]:
        return self.value() if callable(self.value) else self.value


@dataclass(frozen=True)
class Completion:
    """What marks the step as done.

    ``kind`` is one of ``visible`` (any of ``target`` becomes visible),
    ``load_state`` (``state`` reached) or ``delay`` (``seconds`` pass).
    """

    kind: str = "visible"
    target: Tuple = ()
    state: str = "domcontentloaded"
    seconds: float = 0.0
    timeout_s: Optional[float] = None
    label: str = "completion indicator"


@dataclass(frozen=True)
class UiStep:
    name: str
    interactions: Tuple[Interaction, ...]
    completion: Completion
    settle_s: float = 0.0
    critical: bool = False
    checkpoint: bool = False
    navigate: bool = False  # open the base URL first; the clock starts at navigation

    def as_workflow_step(self) -> WorkflowStep:
        return WorkflowStep(self.name, self.execute, critical=self.critical, checkpoint=self.checkpoint)

    def execute(self, ctx: StepContext) -> None:
        ctx.pause(self.settle_s)

        triggered = False
        if self.navigate:
            ctx.trigger()
            triggered = True
            ctx.driver.get(ctx.config.base_url)
            ctx.wait_for("domcontentloaded", ctx.config.waits.navigation_timeout_s)

        for interaction in self.interactions:
            hit = ctx.find(interaction.target, timeout_s=interaction.timeout_s)
            if hit is None:
                if interaction.optional:
                    continue
                ctx.skip(f"{interaction.label} not found")
            if not triggered:
                ctx.trigger()
                triggered = True
            ctx.act(hit, interaction.action, interaction.resolved_value())

        await_completion(ctx, self.completion)


def await_completion(ctx: StepContext, completion: Completion) -> None:
    waits = ctx.config.waits
    if completion.kind == "delay":
        ctx.pause(completion.seconds)
    elif completion.kind == "load_state":
        ctx.wait_for(completion.state, completion.timeout_s)
    elif completion.kind == "visible":
        timeout = waits.element_timeout_s if completion.timeout_s is None else completion.timeout_s
        if ctx.find(completion.target, timeout_s=timeout) is None:
            raise ElementNotFoundError(f"{completion.label} not visible within {timeout:g} s")
    else:
        raise ValueError(f"Unknown completion kind {completion.kind!r}")
