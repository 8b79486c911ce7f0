"""Typed plan models for pddlflow."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict


class PlanningInput(BaseModel):
    """Domain and problem text for a single solve call."""

    domain: str
    problem: str

    model_config = ConfigDict(frozen=True)


class ActionStep(BaseModel):
    """One grounded action of a plan."""

    parallel: bool = False
    action: str
    args: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return " ".join([self.action, *self.args])


Plan = list[ActionStep]


@dataclass(frozen=True, slots=True)
class SolveDiagnostic:
    """Why a solve produced no plan."""

    stage: str
    error_type: str
    message: str


@dataclass(slots=True)
class SolveOutcome:
    """Plan plus the failure, if any, that cut the solve short."""

    plan: Plan = field(default_factory=list)
    diagnostic: SolveDiagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    @classmethod
    def failed(cls, stage: str, exc: BaseException) -> SolveOutcome:
        return cls(
            plan=[],
            diagnostic=SolveDiagnostic(
                stage=stage,
                error_type=type(exc).__name__,
                message=str(exc),
            ),
        )


__all__ = ["ActionStep", "Plan", "PlanningInput", "SolveDiagnostic", "SolveOutcome"]
