from __future__ import annotations

from typing import Any

from .errors import ValidationError
from .types import PlanningInput


def validate_inputs(domain: Any, problem: Any) -> PlanningInput:
    """Raise :class:`ValidationError` unless both values are text."""

    if not isinstance(domain, str):
        raise ValidationError(f"domain must be a string, got {type(domain).__name__}")
    if not isinstance(problem, str):
        raise ValidationError(f"problem must be a string, got {type(problem).__name__}")
    return PlanningInput(domain=domain, problem=problem)


__all__ = ["validate_inputs"]
