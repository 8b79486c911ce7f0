"""Normalize raw planner output into :class:`ActionStep` lists."""

from __future__ import annotations

from .types import ActionStep, Plan

_MIN_TOKENS = 3
_COMMENT = ";"


def _tokens(line: str) -> list[str]:
    return line.replace("(", "").replace(")", "").split()


def parse_plan(text: str) -> Plan:
    """Parse ``(action arg ...)`` lines into steps, in order.

    Comment lines and lines with fewer than three tokens (action plus at least
    two arguments) are dropped silently.
    """

    plan: Plan = []
    for line in text.splitlines():
        tokens = _tokens(line)
        if len(tokens) < _MIN_TOKENS or tokens[0].startswith(_COMMENT):
            continue
        action, *args = tokens
        plan.append(ActionStep(parallel=False, action=action, args=args))
    return plan


__all__ = ["parse_plan"]
