"""Public solving entry points.

Both functions are best-effort: they never raise, and an empty list is the
single "no plan" signal, whether no plan exists or solving failed. Use
``RemoteSolver.solve_outcome`` / ``LocalSolver.solve_outcome`` to see why.
"""

from __future__ import annotations

from typing import Any

from .local import LocalSolver
from .remote import RemoteSolver
from .types import Plan


async def online_solver(domain: Any, problem: Any, *, solver: RemoteSolver | None = None) -> Plan:
    """Solve through the hosted planning service."""

    return await (solver or RemoteSolver()).solve(domain, problem)


async def offline_solver(domain: Any, problem: Any, *, solver: LocalSolver | None = None) -> Plan:
    """Solve with the local planner, one run at a time."""

    return await (solver or LocalSolver()).solve(domain, problem)


__all__ = ["offline_solver", "online_solver"]
