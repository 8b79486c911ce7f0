"""Run two local solves at once and watch the gate announce occupancy."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from pddlflow import LocalPlannerGate, LocalPlannerRunner, LocalSolver, SolverSettings, TeamChannelNotifier

DOMAIN = "(define (domain noop) (:requirements :strips))"
PROBLEM = "(define (problem nothing) (:domain noop) (:init) (:goal (and)))"


async def say(team_id: str, payload: Mapping[str, Any]) -> None:
    print(f"[{team_id}] {dict(payload)}")


async def main() -> None:
    settings = SolverSettings.from_env()
    gate = LocalPlannerGate(TeamChannelNotifier(say=say, team_id=settings.team_id or "team"))
    solver = LocalSolver(runner=LocalPlannerRunner(settings=settings), gate=gate)

    plans = await asyncio.gather(solver.solve(DOMAIN, PROBLEM), solver.solve(DOMAIN, PROBLEM))
    for index, plan in enumerate(plans):
        print(index, [str(step) for step in plan])


if __name__ == "__main__":  # pragma: no cover - example entrypoint
    asyncio.run(main())
