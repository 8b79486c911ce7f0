"""Solve a tiny blocks problem through the hosted planning service."""

from __future__ import annotations

import asyncio
import logging

from pddlflow import RemoteSolver, SolverSettings, online_solver

DOMAIN = """
(define (domain gripper)
  (:requirements :strips)
  (:predicates (at ?b ?r) (at-robby ?r) (carry ?b) (free))
  (:action pick
    :parameters (?b ?r)
    :precondition (and (at ?b ?r) (at-robby ?r) (free))
    :effect (and (carry ?b) (not (at ?b ?r)) (not (free)))))
"""

PROBLEM = """
(define (problem pick-one)
  (:domain gripper)
  (:objects ball1 rooma)
  (:init (at ball1 rooma) (at-robby rooma) (free))
  (:goal (carry ball1)))
"""


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = SolverSettings.from_env()
    plan = await online_solver(DOMAIN, PROBLEM, solver=RemoteSolver(settings=settings))
    for step in plan:
        print(step)
    if not plan:
        print("no plan (see log for the reason)")


if __name__ == "__main__":  # pragma: no cover - example entrypoint
    asyncio.run(main())
