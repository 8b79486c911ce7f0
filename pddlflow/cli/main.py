"""pddlflow command-line interface."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from .. import __version__
from ..config import SolverSettings
from ..local import LocalPlannerRunner, LocalSolver
from ..parser import parse_plan
from ..remote import RemoteSolver
from ..solver import offline_solver, online_solver
from ..types import Plan

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _echo_plan(plan: Plan, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([step.model_dump() for step in plan], indent=2))
        return
    for step in plan:
        click.echo(str(step))


@click.group()
@click.version_option(version=__version__, prog_name="pddlflow")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    show_default=True,
    help="Logging verbosity for solver diagnostics.",
)
def app(log_level: str) -> None:
    """pddlflow CLI - solve PDDL problems with a hosted or local planner."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
@click.argument("domain_file", type=_FILE)
@click.argument("problem_file", type=_FILE)
@click.option(
    "--strategy",
    "-s",
    default="online",
    type=click.Choice(["online", "offline"], case_sensitive=False),
    show_default=True,
    help="Solve through the planning service (online) or the local planner (offline).",
)
@click.option(
    "--base-url",
    default=None,
    help="Planning service URL (defaults to $PDDLFLOW_SOLVER_URL).",
)
@click.option(
    "--deadline",
    type=float,
    default=None,
    help="Seconds before the local planner is killed.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the plan as a JSON array of steps.",
)
def solve(
    domain_file: Path,
    problem_file: Path,
    strategy: str,
    base_url: str | None,
    deadline: float | None,
    as_json: bool,
) -> None:
    """Solve DOMAIN_FILE / PROBLEM_FILE and print the plan."""
    settings = SolverSettings.from_env(base_url=base_url, deadline_s=deadline)
    domain = domain_file.read_text(encoding="utf-8")
    problem = problem_file.read_text(encoding="utf-8")

    if strategy.lower() == "offline":
        local = LocalSolver(runner=LocalPlannerRunner(settings=settings, stdout=sys.stderr))
        plan = asyncio.run(offline_solver(domain, problem, solver=local))
    else:
        plan = asyncio.run(online_solver(domain, problem, solver=RemoteSolver(settings=settings)))

    if not plan:
        click.echo("✗ No plan found", err=True)
        sys.exit(1)
    _echo_plan(plan, as_json)


@app.command()
@click.argument("plan_file", type=_FILE)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the plan as a JSON array of steps.",
)
def parse(plan_file: Path, as_json: bool) -> None:
    """Normalize an existing planner output file."""
    plan = parse_plan(plan_file.read_text(encoding="utf-8"))
    if not plan:
        click.echo("✗ No actions in plan file", err=True)
        sys.exit(1)
    _echo_plan(plan, as_json)


if __name__ == "__main__":  # pragma: no cover
    app()
