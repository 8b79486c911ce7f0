"""Public package surface for pddlflow."""

from __future__ import annotations

from .config import PollPolicy, SolverSettings
from .errors import (
    FetchTimeoutError,
    PlannerError,
    PollExhaustedError,
    ProcessError,
    SolverServiceError,
    ValidationError,
)
from .fetch import fetch_with_timeout
from .gate import LocalPlannerGate, default_gate
from .local import LocalPlannerRunner, LocalSolver
from .notify import LocalPlannerStatus, NoOpPeerNotifier, PeerNotifier, TeamChannelNotifier
from .parser import parse_plan
from .remote import RemoteSolver
from .solver import offline_solver, online_solver
from .types import ActionStep, Plan, PlanningInput, SolveDiagnostic, SolveOutcome
from .validation import validate_inputs

__all__ = [
    "__version__",
    "ActionStep",
    "FetchTimeoutError",
    "LocalPlannerGate",
    "LocalPlannerRunner",
    "LocalPlannerStatus",
    "LocalSolver",
    "NoOpPeerNotifier",
    "PeerNotifier",
    "Plan",
    "PlannerError",
    "PlanningInput",
    "PollExhaustedError",
    "PollPolicy",
    "ProcessError",
    "RemoteSolver",
    "SolveDiagnostic",
    "SolveOutcome",
    "SolverServiceError",
    "SolverSettings",
    "TeamChannelNotifier",
    "ValidationError",
    "default_gate",
    "fetch_with_timeout",
    "offline_solver",
    "online_solver",
    "parse_plan",
    "validate_inputs",
]

__version__ = "0.1.0"
