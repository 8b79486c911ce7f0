"""Configuration models for the remote and local solvers."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "http://localhost:5001"
DEFAULT_PLANNER = "lama-first"

DEFAULT_PLANNER_COMMAND = ("python", "/opt/fast-downward/fast-downward.py")
DEFAULT_SEARCH_ARGS = (
    "--evaluator",
    "hcea=cea()",
    "--search",
    "lazy_greedy([hcea], preferred=[hcea])",
)

ENV_PREFIX = "PDDLFLOW_"


class PollPolicy(BaseModel):
    """Polling cadence for pending remote jobs.

    ``backoff_mult`` defaults to 1.0, which keeps the delay between attempts
    fixed at ``base_delay_s``. Values above 1.0 grow the delay geometrically,
    capped by ``max_delay_s`` when set.
    """

    max_attempts: int = Field(default=10, ge=1)
    base_delay_s: float = Field(default=0.1, ge=0.0)
    backoff_mult: float = Field(default=1.0, ge=1.0)
    max_delay_s: float | None = Field(default=None, gt=0.0)

    def delay_for(self, attempt: int) -> float:
        """Delay before ``attempt`` (1-based)."""

        delay = self.base_delay_s * (self.backoff_mult ** (attempt - 1))
        if self.max_delay_s is not None:
            delay = min(delay, self.max_delay_s)
        return delay


class SolverSettings(BaseModel):
    # Remote service
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Planning service root URL")
    planner: str = Field(default=DEFAULT_PLANNER, description="Service-side planner package")
    request_timeout_s: float = Field(default=8.0, gt=0.0)
    poll: PollPolicy = Field(default_factory=PollPolicy)

    # Local planner
    planner_command: list[str] = Field(default_factory=lambda: list(DEFAULT_PLANNER_COMMAND))
    search_args: list[str] = Field(default_factory=lambda: list(DEFAULT_SEARCH_ARGS))
    domain_path: Path = Path("/tmp/domain.pddl")
    problem_path: Path = Path("/tmp/problem.pddl")
    plan_path: Path = Field(default=Path("sas_plan"), description="Relative paths resolve against work_dir")
    work_dir: Path | None = Field(default=None, description="Child working directory (None = current)")
    deadline_s: float = Field(default=3.0, gt=0.0)
    poll_interval_s: float = Field(default=0.1, gt=0.0)

    # Team channel
    team_id: str | None = None

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must be non-empty")
        return value

    @field_validator("planner_command")
    @classmethod
    def _require_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("planner_command must be non-empty")
        return value

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}/package/{self.planner}/solve"

    def resolve_handle(self, handle: str) -> str:
        """Turn the service's relative job path into a polling URL."""

        if handle.startswith(("http://", "https://")):
            return handle
        return f"{self.base_url}{handle}"

    def resolved_plan_path(self) -> Path:
        if self.plan_path.is_absolute():
            return self.plan_path
        base = self.work_dir if self.work_dir is not None else Path.cwd()
        return base / self.plan_path

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> SolverSettings:
        """Build settings from ``PDDLFLOW_*`` variables; keyword overrides win."""

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        simple = {
            "SOLVER_URL": "base_url",
            "PLANNER": "planner",
            "REQUEST_TIMEOUT_S": "request_timeout_s",
            "DEADLINE_S": "deadline_s",
            "WORK_DIR": "work_dir",
            "TEAM_ID": "team_id",
        }
        for suffix, key in simple.items():
            raw = env.get(f"{ENV_PREFIX}{suffix}")
            if raw:
                values[key] = raw
        command = env.get(f"{ENV_PREFIX}PLANNER_COMMAND")
        if command:
            values["planner_command"] = shlex.split(command)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PLANNER",
    "DEFAULT_PLANNER_COMMAND",
    "DEFAULT_SEARCH_ARGS",
    "PollPolicy",
    "SolverSettings",
]
