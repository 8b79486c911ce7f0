"""Local solving strategy backed by an installed planner executable."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from .config import SolverSettings
from .errors import ProcessError, ValidationError
from .gate import LocalPlannerGate, default_gate
from .parser import parse_plan
from .types import Plan, SolveOutcome
from .validation import validate_inputs

logger = logging.getLogger("pddlflow.local")

_REAP_TIMEOUT_S = 1.0


def _write_exact(path: Path, text: str) -> None:
    payload = text.encode("utf-8")
    try:
        written = path.write_bytes(payload)
    except OSError as exc:
        raise ProcessError(f"Failed to write {path}: {exc}") from exc
    if written != len(payload):
        raise ProcessError(f"Short write to {path}: {written} of {len(payload)} bytes")


async def _forward(stream: asyncio.StreamReader | None, target: TextIO) -> None:
    if stream is None:
        return
    async for line in stream:
        target.write(line.decode("utf-8", errors="replace"))
        target.flush()


@dataclass(slots=True)
class LocalPlannerRunner:
    """Run the planner binary once against fixed scratch files.

    The child gets its own process group, a closed stdin, and has its output
    forwarded live to ``stdout``/``stderr`` (the interpreter's streams when
    unset). At the deadline the whole group is killed.
    """

    settings: SolverSettings = field(default_factory=SolverSettings)
    stdout: TextIO | None = None
    stderr: TextIO | None = None

    def command(self) -> list[str]:
        s = self.settings
        return [*s.planner_command, str(s.domain_path), str(s.problem_path), *s.search_args]

    async def run(self, domain: str, problem: str) -> str | None:
        """Return the plan file contents, or ``None`` when there is no plan."""

        _write_exact(self.settings.domain_path, domain)
        _write_exact(self.settings.problem_path, problem)
        logger.debug(
            "scratch_files_written",
            extra={
                "event": "scratch_files_written",
                "domain_path": str(self.settings.domain_path),
                "problem_path": str(self.settings.problem_path),
            },
        )
        self._clear_stale_plan()

        process = await self._spawn()
        pumps = [
            asyncio.create_task(_forward(process.stdout, self.stdout or sys.stdout)),
            asyncio.create_task(_forward(process.stderr, self.stderr or sys.stderr)),
        ]
        try:
            if not await self._wait_for_exit(process):
                logger.warning(
                    "planner_deadline_exceeded",
                    extra={
                        "event": "planner_deadline_exceeded",
                        "pid": process.pid,
                        "deadline_s": self.settings.deadline_s,
                    },
                )
                self._kill(process)
            await self._reap(process)
        except BaseException:
            if process.returncode is None:
                self._kill(process)
            raise
        finally:
            await self._drain(pumps)

        return self._read_plan()

    async def _spawn(self) -> asyncio.subprocess.Process:
        cmd = self.command()
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.settings.work_dir,
                start_new_session=True,
            )
        except OSError as exc:
            raise ProcessError(f"Failed to start planner {cmd[0]!r}: {exc}") from exc
        logger.debug("planner_spawned", extra={"event": "planner_spawned", "pid": process.pid, "command": cmd})
        return process

    async def _wait_for_exit(self, process: asyncio.subprocess.Process) -> bool:
        loop = asyncio.get_running_loop()
        started = loop.time()
        while process.returncode is None and loop.time() - started < self.settings.deadline_s:
            await asyncio.sleep(self.settings.poll_interval_s)
        return process.returncode is not None

    def _kill(self, process: asyncio.subprocess.Process) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except OSError as exc:
            logger.warning(
                "planner_kill_failed",
                extra={"event": "planner_kill_failed", "pid": process.pid, "exception": exc},
            )

    async def _reap(self, process: asyncio.subprocess.Process) -> None:
        try:
            await asyncio.wait_for(process.wait(), timeout=_REAP_TIMEOUT_S)
        except TimeoutError:
            logger.warning("planner_not_reaped", extra={"event": "planner_not_reaped", "pid": process.pid})

    async def _drain(self, pumps: list[asyncio.Task[None]]) -> None:
        _, pending = await asyncio.wait(pumps, timeout=_REAP_TIMEOUT_S)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pumps, return_exceptions=True)

    def _clear_stale_plan(self) -> None:
        self.settings.resolved_plan_path().unlink(missing_ok=True)

    def _read_plan(self) -> str | None:
        path = self.settings.resolved_plan_path()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning(
                "plan_file_unreadable",
                extra={"event": "plan_file_unreadable", "path": str(path), "exception": exc},
            )
            return None
        if not text.strip():
            return None
        logger.debug("plan_file_read", extra={"event": "plan_file_read", "path": str(path), "plan": text})
        return text


@dataclass(slots=True)
class LocalSolver:
    """Gate-serialized local solving."""

    runner: LocalPlannerRunner = field(default_factory=LocalPlannerRunner)
    gate: LocalPlannerGate = field(default_factory=default_gate)

    async def solve_outcome(self, domain: Any, problem: Any) -> SolveOutcome:
        try:
            request = validate_inputs(domain, problem)
        except ValidationError as exc:
            return SolveOutcome.failed("validate", exc)

        stage = "gate"
        try:
            async with self.gate.hold():
                stage = "run"
                raw_plan = await self.runner.run(request.domain, request.problem)
                if not raw_plan:
                    return SolveOutcome()
                stage = "parse"
                plan = parse_plan(raw_plan)
            logger.info("local_plan_received", extra={"event": "local_plan_received", "steps": len(plan)})
            return SolveOutcome(plan=plan)
        except Exception as exc:  # noqa: BLE001
            return SolveOutcome.failed(stage, exc)

    async def solve(self, domain: Any, problem: Any) -> Plan:
        outcome = await self.solve_outcome(domain, problem)
        if outcome.diagnostic is not None:
            logger.error(
                "offline_solver_failed",
                extra={
                    "event": "offline_solver_failed",
                    "stage": outcome.diagnostic.stage,
                    "error_type": outcome.diagnostic.error_type,
                    "error": outcome.diagnostic.message,
                },
            )
        return outcome.plan


__all__ = ["LocalPlannerRunner", "LocalSolver"]
