"""Remote solving strategy backed by a hosted planning service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import PollPolicy, SolverSettings
from .errors import PollExhaustedError, SolverServiceError
from .fetch import fetch_with_timeout
from .parser import parse_plan
from .types import Plan, SolveOutcome
from .validation import validate_inputs

logger = logging.getLogger("pddlflow.remote")

PENDING = "PENDING"
_JSON_HEADERS = {"Content-Type": "application/json"}


def _service_error_message(body: Mapping[str, Any]) -> str:
    result = body.get("result")
    if isinstance(result, Mapping):
        error = result.get("error")
        if error:
            return str(error)
    return "Unknown error"


def _decode_body(response: httpx.Response, url: str) -> Mapping[str, Any]:
    if not response.is_success:
        reason = response.reason_phrase or str(response.status_code)
        raise SolverServiceError(
            f"Error at {url}: {reason}",
            status_code=response.status_code,
            detail=response.text or None,
        )
    try:
        body = response.json()
    except ValueError as exc:
        raise SolverServiceError(f"Error at {url}: response is not JSON") from exc
    if not isinstance(body, Mapping):
        raise SolverServiceError(f"Error at {url}: unexpected response payload")
    if body.get("status") == "error":
        raise SolverServiceError(f"Error at {url}: {_service_error_message(body)}")
    return body


def _extract_plan_text(body: Mapping[str, Any], url: str) -> str | None:
    result = body.get("result")
    output = result.get("output") if isinstance(result, Mapping) else None
    if not isinstance(output, Mapping):
        raise SolverServiceError(f"Error at {url}: response has no plan output")
    plan = output.get("sas_plan")
    if plan is None:
        return None
    return str(plan)


@dataclass(slots=True)
class RemoteSolver:
    """Submit a problem to the planning service and poll until the plan is ready.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one backed by ``httpx.MockTransport``); otherwise a client is opened per
    call.
    """

    settings: SolverSettings = field(default_factory=SolverSettings)
    client: httpx.AsyncClient | None = None

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient(timeout=self.settings.request_timeout_s) as client:
            yield client

    async def submit(self, domain: str, problem: str) -> str | None:
        """Post the problem; return the job handle, or ``None`` if there is none."""

        async with self._client_context() as client:
            return await self._submit(client, domain, problem)

    async def poll(self, url: str, policy: PollPolicy | None = None) -> str | None:
        """Poll ``url`` until the job leaves ``PENDING``; return the raw plan text."""

        async with self._client_context() as client:
            return await self._poll(client, url, policy or self.settings.poll)

    async def _submit(self, client: httpx.AsyncClient, domain: str, problem: str) -> str | None:
        url = self.settings.submit_url
        try:
            response = await fetch_with_timeout(
                client,
                "POST",
                url,
                timeout_s=self.settings.request_timeout_s,
                headers=_JSON_HEADERS,
                json={"domain": domain, "problem": problem, "number_of_plans": 1},
            )
            body = _decode_body(response, url)
        except Exception as exc:
            logger.warning(
                "remote_submit_failed",
                extra={"event": "remote_submit_failed", "url": url, "exception": exc},
            )
            raise
        handle = body.get("result")
        if not handle or not isinstance(handle, str):
            logger.debug("remote_submit_no_handle", extra={"event": "remote_submit_no_handle", "url": url})
            return None
        return handle

    async def _poll_once(self, client: httpx.AsyncClient, url: str) -> Mapping[str, Any]:
        response = await fetch_with_timeout(
            client,
            "GET",
            url,
            timeout_s=self.settings.request_timeout_s,
            headers=_JSON_HEADERS,
        )
        return _decode_body(response, url)

    async def _poll(self, client: httpx.AsyncClient, url: str, policy: PollPolicy) -> str | None:
        last_error: Exception | None = None
        for attempt in range(1, policy.max_attempts + 1):
            await asyncio.sleep(policy.delay_for(attempt))
            try:
                body = await self._poll_once(client, url)
                if body.get("status") == PENDING:
                    logger.debug(
                        "remote_poll_pending",
                        extra={"event": "remote_poll_pending", "url": url, "attempt": attempt},
                    )
                    continue
                return _extract_plan_text(body, url)
            except (httpx.HTTPError, TimeoutError, SolverServiceError) as exc:
                last_error = exc
                logger.warning(
                    "remote_poll_attempt_failed",
                    extra={
                        "event": "remote_poll_attempt_failed",
                        "url": url,
                        "attempt": attempt,
                        "max_attempts": policy.max_attempts,
                        "exception": exc,
                    },
                )
        raise PollExhaustedError(policy.max_attempts, last_error=last_error)

    async def solve_outcome(self, domain: Any, problem: Any) -> SolveOutcome:
        """Run the full remote chain, reporting failure as a diagnostic."""

        stage = "validate"
        try:
            request = validate_inputs(domain, problem)
            async with self._client_context() as client:
                stage = "submit"
                handle = await self._submit(client, request.domain, request.problem)
                if not handle:
                    return SolveOutcome()
                stage = "poll"
                raw_plan = await self._poll(client, self.settings.resolve_handle(handle), self.settings.poll)
            if not raw_plan:
                return SolveOutcome()
            stage = "parse"
            plan = parse_plan(raw_plan)
            logger.info("remote_plan_received", extra={"event": "remote_plan_received", "steps": len(plan)})
            return SolveOutcome(plan=plan)
        except Exception as exc:  # noqa: BLE001
            return SolveOutcome.failed(stage, exc)

    async def solve(self, domain: Any, problem: Any) -> Plan:
        outcome = await self.solve_outcome(domain, problem)
        if outcome.diagnostic is not None:
            logger.error(
                "online_solver_failed",
                extra={
                    "event": "online_solver_failed",
                    "stage": outcome.diagnostic.stage,
                    "error_type": outcome.diagnostic.error_type,
                    "error": outcome.diagnostic.message,
                },
            )
        return outcome.plan


__all__ = ["PENDING", "PollPolicy", "RemoteSolver"]
