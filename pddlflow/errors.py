"""Error taxonomy for the solving layer.

Helpers raise these upward; only the public solver entry points swallow them.
"""

from __future__ import annotations


class PlannerError(Exception):
    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(PlannerError, TypeError):
    """Domain or problem is not text."""


class FetchTimeoutError(PlannerError, TimeoutError):
    """An outbound request exceeded its deadline."""

    def __init__(self, url: str, timeout_s: float) -> None:
        super().__init__(f"Request to {url} timed out after {timeout_s:g}s")
        self.url = url
        self.timeout_s = timeout_s


class SolverServiceError(PlannerError):
    """The planning service failed, answered non-2xx, or sent a malformed body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.status_code = status_code


class PollExhaustedError(PlannerError):
    """The polling budget ran out before the plan was ready."""

    def __init__(self, attempts: int, *, last_error: BaseException | None = None) -> None:
        message = f"Plan not ready after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ProcessError(PlannerError):
    """Local planner could not be spawned, or its files could not be written."""


__all__ = [
    "FetchTimeoutError",
    "PlannerError",
    "PollExhaustedError",
    "ProcessError",
    "SolverServiceError",
    "ValidationError",
]
