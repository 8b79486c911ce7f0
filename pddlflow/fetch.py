"""Single outbound request bounded by a wall-clock deadline."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from .errors import FetchTimeoutError

DEFAULT_TIMEOUT_S = 8.0


async def fetch_with_timeout(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    **kwargs: Any,
) -> httpx.Response:
    """Issue one request, cancelling it if ``timeout_s`` elapses first.

    The response is returned as-is; status codes are left to the caller.
    The same deadline is handed to httpx, overriding the client default.
    Timeouts surface as :class:`FetchTimeoutError`, other transport errors
    propagate unchanged. No retries.
    """

    try:
        async with asyncio.timeout(timeout_s):
            return await client.request(method, url, timeout=timeout_s, **kwargs)
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError(url, timeout_s) from exc
    except TimeoutError as exc:
        raise FetchTimeoutError(url, timeout_s) from exc


__all__ = ["DEFAULT_TIMEOUT_S", "fetch_with_timeout"]
