"""Serialize local planner runs across concurrent callers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from weakref import WeakKeyDictionary

from .notify import LocalPlannerStatus, NoOpPeerNotifier, PeerNotifier

logger = logging.getLogger("pddlflow.gate")


class LocalPlannerGate:
    """Owns the local planner busy flag.

    Only one :meth:`hold` block runs at a time. Entering announces occupancy
    to peers; leaving, by any path, clears the flag and announces release.

    ``asyncio.Lock`` binds to the first loop that waits on it, so one lock is
    kept per running loop. A gate shared across successive ``asyncio.run``
    calls keeps working.
    """

    __slots__ = ("_locks", "_busy", "_notifier")

    def __init__(self, notifier: PeerNotifier | None = None) -> None:
        self._locks: WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock] = WeakKeyDictionary()
        self._busy = False
        self._notifier: PeerNotifier = notifier or NoOpPeerNotifier()

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def notifier(self) -> PeerNotifier:
        return self._notifier

    @notifier.setter
    def notifier(self, notifier: PeerNotifier) -> None:
        self._notifier = notifier

    def _lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        lock = self._locks.get(loop)
        if lock is None:
            lock = self._locks[loop] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        async with self._lock():
            self._busy = True
            try:
                await self._notifier.notify(LocalPlannerStatus(local_planner=True))
            except BaseException:
                self._busy = False
                # peers may have seen the busy edge before the failure
                await self._announce_release()
                raise
            logger.debug("local_planner_acquired", extra={"event": "local_planner_acquired"})
            try:
                yield
            finally:
                self._busy = False
                await self._announce_release()
                logger.debug("local_planner_released", extra={"event": "local_planner_released"})

    async def _announce_release(self) -> None:
        try:
            await self._notifier.notify(LocalPlannerStatus(local_planner=False))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "local_planner_release_notify_failed",
                extra={"event": "local_planner_release_notify_failed", "exception": exc},
            )


_default_gate: LocalPlannerGate | None = None


def default_gate() -> LocalPlannerGate:
    """Process-wide gate shared by callers that don't bring their own."""

    global _default_gate
    if _default_gate is None:
        _default_gate = LocalPlannerGate()
    return _default_gate


__all__ = ["LocalPlannerGate", "default_gate"]
