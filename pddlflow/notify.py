"""Peer notifications announcing local planner occupancy.

The messaging layer itself lives outside this package; callers inject a
notifier that knows how to reach their team channel.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from pydantic import BaseModel

LOCAL_PLANNER_STATUS = "local_planner_status"


class LocalPlannerStatus(BaseModel):
    kind: Literal["local_planner_status"] = LOCAL_PLANNER_STATUS
    local_planner: bool


class PeerNotifier(Protocol):
    async def notify(self, status: LocalPlannerStatus) -> None: ...


class NoOpPeerNotifier:
    async def notify(self, status: LocalPlannerStatus) -> None:
        _ = status
        return None


SayCallable = Callable[[str, Mapping[str, Any]], Awaitable[Any]]


@dataclass(slots=True)
class TeamChannelNotifier:
    """Broadcast status messages to a team through an injected ``say`` coroutine."""

    say: SayCallable
    team_id: str

    async def notify(self, status: LocalPlannerStatus) -> None:
        await self.say(self.team_id, status.model_dump(mode="json"))


__all__ = [
    "LOCAL_PLANNER_STATUS",
    "LocalPlannerStatus",
    "NoOpPeerNotifier",
    "PeerNotifier",
    "TeamChannelNotifier",
]
