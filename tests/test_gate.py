import asyncio

import pytest

from pddlflow import LocalPlannerGate, LocalPlannerStatus, TeamChannelNotifier, default_gate


class RecordingNotifier:
    def __init__(
        self,
        events: list[str] | None = None,
        *,
        fail_on_acquire: bool = False,
        fail_on_release: bool = False,
    ) -> None:
        self.events = events if events is not None else []
        self.fail_on_acquire = fail_on_acquire
        self.fail_on_release = fail_on_release

    async def notify(self, status: LocalPlannerStatus) -> None:
        self.events.append(f"notify:{status.local_planner}")
        if self.fail_on_acquire and status.local_planner:
            raise ConnectionError("team channel down")
        if self.fail_on_release and not status.local_planner:
            raise ConnectionError("team channel down")


@pytest.mark.asyncio
async def test_hold_marks_busy_and_announces_both_edges() -> None:
    notifier = RecordingNotifier()
    gate = LocalPlannerGate(notifier)

    assert gate.busy is False
    async with gate.hold():
        assert gate.busy is True
        assert notifier.events == ["notify:True"]

    assert gate.busy is False
    assert notifier.events == ["notify:True", "notify:False"]


@pytest.mark.asyncio
async def test_hold_releases_when_body_raises() -> None:
    notifier = RecordingNotifier()
    gate = LocalPlannerGate(notifier)

    with pytest.raises(RuntimeError, match="planner crashed"):
        async with gate.hold():
            raise RuntimeError("planner crashed")

    assert gate.busy is False
    assert notifier.events == ["notify:True", "notify:False"]


@pytest.mark.asyncio
async def test_release_notify_failure_still_frees_the_gate() -> None:
    notifier = RecordingNotifier(fail_on_release=True)
    gate = LocalPlannerGate(notifier)

    async with gate.hold():
        pass

    assert gate.busy is False
    async with asyncio.timeout(1):
        async with gate.hold():
            assert gate.busy is True


@pytest.mark.asyncio
async def test_concurrent_holders_are_serialized() -> None:
    events: list[str] = []
    gate = LocalPlannerGate(RecordingNotifier(events))

    async def worker(name: str) -> None:
        async with gate.hold():
            events.append(f"{name}:start")
            await asyncio.sleep(0.02)
            events.append(f"{name}:end")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == [
        "notify:True",
        "a:start",
        "a:end",
        "notify:False",
        "notify:True",
        "b:start",
        "b:end",
        "notify:False",
    ]


@pytest.mark.asyncio
async def test_team_channel_notifier_broadcasts_status_payload() -> None:
    said: list[tuple[str, dict]] = []

    async def say(team_id: str, payload) -> None:
        said.append((team_id, dict(payload)))

    gate = LocalPlannerGate(TeamChannelNotifier(say=say, team_id="team-7"))
    async with gate.hold():
        pass

    assert said == [
        ("team-7", {"kind": "local_planner_status", "local_planner": True}),
        ("team-7", {"kind": "local_planner_status", "local_planner": False}),
    ]


@pytest.mark.asyncio
async def test_acquire_notify_failure_announces_release_and_frees_the_gate() -> None:
    notifier = RecordingNotifier(fail_on_acquire=True)
    gate = LocalPlannerGate(notifier)

    with pytest.raises(ConnectionError):
        async with gate.hold():
            pytest.fail("body must not run when the busy announcement fails")

    assert gate.busy is False
    assert notifier.events == ["notify:True", "notify:False"]

    notifier.fail_on_acquire = False
    async with asyncio.timeout(1):
        async with gate.hold():
            assert gate.busy is True


async def _contend(gate: LocalPlannerGate, events: list[str]) -> None:
    async def worker(name: str) -> None:
        async with gate.hold():
            events.append(name)
            await asyncio.sleep(0.01)

    await asyncio.gather(worker("a"), worker("b"))


def test_gate_survives_successive_event_loops() -> None:
    gate = LocalPlannerGate()
    events: list[str] = []

    asyncio.run(_contend(gate, events))
    asyncio.run(_contend(gate, events))

    assert events == ["a", "b", "a", "b"]
    assert gate.busy is False


def test_default_gate_is_shared_across_event_loops() -> None:
    events: list[str] = []

    asyncio.run(_contend(default_gate(), events))
    asyncio.run(_contend(default_gate(), events))

    assert events == ["a", "b", "a", "b"]
