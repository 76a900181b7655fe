"""Tests for PresenceLifecycle."""

import pytest

from community_hub.adapters.presence import ConnectionRegistry
from community_hub.application.services import PresenceLifecycle
from community_hub.domain.models import NotJoinedError, PresenceStatus
from community_hub.domain.models.hub_events import JoinEvent

from conftest import RecordingEmitter


def _join(user: str, name: str) -> JoinEvent:
    return JoinEvent(logical_user_id=user, display_name=name)


@pytest.mark.asyncio
async def test_join_broadcasts_snapshot_including_joiner(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given an empty hub, when a user joins, then everyone receives the full online list."""
    lifecycle = PresenceLifecycle(registry, emitter)

    record = await lifecycle.join("A1", _join("alice", "Alice"))

    assert record.logical_user_id == "alice"
    broadcasts = emitter.broadcasts("online-users")
    assert len(broadcasts) == 1
    assert broadcasts[0].skip is None
    assert broadcasts[0].payload == [
        {
            "connectionId": "A1",
            "logicalUserId": "alice",
            "displayName": "Alice",
            "avatarUrl": None,
            "status": "online",
        }
    ]


@pytest.mark.asyncio
async def test_rejoin_keeps_status(registry: ConnectionRegistry, emitter: RecordingEmitter) -> None:
    """Given an away user, when they join again on the same connection, then status stays away."""
    lifecycle = PresenceLifecycle(registry, emitter)
    await lifecycle.join("A1", _join("alice", "Alice"))
    await lifecycle.set_status("A1", PresenceStatus.AWAY)

    record = await lifecycle.join("A1", _join("alice", "Alice Renamed"))

    assert record.status is PresenceStatus.AWAY
    assert record.display_name == "Alice Renamed"
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_set_status_requires_join(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given an unjoined connection, when changing status, then NotJoinedError is raised."""
    lifecycle = PresenceLifecycle(registry, emitter)

    with pytest.raises(NotJoinedError):
        await lifecycle.set_status("A1", PresenceStatus.AWAY)

    assert emitter.emissions == []


@pytest.mark.asyncio
async def test_leave_broadcasts_remaining_users(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given two users, when one leaves, then the remaining list is broadcast."""
    lifecycle = PresenceLifecycle(registry, emitter)
    await lifecycle.join("A1", _join("alice", "Alice"))
    await lifecycle.join("B1", _join("bob", "Bob"))
    emitter.clear()

    await lifecycle.leave("A1")

    payload = emitter.broadcasts("online-users")[0].payload
    assert [user["logicalUserId"] for user in payload] == ["bob"]


@pytest.mark.asyncio
async def test_leave_for_unknown_connection_broadcasts_nothing(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given a connection that never joined, when it leaves, then nothing is broadcast."""
    lifecycle = PresenceLifecycle(registry, emitter)

    result = await lifecycle.leave("ghost")

    assert result is None
    assert emitter.emissions == []


@pytest.mark.asyncio
async def test_remove_connections_broadcasts_once(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given three stale connections, when removing them, then one snapshot is broadcast."""
    lifecycle = PresenceLifecycle(registry, emitter)
    for cid, user in (("A1", "alice"), ("B1", "bob"), ("C1", "carol"), ("D1", "dave")):
        registry.register(cid, user, user.title())
    emitter.connected = {"D1"}

    stale = lifecycle.stale_connections(emitter.is_connected)
    result = await lifecycle.remove_connections(stale)

    assert sorted(stale) == ["A1", "B1", "C1"]
    assert result.removed_count == 3
    assert result.remaining_count == 1
    assert len(emitter.broadcasts("online-users")) == 1


@pytest.mark.asyncio
async def test_remove_connections_without_changes_is_silent(
    registry: ConnectionRegistry, emitter: RecordingEmitter
) -> None:
    """Given no stale connections, when removing, then nothing is broadcast."""
    lifecycle = PresenceLifecycle(registry, emitter)

    result = await lifecycle.remove_connections([])

    assert result.removed_count == 0
    assert emitter.emissions == []
