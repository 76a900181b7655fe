"""Tests for ConnectionRegistry."""

from community_hub.adapters.presence import ConnectionRegistry
from community_hub.domain.models import PresenceStatus


def test_register_indexes_by_logical_id(registry: ConnectionRegistry) -> None:
    """Given two devices of one user, when registering, then both are found by logical id."""
    registry.register("A1", "alice", "Alice")
    registry.register("A2", "alice", "Alice")
    registry.register("B1", "bob", "Bob")

    found = {record.connection_id for record in registry.find_by_logical_id("alice")}

    assert found == {"A1", "A2"}
    assert len(registry) == 3


def test_register_same_connection_overwrites_record(registry: ConnectionRegistry) -> None:
    """Given a registered connection, when registering it again, then the record is replaced."""
    registry.register("A1", "alice", "Alice")

    record = registry.register("A1", "alice", "Alice K.", avatar_url="alice.png")

    assert len(registry) == 1
    assert registry.get("A1") == record
    assert record.display_name == "Alice K."


def test_register_under_new_logical_id_moves_connection(registry: ConnectionRegistry) -> None:
    """Given a connection joined as alice, when it re-joins as carol, then alice has no devices."""
    registry.register("A1", "alice", "Alice")

    registry.register("A1", "carol", "Carol")

    assert registry.find_by_logical_id("alice") == []
    assert [r.connection_id for r in registry.find_by_logical_id("carol")] == ["A1"]


def test_unregister_is_idempotent(registry: ConnectionRegistry) -> None:
    """Given a registered connection, when unregistering twice, then the second call returns None."""
    registry.register("A1", "alice", "Alice")

    first = registry.unregister("A1")
    second = registry.unregister("A1")

    assert first is not None
    assert first.logical_user_id == "alice"
    assert second is None
    assert "A1" not in registry
    assert registry.find_by_logical_id("alice") == []


def test_unregister_keeps_other_devices(registry: ConnectionRegistry) -> None:
    """Given two devices, when one disconnects, then the other is still found."""
    registry.register("A1", "alice", "Alice")
    registry.register("A2", "alice", "Alice")

    registry.unregister("A1")

    assert [r.connection_id for r in registry.find_by_logical_id("alice")] == ["A2"]


def test_set_status_updates_record(registry: ConnectionRegistry) -> None:
    """Given a registered connection, when setting status, then the record reflects it."""
    registry.register("A1", "alice", "Alice")

    updated = registry.set_status("A1", PresenceStatus.AWAY)

    assert updated is not None
    assert registry.get("A1").status is PresenceStatus.AWAY


def test_set_status_for_unknown_connection_returns_none(registry: ConnectionRegistry) -> None:
    """Given an unknown connection, when setting status, then None is returned."""
    assert registry.set_status("ghost", PresenceStatus.AWAY) is None


def test_snapshot_is_a_copy(registry: ConnectionRegistry) -> None:
    """Given a snapshot, when the registry changes, then the snapshot is unaffected."""
    registry.register("A1", "alice", "Alice")
    snapshot = registry.snapshot()

    registry.unregister("A1")

    assert [r.connection_id for r in snapshot] == ["A1"]
    assert registry.connection_ids() == set()


def test_snapshot_matches_joined_minus_disconnected(registry: ConnectionRegistry) -> None:
    """Given interleaved joins and disconnects, when taking a snapshot, then only live joins remain."""
    operations = [
        ("join", "A1", "alice"),
        ("join", "B1", "bob"),
        ("join", "A2", "alice"),
        ("leave", "A1", None),
        ("join", "C1", "carol"),
        ("leave", "A1", None),
        ("join", "B1", "bob"),
        ("leave", "C1", None),
        ("leave", "ghost", None),
    ]
    expected: set[str] = set()
    for action, cid, user in operations:
        if action == "join":
            registry.register(cid, user, user.title())
            expected.add(cid)
        else:
            registry.unregister(cid)
            expected.discard(cid)

    snapshot = [record.connection_id for record in registry.snapshot()]

    assert sorted(snapshot) == sorted(expected)
    assert len(snapshot) == len(set(snapshot))
