"""Tests for KeyedLock."""

import asyncio

import pytest

from community_hub.application.keyed_lock import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized() -> None:
    """Given two tasks on one key, when both run, then their sections do not overlap."""
    locks = KeyedLock("test")
    events: list[str] = []

    async def section(name: str) -> None:
        async with locks.hold("post"):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    await asyncio.gather(section("a"), section("b"))

    assert events == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_keys_run_concurrently() -> None:
    """Given two keys, when one is held, then the other can still be acquired."""
    locks = KeyedLock("test")

    async with locks.hold("p1"):
        assert locks.is_locked("p1")
        async with locks.hold("p2"):
            assert locks.is_locked("p2")


@pytest.mark.asyncio
async def test_locks_are_dropped_when_unused() -> None:
    """Given a released key, when nobody waits, then the lock table is empty."""
    locks = KeyedLock("test")

    async with locks.hold("p1"):
        assert len(locks) == 1

    assert len(locks) == 0
    assert not locks.is_locked("p1")


@pytest.mark.asyncio
async def test_lock_released_when_section_raises() -> None:
    """Given a failing section, when it raises, then the key is free again."""
    locks = KeyedLock("test")

    with pytest.raises(RuntimeError):
        async with locks.hold("p1"):
            raise RuntimeError("boom")

    assert len(locks) == 0
    async with locks.hold("p1"):
        pass
