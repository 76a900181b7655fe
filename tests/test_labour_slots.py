"""Tests for LabourSlots."""

import asyncio
from datetime import UTC, datetime

import pytest

from community_hub.adapters.persistence import MemoryLabourStore
from community_hub.application.services import LabourSlots
from community_hub.domain.models import (
    AlreadyAppliedError,
    JobFilledError,
    LabourPost,
    LabourSlotCounter,
    PostNotFoundError,
)

from conftest import RecordingEmitter


class SlowLabourStore(MemoryLabourStore):
    """Labour store whose reads and writes yield to the event loop."""

    async def load_slots(self, post_id: str) -> LabourSlotCounter | None:
        await asyncio.sleep(0.001)
        return await super().load_slots(post_id)

    async def save_slots(self, slots: LabourSlotCounter) -> None:
        await asyncio.sleep(0.001)
        await super().save_slots(slots)


async def _store_with_post(store: MemoryLabourStore, slots: int) -> MemoryLabourStore:
    await store.create_post(
        LabourPost(
            post_id="job",
            farmer_name="Ravi",
            farmer_id="ravi",
            work_type="Harvesting",
            location="North field",
            duration="3 days",
            offered_wage=500,
            labour_count=slots,
            created_at=datetime.now(UTC),
        )
    )
    return store


@pytest.mark.asyncio
async def test_apply_takes_slot_and_announces(emitter: RecordingEmitter) -> None:
    """Given two slots, when a worker applies, then one slot is left and everyone is told."""
    store = await _store_with_post(MemoryLabourStore(), slots=2)
    slots = LabourSlots(store, emitter=emitter)

    result = await slots.apply("job", "w1", "Meena")

    assert result.remaining_slots == 1
    assert not result.filled
    announcement = emitter.broadcasts("labour-applied")[0].payload
    assert announcement["postId"] == "job"
    assert announcement["farmerId"] == "ravi"
    assert announcement["applicantName"] == "Meena"
    assert announcement["remainingCount"] == 1
    assert announcement["status"] == "active"


@pytest.mark.asyncio
async def test_apply_twice_is_rejected() -> None:
    """Given a worker with a slot, when applying again, then AlreadyAppliedError is raised."""
    store = await _store_with_post(MemoryLabourStore(), slots=3)
    slots = LabourSlots(store)
    await slots.apply("job", "w1")

    with pytest.raises(AlreadyAppliedError):
        await slots.apply("job", "w1")

    assert (await slots.remaining("job")).remaining_slots == 2


@pytest.mark.asyncio
async def test_apply_to_unknown_post_raises() -> None:
    """Given no such post, when applying, then PostNotFoundError is raised."""
    slots = LabourSlots(MemoryLabourStore())

    with pytest.raises(PostNotFoundError):
        await slots.apply("missing", "w1")


@pytest.mark.asyncio
async def test_concurrent_applicants_never_overfill(emitter: RecordingEmitter) -> None:
    """Given three slots and eight concurrent applicants, when all apply, then exactly three succeed."""
    store = await _store_with_post(SlowLabourStore(), slots=3)
    slots = LabourSlots(store, emitter=emitter)

    results = await asyncio.gather(
        *(slots.apply("job", f"w{i}") for i in range(8)), return_exceptions=True
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 3
    assert len(failures) == 5
    assert all(isinstance(f, JobFilledError) for f in failures)
    assert sorted(r.remaining_slots for r in successes) == [0, 1, 2]
    stored = await store.load_slots("job")
    assert stored.remaining_slots == 0
    assert stored.filled
    assert len(stored.applied_applicants) == 3
    assert len(emitter.broadcasts("labour-applied")) == 3


@pytest.mark.asyncio
async def test_concurrent_duplicate_applications_take_one_slot() -> None:
    """Given one worker applying five times at once, when all finish, then one slot is taken."""
    store = await _store_with_post(SlowLabourStore(), slots=3)
    slots = LabourSlots(store)

    results = await asyncio.gather(
        *(slots.apply("job", "w1") for _ in range(5)), return_exceptions=True
    )

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert all(isinstance(r, AlreadyAppliedError) for r in results if isinstance(r, Exception))
    assert (await slots.remaining("job")).remaining_slots == 2


@pytest.mark.asyncio
async def test_filled_post_leaves_active_listing() -> None:
    """Given a one-slot post, when it fills, then it is no longer listed as active."""
    store = await _store_with_post(MemoryLabourStore(), slots=1)
    slots = LabourSlots(store)

    await slots.apply("job", "w1")

    assert await store.list_active() == []
