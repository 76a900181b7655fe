"""Per-post serialized labour applications."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from community_hub.application.keyed_lock import KeyedLock
from community_hub.domain.contracts import HubEmitterProtocol
from community_hub.domain.models import (
    AlreadyAppliedError,
    ApplyResult,
    HubEventName,
    JobFilledError,
    LabourSlotCounter,
    PostNotFoundError,
)
from community_hub.domain.ports import LabourStore

logger = logging.getLogger(__name__)


class LabourSlots:
    """Hands out labour slots exactly once per applicant, never below zero."""

    def __init__(
        self,
        labour_store: LabourStore,
        emitter: HubEmitterProtocol | None = None,
        locks: KeyedLock | None = None,
    ) -> None:
        self.labour_store = labour_store
        self.emitter = emitter
        self._locks = locks or KeyedLock("labour-slots")
        self._counters: dict[str, LabourSlotCounter] = {}

    async def apply(
        self, post_id: str, applicant_id: str, applicant_name: str | None = None
    ) -> ApplyResult:
        """Take one slot on ``post_id`` for ``applicant_id``.

        On success every connected client is told through ``labour-applied``.

        Raises:
            PostNotFoundError: The post does not exist.
            AlreadyAppliedError: The applicant already holds a slot.
            JobFilledError: No slots remain.
        """
        async with self._locks.hold(post_id):
            counter = await self._load(post_id)
            try:
                result = counter.apply(applicant_id)
            except (AlreadyAppliedError, JobFilledError) as e:
                logger.info(f"Labour apply rejected for {applicant_id} on {post_id}: {e.code}")
                raise
            try:
                await self.labour_store.save_slots(counter.copy())
            except Exception as e:
                logger.error(f"Failed to persist labour apply on {post_id}: {e}", exc_info=True)

        logger.info(
            f"{applicant_id} applied to labour post {post_id}, "
            f"{result.remaining_slots} slot(s) left"
        )
        await self._announce(result, applicant_name or "A worker")
        return result

    async def remaining(self, post_id: str) -> LabourSlotCounter:
        async with self._locks.hold(post_id):
            return (await self._load(post_id)).copy()

    async def _load(self, post_id: str) -> LabourSlotCounter:
        counter = self._counters.get(post_id)
        if counter is None:
            stored = await self.labour_store.load_slots(post_id)
            if stored is None:
                raise PostNotFoundError(f"Labour post {post_id} not found")
            counter = self._counters[post_id] = stored.copy()
        return counter

    async def _announce(self, result: ApplyResult, applicant_name: str) -> None:
        if self.emitter is None:
            return
        post = await self.labour_store.get_post(result.post_id)
        await self.emitter.broadcast(
            HubEventName.LABOUR_APPLIED.value,
            {
                "postId": result.post_id,
                "farmerId": post.farmer_id if post else None,
                "farmerName": post.farmer_name if post else None,
                "workType": post.work_type if post else None,
                "applicantName": applicant_name,
                "remainingCount": result.remaining_slots,
                "status": "filled" if result.filled else "active",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )
