"""Per-post serialized voting."""

from __future__ import annotations

import logging

from community_hub.application.keyed_lock import KeyedLock
from community_hub.domain.models import PostNotFoundError, VoteResult, VoteTally
from community_hub.domain.ports import PostStore

logger = logging.getLogger(__name__)


class VoteCounter:
    """Applies votes one at a time per post.

    The tally cached here is authoritative for the life of the process. Each
    update runs read-compute-write under the post's lock and writes the store
    before releasing it, so store writes for one post land in order. A failed
    store write is logged and the in-memory result still stands.
    """

    def __init__(self, post_store: PostStore, locks: KeyedLock | None = None) -> None:
        self.post_store = post_store
        self._locks = locks or KeyedLock("votes")
        self._tallies: dict[str, VoteTally] = {}

    async def vote(self, post_id: str, voter_id: str, choice: int) -> VoteResult:
        """Set ``voter_id``'s vote on ``post_id`` to -1, 0 or +1.

        Raises:
            PostNotFoundError: The post does not exist.
            InvalidVoteError: ``choice`` is not -1, 0 or +1.
        """
        async with self._locks.hold(post_id):
            tally = await self._load(post_id)
            result = tally.apply(voter_id, choice)
            logger.debug(
                f"Vote on {post_id} by {voter_id}: {choice:+d}, score {result.total_score}"
            )
            try:
                await self.post_store.save_tally(tally.copy())
            except Exception as e:
                logger.error(f"Failed to persist vote on post {post_id}: {e}", exc_info=True)
            return result

    async def current_score(self, post_id: str) -> int:
        async with self._locks.hold(post_id):
            return (await self._load(post_id)).total_score

    async def _load(self, post_id: str) -> VoteTally:
        tally = self._tallies.get(post_id)
        if tally is None:
            stored = await self.post_store.load_tally(post_id)
            if stored is None:
                raise PostNotFoundError(f"Post {post_id} not found")
            tally = self._tallies[post_id] = stored.copy()
        return tally
