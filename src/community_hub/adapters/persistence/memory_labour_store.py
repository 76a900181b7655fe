"""In-memory labour post store."""

from community_hub.domain.models import LabourPost, LabourPostStatus, LabourSlotCounter
from community_hub.domain.ports import LabourStore


class MemoryLabourStore(LabourStore):
    """Keeps labour posts and their slot counters in dictionaries."""

    def __init__(self) -> None:
        self._posts: dict[str, LabourPost] = {}
        self._slots: dict[str, LabourSlotCounter] = {}

    async def create_post(self, post: LabourPost) -> LabourSlotCounter:
        slots = LabourSlotCounter(post_id=post.post_id, remaining_slots=post.labour_count)
        self._posts[post.post_id] = post
        self._slots[post.post_id] = slots
        return slots.copy()

    async def get_post(self, post_id: str) -> LabourPost | None:
        return self._posts.get(post_id)

    async def load_slots(self, post_id: str) -> LabourSlotCounter | None:
        slots = self._slots.get(post_id)
        return slots.copy() if slots is not None else None

    async def save_slots(self, slots: LabourSlotCounter) -> None:
        if slots.post_id not in self._posts:
            raise KeyError(f"Labour post {slots.post_id} does not exist")
        self._slots[slots.post_id] = slots.copy()

    async def list_active(self, limit: int = 20) -> list[tuple[LabourPost, LabourSlotCounter]]:
        active = [
            (post, self._slots[post_id].copy())
            for post_id, post in self._posts.items()
            if self._slots[post_id].status is LabourPostStatus.ACTIVE
        ]
        active.sort(key=lambda item: item[0].created_at, reverse=True)
        return active[:limit]
