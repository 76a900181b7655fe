"""Labour post store port."""

from typing import Protocol

from community_hub.domain.models.labour_post import LabourPost, LabourSlotCounter


class LabourStore(Protocol):
    """Port for durable labour posts and their slot counters."""

    async def create_post(self, post: LabourPost) -> LabourSlotCounter:
        """Persist a new labour post and return its initial slot counter."""
        ...

    async def get_post(self, post_id: str) -> LabourPost | None:
        """Get a labour post by id."""
        ...

    async def load_slots(self, post_id: str) -> LabourSlotCounter | None:
        """Load the stored slot counter, None if the post does not exist."""
        ...

    async def save_slots(self, slots: LabourSlotCounter) -> None:
        """Persist a slot counter."""
        ...

    async def list_active(self, limit: int = 20) -> list[tuple[LabourPost, LabourSlotCounter]]:
        """List the newest posts that still have open slots."""
        ...
