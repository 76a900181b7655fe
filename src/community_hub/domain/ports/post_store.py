"""Community post store port."""

from typing import Protocol

from community_hub.domain.models.community_post import CommunityPost
from community_hub.domain.models.vote_tally import VoteTally


class PostStore(Protocol):
    """Port for durable feed posts and their vote tallies."""

    async def create_post(self, post: CommunityPost) -> CommunityPost:
        """Persist a new post with an empty tally."""
        ...

    async def get_post(self, post_id: str) -> CommunityPost | None:
        """Get a post by id."""
        ...

    async def load_tally(self, post_id: str) -> VoteTally | None:
        """Load the stored tally of a post, None if the post does not exist."""
        ...

    async def save_tally(self, tally: VoteTally) -> None:
        """Persist the tally of a post."""
        ...

    async def list_posts(self, limit: int = 50) -> list[tuple[CommunityPost, VoteTally]]:
        """List the newest posts with their current tallies."""
        ...
