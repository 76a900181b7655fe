"""In-memory community post store."""

from community_hub.domain.models import CommunityPost, VoteTally
from community_hub.domain.ports import PostStore


class MemoryPostStore(PostStore):
    """Keeps posts and tallies in dictionaries; values are copied in and out."""

    def __init__(self) -> None:
        self._posts: dict[str, CommunityPost] = {}
        self._tallies: dict[str, VoteTally] = {}

    async def create_post(self, post: CommunityPost) -> CommunityPost:
        self._posts[post.post_id] = post
        self._tallies[post.post_id] = VoteTally(post_id=post.post_id)
        return post

    async def get_post(self, post_id: str) -> CommunityPost | None:
        return self._posts.get(post_id)

    async def load_tally(self, post_id: str) -> VoteTally | None:
        tally = self._tallies.get(post_id)
        return tally.copy() if tally is not None else None

    async def save_tally(self, tally: VoteTally) -> None:
        if tally.post_id not in self._posts:
            raise KeyError(f"Post {tally.post_id} does not exist")
        self._tallies[tally.post_id] = tally.copy()

    async def list_posts(self, limit: int = 50) -> list[tuple[CommunityPost, VoteTally]]:
        posts = sorted(self._posts.values(), key=lambda post: post.created_at, reverse=True)
        return [(post, self._tallies[post.post_id].copy()) for post in posts[:limit]]
