"""Community feed post and chat message models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CommunityPost:
    """A post in the community feed. Its score lives in a separate ``VoteTally``."""

    post_id: str
    author_name: str
    content: str
    created_at: datetime
    author_id: str | None = None
    author_avatar: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class ChatMessage:
    """A community chat line kept for history."""

    author_name: str
    content: str
    created_at: datetime
