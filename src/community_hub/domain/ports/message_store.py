"""Chat message store port."""

from typing import Protocol

from community_hub.domain.models.community_post import ChatMessage


class MessageStore(Protocol):
    """Port for chat history."""

    async def append(self, message: ChatMessage) -> None:
        """Persist one chat message."""
        ...

    async def recent(self, limit: int = 100) -> list[ChatMessage]:
        """Return the newest messages, oldest first."""
        ...
