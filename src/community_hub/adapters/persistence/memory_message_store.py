"""In-memory chat history."""

from collections import deque

from community_hub.domain.models import ChatMessage
from community_hub.domain.ports import MessageStore


class MemoryMessageStore(MessageStore):
    """Bounded chat history; the oldest messages fall off once full."""

    def __init__(self, max_messages: int = 1000) -> None:
        self._messages: deque[ChatMessage] = deque(maxlen=max_messages)

    async def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    async def recent(self, limit: int = 100) -> list[ChatMessage]:
        if limit <= 0:
            return []
        return list(self._messages)[-limit:]
