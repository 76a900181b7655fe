"""In-memory call log store."""

from community_hub.domain.models import CallLogEntry
from community_hub.domain.ports import CallLogStore


class MemoryCallLogStore(CallLogStore):
    """Append-only list of call log entries."""

    def __init__(self) -> None:
        self._entries: list[CallLogEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    async def record(self, entry: CallLogEntry) -> None:
        self._entries.append(entry)

    async def list_for_user(self, user_id: str, limit: int = 30) -> list[CallLogEntry]:
        matching = [e for e in self._entries if user_id in (e.caller_id, e.receiver_id)]
        matching.sort(key=lambda e: e.created_at, reverse=True)
        return matching[:limit]
