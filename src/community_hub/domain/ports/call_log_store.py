"""Call log store port."""

from typing import Protocol

from community_hub.domain.models.call_log_entry import CallLogEntry


class CallLogStore(Protocol):
    """Port for persisting finished calls."""

    async def record(self, entry: CallLogEntry) -> None:
        """Persist one call log entry."""
        ...

    async def list_for_user(self, user_id: str, limit: int = 30) -> list[CallLogEntry]:
        """Newest entries where the user was caller or receiver."""
        ...
