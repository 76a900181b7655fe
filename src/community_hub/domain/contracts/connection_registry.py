"""Connection registry contract (protocol)."""

from typing import Protocol

from community_hub.domain.models.presence_record import PresenceRecord, PresenceStatus


class ConnectionRegistryProtocol(Protocol):
    """Owner of the "who is online" state.

    Not-found is always an empty result, never an error.
    """

    def register(
        self,
        connection_id: str,
        logical_user_id: str,
        display_name: str,
        avatar_url: str | None = None,
        status: PresenceStatus = PresenceStatus.ONLINE,
    ) -> PresenceRecord:
        """Insert or overwrite the record for ``connection_id``."""
        ...

    def unregister(self, connection_id: str) -> PresenceRecord | None:
        """Remove and return the record, or None if it was already gone."""
        ...

    def get(self, connection_id: str) -> PresenceRecord | None:
        """Return the record for ``connection_id`` if registered."""
        ...

    def set_status(self, connection_id: str, status: PresenceStatus) -> PresenceRecord | None:
        """Change the visible status of a registered connection."""
        ...

    def snapshot(self) -> list[PresenceRecord]:
        """Return every registered record. Callers must not rely on the order."""
        ...

    def find_by_logical_id(self, logical_user_id: str) -> list[PresenceRecord]:
        """Return all records (devices) registered under ``logical_user_id``."""
        ...

    def connection_ids(self) -> set[str]:
        """Return the ids of all registered connections."""
        ...
