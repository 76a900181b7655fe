"""In-memory registry of live hub connections."""

import logging

from community_hub.domain.contracts.connection_registry import ConnectionRegistryProtocol
from community_hub.domain.models.presence_record import PresenceRecord, PresenceStatus

logger = logging.getLogger(__name__)


class ConnectionRegistry(ConnectionRegistryProtocol):
    """Tracks presence records by connection id and by logical user id.

    All methods are synchronous, so within one event loop every call is atomic
    with respect to other handlers.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._records: dict[str, PresenceRecord] = {}
        # logical user id -> connection ids (one per device/tab)
        self._by_logical_id: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._records

    def register(
        self,
        connection_id: str,
        logical_user_id: str,
        display_name: str,
        avatar_url: str | None = None,
        status: PresenceStatus = PresenceStatus.ONLINE,
    ) -> PresenceRecord:
        """Insert or overwrite the record for a connection.

        Re-registering under a different logical user id moves the connection
        out of its previous logical user's index.

        Args:
            connection_id: Transport connection id.
            logical_user_id: Stable user identity, may be shared across devices.
            display_name: Name shown to other users.
            avatar_url: Optional avatar image.
            status: Initial visible status.

        Returns:
            The stored record.
        """
        previous = self._records.get(connection_id)
        if previous is not None and previous.logical_user_id != logical_user_id:
            self._discard_index(previous.logical_user_id, connection_id)

        record = PresenceRecord(
            connection_id=connection_id,
            logical_user_id=logical_user_id,
            display_name=display_name,
            avatar_url=avatar_url,
            status=status,
        )
        self._records[connection_id] = record
        self._by_logical_id.setdefault(logical_user_id, set()).add(connection_id)

        logger.info(
            f"Registered connection {connection_id} as '{logical_user_id}' ({display_name}). "
            f"Online connections: {len(self._records)}"
        )
        return record

    def unregister(self, connection_id: str) -> PresenceRecord | None:
        """Remove a connection. Idempotent: a second call returns None."""
        record = self._records.pop(connection_id, None)
        if record is None:
            return None

        self._discard_index(record.logical_user_id, connection_id)
        logger.info(
            f"Unregistered connection {connection_id} ('{record.logical_user_id}'). "
            f"Online connections: {len(self._records)}"
        )
        return record

    def get(self, connection_id: str) -> PresenceRecord | None:
        return self._records.get(connection_id)

    def set_status(self, connection_id: str, status: PresenceStatus) -> PresenceRecord | None:
        record = self._records.get(connection_id)
        if record is None:
            return None
        updated = record.model_copy(update={"status": status})
        self._records[connection_id] = updated
        return updated

    def snapshot(self) -> list[PresenceRecord]:
        return list(self._records.values())

    def find_by_logical_id(self, logical_user_id: str) -> list[PresenceRecord]:
        connection_ids = self._by_logical_id.get(logical_user_id, set())
        return [self._records[cid] for cid in connection_ids if cid in self._records]

    def connection_ids(self) -> set[str]:
        return set(self._records)

    def _discard_index(self, logical_user_id: str, connection_id: str) -> None:
        connection_ids = self._by_logical_id.get(logical_user_id)
        if connection_ids is None:
            return
        connection_ids.discard(connection_id)
        # Clean up empty logical user sets
        if not connection_ids:
            del self._by_logical_id[logical_user_id]
