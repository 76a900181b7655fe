"""Join/leave handling and online-list broadcasting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from community_hub.domain.contracts import ConnectionRegistryProtocol, HubEmitterProtocol
from community_hub.domain.models import (
    HubEventName,
    NotJoinedError,
    PresenceRecord,
    PresenceStatus,
    PresenceSyncResult,
)
from community_hub.domain.models.hub_events import JoinEvent

logger = logging.getLogger(__name__)


class PresenceLifecycle:
    """Keeps the registry in step with joins and disconnects.

    Every change is followed by a full ``online-users`` snapshot to all
    connections; clients replace their list instead of applying diffs.
    """

    def __init__(
        self, registry: ConnectionRegistryProtocol, emitter: HubEmitterProtocol
    ) -> None:
        self.registry = registry
        self.emitter = emitter

    async def join(self, connection_id: str, event: JoinEvent) -> PresenceRecord:
        """Register a connection and push the new online list to everyone, joiner included.

        Joining again on the same connection replaces its profile.
        """
        previous = self.registry.get(connection_id)
        record = self.registry.register(
            connection_id,
            logical_user_id=event.logical_user_id,
            display_name=event.display_name,
            avatar_url=event.avatar_url,
            status=previous.status if previous is not None else PresenceStatus.ONLINE,
        )
        logger.info(f"{record.display_name} joined the community")
        await self.broadcast_online_users()
        return record

    async def set_status(self, connection_id: str, status: PresenceStatus) -> PresenceRecord:
        record = self.registry.set_status(connection_id, status)
        if record is None:
            raise NotJoinedError("Join the community before changing status")
        await self.broadcast_online_users()
        return record

    async def leave(self, connection_id: str) -> PresenceRecord | None:
        """Unregister a connection and push the online list to the remaining ones.

        Safe to call for connections that never joined or already left; nothing
        is broadcast in that case.
        """
        record = self.registry.unregister(connection_id)
        if record is None:
            return None
        logger.info(f"{record.display_name} left the community")
        await self.broadcast_online_users()
        return record

    def require_joined(self, connection_id: str) -> PresenceRecord:
        record = self.registry.get(connection_id)
        if record is None:
            raise NotJoinedError("Join the community first")
        return record

    def stale_connections(self, is_alive: Callable[[str], bool]) -> list[str]:
        """Registered connections the transport no longer reports as open."""
        return [cid for cid in self.registry.connection_ids() if not is_alive(cid)]

    async def remove_connections(self, connection_ids: Iterable[str]) -> PresenceSyncResult:
        """Unregister several connections with a single snapshot broadcast."""
        removed = [cid for cid in connection_ids if self.registry.unregister(cid) is not None]
        remaining = len(self.registry.connection_ids())
        if removed:
            logger.info(
                f"Removed {len(removed)} stale presence entries. Remaining: {remaining}"
            )
            await self.broadcast_online_users()
        return PresenceSyncResult(removed_count=len(removed), remaining_count=remaining)

    async def broadcast_online_users(self) -> None:
        users = [record.to_wire() for record in self.registry.snapshot()]
        await self.emitter.broadcast(HubEventName.ONLINE_USERS.value, users)
