"""Protocol the transport adapter uses to hand events to the hub."""

from collections.abc import Callable
from typing import Any, Protocol

from community_hub.domain.models.hub_events import InboundEvent
from community_hub.domain.models.presence_record import PresenceSyncResult


class HubEventHandlerProtocol(Protocol):
    """Single entry point from the transport into the hub components."""

    async def dispatch(self, connection_id: str, event: InboundEvent) -> dict[str, Any]:
        """Handle one inbound event and return the acknowledgement payload."""
        ...

    async def connection_closed(self, connection_id: str) -> None:
        """Handle a transport-level disconnect."""
        ...

    async def sweep_stale(self, is_alive: Callable[[str], bool]) -> PresenceSyncResult:
        """Drop registered connections the transport no longer holds."""
        ...
