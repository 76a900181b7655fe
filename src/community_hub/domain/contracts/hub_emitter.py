"""Protocol for pushing events to connected clients."""

from typing import Any, Protocol


class HubEmitterProtocol(Protocol):
    """Transport-facing side of the hub.

    Emitting to a connection that has already gone away is not an error.
    """

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        """Send ``event`` to a single connection."""
        ...

    async def broadcast(
        self, event: str, payload: Any, skip_connection_id: str | None = None
    ) -> None:
        """Send ``event`` to every connection, optionally skipping one."""
        ...

    def is_connected(self, connection_id: str) -> bool:
        """Return True while the transport still holds ``connection_id`` open."""
        ...
