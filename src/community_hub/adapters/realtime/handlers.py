"""Socket.IO event handlers.

Every handler is a boundary: errors are turned into a ``hub-error`` notice to
the originating connection and a negative acknowledgement, and never reach
python-socketio. One client's malformed message cannot affect other clients.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import socketio
from pydantic import ValidationError

from community_hub.domain.contracts.hub_emitter import HubEmitterProtocol
from community_hub.domain.contracts.hub_event_handler import HubEventHandlerProtocol
from community_hub.domain.models.hub_errors import HubError
from community_hub.domain.models.hub_events import (
    INBOUND_EVENTS,
    HubEventName,
    UnknownEventError,
    parse_inbound_event,
)

logger = logging.getLogger(__name__)


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail.get("loc", ())) or "payload"
        parts.append(f"{location}: {detail.get('msg', 'invalid')}")
    return "; ".join(parts)


class SocketIOHubHandlers:
    """Registers hub handlers on a python-socketio server."""

    def __init__(
        self,
        sio: socketio.AsyncServer,
        handler: HubEventHandlerProtocol,
        emitter: HubEmitterProtocol,
    ) -> None:
        self.sio = sio
        self.handler = handler
        self.emitter = emitter

    def register(self) -> None:
        """Attach connect/disconnect, every inbound event and a catch-all."""
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        for name in INBOUND_EVENTS:
            self.sio.on(name, self._event_handler(name))
        self.sio.on("*", self.on_unknown_event)
        logger.info(f"Registered {len(INBOUND_EVENTS)} Socket.IO hub events")

    async def on_connect(
        self, sid: str, environ: dict[str, Any], auth: Any | None = None
    ) -> None:
        # The connection stays inert until it sends "join"
        logger.info(f"Socket connected: {sid}")

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        logger.info(f"Socket disconnected: {sid} ({reason or 'transport closed'})")
        try:
            await self.handler.connection_closed(sid)
        except Exception:
            logger.exception(f"Failed to clean up after disconnect of {sid}")

    async def on_unknown_event(self, event: str, sid: str, *_args: Any) -> dict[str, Any]:
        error = UnknownEventError(f"Unknown event '{event}'")
        return await self._report(sid, event, error.code, error.message)

    async def handle_event(self, name: str, sid: str, data: Any = None) -> dict[str, Any]:
        """Parse, dispatch and acknowledge one inbound event."""
        try:
            event = parse_inbound_event(name, data)
            return await self.handler.dispatch(sid, event)
        except ValidationError as e:
            return await self._report(sid, name, "invalid-payload", _summarize_validation_error(e))
        except HubError as e:
            logger.info(f"'{name}' from {sid} rejected: {e.code} ({e.message})")
            return await self._report(sid, name, e.code, e.message)
        except Exception:
            logger.exception(f"Unhandled error in '{name}' handler for {sid}")
            return await self._report(sid, name, "internal-error", "Internal server error")

    def _event_handler(self, name: str) -> Callable[..., Awaitable[dict[str, Any]]]:
        async def on_event(sid: str, *args: Any) -> dict[str, Any]:
            return await self.handle_event(name, sid, args[0] if args else None)

        on_event.__name__ = f"on_{name.replace('-', '_')}"
        return on_event

    async def _report(self, sid: str, event: str, code: str, message: str) -> dict[str, Any]:
        try:
            await self.emitter.emit_to(
                sid,
                HubEventName.HUB_ERROR.value,
                {"event": event, "code": code, "message": message},
            )
        except Exception:
            logger.exception(f"Failed to send hub-error to {sid}")
        return {"ok": False, "error": code, "message": message}
