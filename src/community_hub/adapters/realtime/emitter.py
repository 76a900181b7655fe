"""Emitter backed by a python-socketio server."""

from __future__ import annotations

import logging
from typing import Any

import socketio

from community_hub.domain.contracts.hub_emitter import HubEmitterProtocol

logger = logging.getLogger(__name__)


class SocketIOEmitter(HubEmitterProtocol):
    """Sends hub events through Socket.IO.

    Each connection sits in its own ``sid`` room, so targeting a connection is
    an emit to that room; a room that no longer exists is silently skipped.
    """

    def __init__(self, sio: socketio.AsyncServer, namespace: str = "/") -> None:
        self.sio = sio
        self.namespace = namespace

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        await self.sio.emit(event, payload, to=connection_id, namespace=self.namespace)

    async def broadcast(
        self, event: str, payload: Any, skip_connection_id: str | None = None
    ) -> None:
        await self.sio.emit(event, payload, skip_sid=skip_connection_id, namespace=self.namespace)
        logger.debug(f"Broadcasted '{event}' (skipping {skip_connection_id})")

    def is_connected(self, connection_id: str) -> bool:
        return bool(self.sio.manager.is_connected(connection_id, self.namespace))
