"""Socket.IO server factory."""

from __future__ import annotations

import socketio

from community_hub.adapters.config import AppConfig


def create_socketio_server(config: AppConfig) -> socketio.AsyncServer:
    """Create the hub's ASGI Socket.IO server.

    Engine.IO handles both HTTP long-polling and WebSocket upgrades, so clients
    behind restrictive proxies still connect.
    """
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=config.cors_allowed_origins,
        logger=False,
        engineio_logger=False,
    )
