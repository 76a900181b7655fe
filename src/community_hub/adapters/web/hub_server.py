"""ASGI server hosting the Socket.IO hub next to the HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

import socketio
from starlette.applications import Starlette

from community_hub.adapters.web.rate_limit_middleware import RateLimitMiddleware

if TYPE_CHECKING:
    import uvicorn

    from community_hub.adapters.config import AppConfig
    from community_hub.adapters.web.http_api import CommunityHttpApi
    from community_hub.adapters.web.pollers import StaleConnectionSweeper

logger = logging.getLogger(__name__)


class HubWebServer:
    """Serves the hub over uvicorn and owns its background tasks."""

    def __init__(
        self,
        config: AppConfig,
        sio: socketio.AsyncServer,
        http_api: CommunityHttpApi,
        sweeper: StaleConnectionSweeper | None = None,
        shutdown_hooks: Sequence[Callable[[], Awaitable[None]]] = (),
    ) -> None:
        """Initialize the server.

        Args:
            config: Application configuration.
            sio: Socket.IO server with the hub handlers registered.
            http_api: HTTP route handlers.
            sweeper: Optional stale connection sweeper run alongside the server.
            shutdown_hooks: Coroutines awaited when the server stops.
        """
        self.config = config
        self.sio = sio
        self.http_api = http_api
        self.sweeper = sweeper
        self.shutdown_hooks = list(shutdown_hooks)
        self._server: uvicorn.Server | None = None

    def build_app(self) -> Any:
        """Build the combined ASGI app: Socket.IO in front, rate-limited HTTP behind."""
        http_app = Starlette(routes=self.http_api.routes())
        wrapped_app = RateLimitMiddleware(
            http_app,
            requests_per_minute=self.config.rate_limit_per_minute,
        )
        return socketio.ASGIApp(
            self.sio,
            other_asgi_app=wrapped_app,
            socketio_path=self.config.socketio_path,
        )

    async def start(self) -> None:
        """Start the web server and block until it exits."""
        import uvicorn

        app = self.build_app()
        if self.sweeper is not None:
            await self.sweeper.start()

        config = uvicorn.Config(
            app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(config)
        logger.info(
            f"Community hub listening on {self.config.host}:{self.config.port} "
            f"(Socket.IO at /{self.config.socketio_path})"
        )

        try:
            await self._server.serve()
        finally:
            await self._shutdown()

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server:
            self._server.should_exit = True
        await self._shutdown()

    async def _shutdown(self) -> None:
        if self.sweeper is not None:
            await self.sweeper.stop()
        hooks, self.shutdown_hooks = self.shutdown_hooks, []
        for hook in hooks:
            try:
                await hook()
            except Exception:
                logger.exception("Shutdown hook failed")
