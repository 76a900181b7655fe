"""Periodic sweep of presence entries whose transport connection is gone."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from community_hub.domain.contracts import HubEmitterProtocol, HubEventHandlerProtocol

logger = logging.getLogger(__name__)


class StaleConnectionSweeper:
    """Reconciles the presence registry with the transport's live connections."""

    def __init__(
        self,
        handler: HubEventHandlerProtocol,
        emitter: HubEmitterProtocol,
        interval_seconds: float,
    ) -> None:
        """Initialize the sweeper.

        Args:
            handler: Hub event handler that owns presence state.
            emitter: Emitter used to check whether a connection is still live.
            interval_seconds: Seconds between sweeps (0 disables sweeping).
        """
        self.handler = handler
        self.emitter = emitter
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the sweeper."""
        if self.interval_seconds <= 0:
            logger.info("Stale connection sweeper disabled")
            return
        if self.running:
            logger.warning("Stale connection sweeper already running")
            return

        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Started stale connection sweeper (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the sweeper."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Stale connection sweeper cancelled")
            logger.info("Stopped stale connection sweeper")
        self._task = None

    async def sweep_once(self) -> int:
        """Run a single sweep and return how many entries were removed."""
        result = await self.handler.sweep_stale(self.emitter.is_connected)
        if result.removed_count:
            logger.info(
                f"Swept {result.removed_count} stale connection(s), "
                f"{result.remaining_count} remaining"
            )
        return result.removed_count

    async def _sweep_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                try:
                    await self.sweep_once()
                except Exception:
                    logger.exception("Stale connection sweep failed")
        except asyncio.CancelledError:
            logger.info("Stale connection sweeper cancelled")
            raise
