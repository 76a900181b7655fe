"""Per-key asyncio locks.

Serializes critical sections that share a key (a post id, a loan id) while
letting different keys proceed concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class KeyedLock:
    """A table of asyncio locks, one per key, created on demand.

    A key's lock is dropped once no task holds or waits for it, so the table
    only grows with the number of keys under contention.
    """

    def __init__(self, name: str = "keyed") -> None:
        """Initialize the lock table.

        Args:
            name: Name used in log messages.
        """
        self.name = name
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the ``async with`` block."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1

        try:
            if lock.locked():
                logger.debug(f"{self.name}: waiting for lock on '{key}'")
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]
