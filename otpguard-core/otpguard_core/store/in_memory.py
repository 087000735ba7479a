"""
In-Memory Ephemeral Store
=========================
TTL-aware in-memory store for development and testing.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from .base import EphemeralStore


class InMemoryStore(EphemeralStore):
    """
    In-memory key-value store with lazy expiry.

    For development and testing only; state is local to the process.
    Use RedisStore in production.

    Every method completes without awaiting, so each operation is atomic
    with respect to other coroutines on the same event loop.
    """

    name = "memory"

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Args:
            clock: Returns the current time in seconds (defaults to time.monotonic)
        """
        self._clock = clock or time.monotonic
        self._data: Dict[str, Tuple[str, float]] = {}

    def _live(self, key: str) -> Optional[Tuple[str, float]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (str(value), self._clock() + ttl_seconds)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self._live(key) is not None:
                removed += 1
            self._data.pop(key, None)
        return removed

    async def incr_with_ttl(self, key: str, ttl_seconds: int) -> int:
        entry = self._live(key)
        value = int(entry[0]) + 1 if entry else 1
        self._data[key] = (str(value), self._clock() + ttl_seconds)
        return value

    def ttl(self, key: str) -> Optional[float]:
        """Seconds until key expires, or None if absent."""
        entry = self._live(key)
        if entry is None:
            return None
        return entry[1] - self._clock()

    def clear(self) -> None:
        """Drop all entries."""
        self._data.clear()
