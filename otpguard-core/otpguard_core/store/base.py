"""
Ephemeral Store Interface
=========================
Abstract key-value store with per-key TTL used for all OTP and limiter state.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StoreUnavailableError(Exception):
    """Raised when the ephemeral store cannot be reached or errors out."""

    def __init__(self, message: str, operation: str = "unknown", key: Optional[str] = None):
        self.message = message
        self.operation = operation
        self.key = key
        super().__init__(f"[store:{operation}] {message}")


class EphemeralStore(ABC):
    """
    Shared key-value store with TTL semantics.

    Expiry is the only passive deletion mechanism. Implementations raise
    StoreUnavailableError for any backend failure.
    """

    name: str = "base"

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored at key, or None if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value at key, replacing any previous value and resetting its TTL."""

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete keys. Returns the number of keys that existed."""

    @abstractmethod
    async def incr_with_ttl(self, key: str, ttl_seconds: int) -> int:
        """
        Atomically increment the integer at key and reset its TTL.

        A missing key counts as 0, so the first call returns 1.

        Returns:
            The value after the increment
        """

    async def ping(self) -> bool:
        """Check connectivity. In-process stores are always reachable."""
        return True
