"""
Ephemeral Store Module
======================
TTL key-value stores holding OTP and rate-limit state.
"""

from .base import EphemeralStore, StoreUnavailableError
from .in_memory import InMemoryStore
from .redis_store import RedisStore, INCR_WITH_TTL_SCRIPT

__all__ = [
    "EphemeralStore",
    "StoreUnavailableError",
    "InMemoryStore",
    "RedisStore",
    "INCR_WITH_TTL_SCRIPT",
]
