"""
Redis Ephemeral Store
=====================
Redis-backed store using a Lua script for atomic increment-with-expiry.
"""

from typing import Optional

import structlog
from redis import asyncio as aioredis
from redis.exceptions import NoScriptError, RedisError

from .base import EphemeralStore, StoreUnavailableError

logger = structlog.get_logger(__name__)

# INCR and EXPIRE in one round trip so the returned count is never stale
INCR_WITH_TTL_SCRIPT = """
local value = redis.call('INCR', KEYS[1])
redis.call('EXPIRE', KEYS[1], tonumber(ARGV[1]))
return value
"""


class RedisStore(EphemeralStore):
    """
    Redis-backed ephemeral store.

    Any redis error is raised as StoreUnavailableError. The store never
    fails open: a limiter that cannot read its locks must not issue codes.
    """

    name = "redis"

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Async Redis client (redis.asyncio.Redis)
        """
        self.redis = redis_client
        self._script_sha: Optional[str] = None

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisStore":
        """Create a store from a redis:// URL."""
        return cls(aioredis.from_url(redis_url, decode_responses=True))

    def _fail(self, operation: str, key: Optional[str], exc: Exception) -> StoreUnavailableError:
        logger.error(
            "store_operation_failed",
            backend=self.name,
            operation=operation,
            error=str(exc),
        )
        return StoreUnavailableError(str(exc), operation=operation, key=key)

    async def _ensure_script(self) -> str:
        """Load the Lua script into Redis if needed."""
        if self._script_sha is None:
            self._script_sha = await self.redis.script_load(INCR_WITH_TTL_SCRIPT)
        return self._script_sha

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.redis.get(key)
        except RedisError as e:
            raise self._fail("get", key, e) from e
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise self._fail("set", key, e) from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self.redis.delete(*keys))
        except RedisError as e:
            raise self._fail("delete", keys[0], e) from e

    async def incr_with_ttl(self, key: str, ttl_seconds: int) -> int:
        try:
            script_sha = await self._ensure_script()
            try:
                result = await self.redis.evalsha(script_sha, 1, key, ttl_seconds)
            except NoScriptError:
                # Script cache flushed (e.g. failover); load it again
                self._script_sha = None
                script_sha = await self._ensure_script()
                result = await self.redis.evalsha(script_sha, 1, key, ttl_seconds)
        except RedisError as e:
            raise self._fail("incr_with_ttl", key, e) from e
        return int(result)

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            raise self._fail("ping", None, e) from e

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self.redis.aclose()
