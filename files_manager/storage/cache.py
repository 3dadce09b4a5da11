"""Expiring key-value stores backing the session tokens.

Both backends honour an absolute expiry per key. Neither runs a sweeper:
Redis evicts on its own, the in-process store drops stale keys on access.
"""

import logging
import time
from typing import Callable, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from files_manager.core.config import Settings
from files_manager.core.errors import DependencyError

logger = logging.getLogger(__name__)


class ExpiringStore(Protocol):
    """Key to value mapping where every entry carries a TTL."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> bool: ...

    async def is_alive(self) -> bool: ...

    async def close(self) -> None: ...


class MemoryExpiringStore:
    """In-process store with absolute deadlines.

    Args:
        clock: Returns the current time in seconds. Defaults to
            ``time.monotonic``; tests pass a controllable clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if self._clock() >= deadline:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    async def delete(self, key: str) -> bool:
        # an expired entry counts as already gone
        present = await self.get(key) is not None
        self._entries.pop(key, None)
        return present

    async def is_alive(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()


class RedisExpiringStore:
    """Redis-backed store; expiry is delegated to ``SET ... EX``."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisExpiringStore":
        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as exc:
            logger.exception("Redis GET failed for %s", key[:13])
            raise DependencyError("Cache unavailable") from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            logger.exception("Redis SET failed for %s", key[:13])
            raise DependencyError("Cache unavailable") from exc

    async def delete(self, key: str) -> bool:
        try:
            return await self._redis.delete(key) > 0
        except RedisError as exc:
            logger.exception("Redis DEL failed for %s", key[:13])
            raise DependencyError("Cache unavailable") from exc

    async def is_alive(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except (RedisError, OSError):
            logger.warning("Redis liveness check failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self._redis.aclose()


def build_expiring_store(settings: Settings) -> ExpiringStore:
    if settings.cache_backend == "memory":
        return MemoryExpiringStore()
    return RedisExpiringStore.from_url(settings.redis_url)
