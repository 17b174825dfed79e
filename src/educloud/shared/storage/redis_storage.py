"""
Redis Storage Implementation
Async Redis-backed session persistence
"""
from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from educloud.shared.exceptions import StorageError
from educloud.shared.logging import get_logger

logger = get_logger(__name__)


class RedisStorage:
    """
    Async Redis storage.

    Lets several console processes on one machine share the same provider and
    school sessions.

    Attributes:
        redis: Async Redis client
        key_prefix: Prefix for all keys (for namespacing)
    """

    def __init__(self, redis: Redis, key_prefix: str = "educloud") -> None:
        self.redis = redis
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create prefixed key for namespacing."""
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self.redis.get(self._make_key(key))
        except RedisError as e:
            logger.error("Redis GET failed", key=key, error=str(e))
            return None
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.redis.set(self._make_key(key), value)
        except RedisError as e:
            logger.error("Redis SET failed", key=key, error=str(e))
            raise StorageError(details={"key": key}) from e

    async def delete(self, key: str) -> bool:
        try:
            result = await self.redis.delete(self._make_key(key))
        except RedisError as e:
            logger.error("Redis DELETE failed", key=key, error=str(e))
            raise StorageError(details={"key": key}) from e
        return result > 0
