"""
Durable session storage backends.
"""
from __future__ import annotations

from educloud.config import Settings
from educloud.shared.storage.file_storage import FileStorage
from educloud.shared.storage.memory_storage import MemoryStorage
from educloud.shared.storage.redis_storage import RedisStorage
from educloud.shared.storage.storage_protocol import IKeyValueStorage


def build_storage(settings: Settings) -> IKeyValueStorage:
    backend = settings.SESSION_BACKEND.lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(settings.SESSION_FILE)
    if backend == "redis":
        if not settings.REDIS_URL:
            raise ValueError("SESSION_BACKEND=redis requires REDIS_URL")
        from redis.asyncio import Redis

        return RedisStorage(Redis.from_url(settings.REDIS_URL), key_prefix=settings.REDIS_KEY_PREFIX)
    raise ValueError(f"SESSION_BACKEND must be one of ('file', 'redis', 'memory'), got {backend!r}")


__all__ = [
    "IKeyValueStorage",
    "FileStorage",
    "MemoryStorage",
    "RedisStorage",
    "build_storage",
]
