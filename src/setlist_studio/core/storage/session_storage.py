"""Session storage interface and implementations.

Redis is used when it is enabled and answers a ping; otherwise sessions
live in process memory with per-key expiry.
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import redis.asyncio as redis_async
from loguru import logger
from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

from src.setlist_studio.runtime.config.config_data import RedisConfig

T = TypeVar("T", bound=BaseModel)


class SessionStorage(ABC):
    """Abstract interface for session storage backends."""

    name: str = "abstract"

    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store a session under ``key`` for ``ttl_seconds``."""

    @abstractmethod
    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Return the session, or None when missing or expired."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a session."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """True if the session exists and has not expired."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Remove expired sessions and return how many were dropped."""

    @abstractmethod
    async def ping(self) -> bool:
        """Health probe for the backend."""


class InMemorySessionStorage(SessionStorage):
    """In-memory session storage with TTL support."""

    name = "memory"

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self._data[key] = {
            "data": json.loads(value.model_dump_json()),
            "expires_at": time.time() + ttl_seconds,
        }

    async def get(self, key: str, model_class: type[T]) -> T | None:
        entry = self._data.get(key)
        if entry is None:
            return None

        if time.time() > entry["expires_at"]:
            del self._data[key]
            return None

        try:
            return model_class.model_validate(entry["data"])
        except ValidationError:
            logger.warning("Dropping unreadable session {}", key)
            del self._data[key]
            return None

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        if time.time() > entry["expires_at"]:
            del self._data[key]
            return False
        return True

    async def cleanup_expired(self) -> int:
        now = time.time()
        expired_keys = [key for key, entry in self._data.items() if now > entry["expires_at"]]
        for key in expired_keys:
            del self._data[key]
        return len(expired_keys)

    async def ping(self) -> bool:
        return True


class RedisSessionStorage(SessionStorage):
    """Redis-based session storage; Redis handles expiry."""

    name = "redis"

    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value.model_dump_json())
        except RedisError as e:
            raise RuntimeError(f"Redis set failed: {e}") from e

    async def get(self, key: str, model_class: type[T]) -> T | None:
        try:
            data = await self._redis.get(key)
        except RedisError as e:
            raise RuntimeError(f"Redis get failed: {e}") from e

        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return model_class.model_validate_json(data)

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise RuntimeError(f"Redis delete failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(key))
        except RedisError as e:
            raise RuntimeError(f"Redis exists failed: {e}") from e

    async def cleanup_expired(self) -> int:
        return 0

    async def ping(self) -> bool:
        try:
            await self._redis.ping()
            return True
        except (RedisError, OSError) as e:
            logger.warning("Redis ping failed: {}", e)
            return False

    async def close(self) -> None:
        await self._redis.aclose()


async def create_session_storage(config: RedisConfig) -> SessionStorage:
    """Build Redis storage when configured and reachable, else in-memory storage."""
    if not config.enabled or not config.url:
        logger.info("Session storage: in-memory (Redis not configured)")
        return InMemorySessionStorage()

    client = redis_async.from_url(
        config.connection_string,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    storage = RedisSessionStorage(client)
    if await storage.ping():
        logger.info("Session storage: Redis connected")
        return storage

    logger.warning("Redis unavailable, using in-memory session storage")
    await storage.close()
    return InMemorySessionStorage()
