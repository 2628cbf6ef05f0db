"""Caching primitives: Redis-backed durable cache and in-process memory cache."""

import json
import logging
import time
from typing import Any, Dict, Generic, Optional, TypeVar

import redis.asyncio as aioredis
from pydantic import BaseModel

from ..config import settings

# Configure logger
logger = logging.getLogger(__name__)

# Type variable for generic cache
T = TypeVar("T")


class CacheEntry(BaseModel, Generic[T]):
    """A cached value together with the time it was produced."""

    data: T
    cached_at: float

    def age(self, now: Optional[float] = None) -> float:
        return (now if now is not None else time.time()) - self.cached_at

    def is_fresh(self, ttl: float, now: Optional[float] = None) -> bool:
        """Whether the entry is younger than ``ttl`` seconds."""
        return self.age(now) < ttl


class MemoryCache(Generic[T]):
    """Process-local cache tier.

    Entries live for the lifetime of the owning object; freshness is decided by
    the caller from ``CacheEntry.cached_at``.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> Optional[CacheEntry[T]]:
        return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry[T]) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CacheService:
    """Redis-based caching service.

    Failures are logged and reported as misses, never raised.
    """

    def __init__(self, redis: Optional[aioredis.Redis] = None, prefix: Optional[str] = None):
        """Initialize the cache service with a Redis connection.

        Args:
            redis: Existing client to use, a client for the configured URL is created otherwise
            prefix: Namespace prepended to every key
        """
        self.redis = redis if redis is not None else aioredis.from_url(settings.cache.redis_url)
        self.prefix = prefix if prefix is not None else settings.cache.key_prefix
        self.logger = logging.getLogger(__name__)

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    async def get(self, key: str) -> Optional[str]:
        """Get a string value from cache.

        Args:
            key: Cache key

        Returns:
            Cached string value or None if not found
        """
        try:
            value = await self.redis.get(self._key(key))
            if isinstance(value, bytes):
                return value.decode("utf-8")
            return value
        except Exception as e:
            self.logger.warning(f"Cache get failed for key '{key}': {e}")
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Set a string value in cache.

        Args:
            key: Cache key
            value: String value to cache
            ttl: Time-to-live in seconds, if None cache won't expire

        Returns:
            True if successful, False otherwise
        """
        try:
            return bool(await self.redis.set(self._key(key), value, ex=ttl))
        except Exception as e:
            self.logger.warning(f"Cache set failed for key '{key}': {e}")
            return False

    async def get_json(self, key: str) -> Optional[Any]:
        """Get a JSON value from cache.

        Args:
            key: Cache key

        Returns:
            Decoded value or None if not found
        """
        value = await self.get(key)
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                self.logger.warning(f"Failed to decode JSON for key '{key}': {e}")
        return None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set a JSON value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time-to-live in seconds, if None cache won't expire

        Returns:
            True if successful, False otherwise
        """
        try:
            json_str = json.dumps(value)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Failed to encode JSON for key '{key}': {e}")
            return False
        return await self.set(key, json_str, ttl)

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            self.logger.warning(f"Cache ping failed: {e}")
            return False


# Global cache instance
cache = CacheService()
