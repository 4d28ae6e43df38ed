"""Redis-based cache service.

Provides async Redis caching with TTL support behind CacheProtocol. Every
round trip is bounded by settings.cache_operation_timeout; connection
failures and timeouts are logged and reported as a miss (get) or as
False (set/delete), never raised to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable
from typing import Any

import redis.asyncio as redis

from orgdesk.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache service with TTL support.

    Keys are stored as "<namespace>:<key>". Call connect() at startup and
    disconnect() at shutdown (see orgdesk.core.lifespan).
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.namespace = self.settings.cache_namespace
        self.timeout = self.settings.cache_operation_timeout
        self._owns_client = redis_client is None
        self._connected = False

    def _make_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def _bounded[T](self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup.

        On failure the service stays unavailable and every call is a no-op miss.
        """
        if self.redis is None:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
                socket_connect_timeout=self.timeout,
                socket_timeout=self.timeout,
                socket_keepalive=True,
            )
        try:
            await self._bounded(self.redis.ping())
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError, TimeoutError, OSError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            if self._owns_client:
                await self.redis.aclose()
                self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Ping once after a dropped connection. Returns True if Redis answers."""
        if self.redis is None:
            return False
        try:
            await self._bounded(self.redis.ping())
        except (redis.RedisError, TimeoutError, OSError):
            return False
        self._connected = True
        return True

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        Args:
            key: Cache key (use orgdesk.infrastructure.cache.keys builders).
        """
        if not self.is_available() or self.redis is None:
            return None
        cache_key = self._make_key(key)
        try:
            value = await self._bounded(self.redis.get(cache_key))
        except TimeoutError:
            logger.warning("Cache get timed out for key %s", key)
            return None
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect():
                logger.warning("Cache get unavailable for key %s (Redis disconnected)", key)
                return None
            try:
                value = await self._bounded(self.redis.get(cache_key))
            except (redis.RedisError, TimeoutError):
                logger.exception("Cache get error for key %s after reconnect", key)
                return None
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            decoded = json.loads(value)
        except ValueError:
            logger.warning("Discarding non-JSON cache entry %s", key)
            await self.delete(key)
            return None
        logger.debug("Cache HIT: %s", key)
        return decoded

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL (SETEX). Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds.
        """
        if not self.is_available() or self.redis is None:
            return False
        if ttl <= 0:
            # SETEX rejects it with a ResponseError
            logger.warning("Cache set refused for key %s: ttl %s is not positive", key, ttl)
            return False
        cache_key = self._make_key(key)
        serialized = json.dumps(value)
        try:
            await self._bounded(self.redis.setex(cache_key, ttl, serialized))
        except TimeoutError:
            logger.warning("Cache set timed out for key %s", key)
            return False
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect():
                logger.warning("Cache set unavailable for key %s (Redis disconnected)", key)
                return False
            try:
                await self._bounded(self.redis.setex(cache_key, ttl, serialized))
            except (redis.RedisError, TimeoutError):
                logger.exception("Cache set error for key %s after reconnect", key)
                return False
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the DEL was acknowledged.

        Deleting an absent key is acknowledged too (DEL returns 0).
        """
        if not self.is_available() or self.redis is None:
            return False
        cache_key = self._make_key(key)
        try:
            await self._bounded(self.redis.delete(cache_key))
        except TimeoutError:
            logger.warning("Cache delete timed out for key %s", key)
            return False
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect():
                logger.warning(
                    "Cache delete unavailable for key %s (Redis disconnected)", key
                )
                return False
            try:
                await self._bounded(self.redis.delete(cache_key))
            except (redis.RedisError, TimeoutError):
                logger.exception("Cache delete error for key %s after reconnect", key)
                return False
        except redis.RedisError:
            logger.exception("Cache delete error for key %s", key)
            return False
        logger.debug("Cache DELETE: %s", key)
        return True
