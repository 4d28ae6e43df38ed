"""In-process cache backend with per-key TTL.

Implements CacheProtocol for single-process runs (CACHE_BACKEND=memory)
and as a substitute for Redis in tests. Expiry is evaluated lazily on read
against an injectable monotonic clock.
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable
from typing import Any

from orgdesk.infrastructure.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class InMemoryCache:
    """Dict-backed cache: key -> (JSON text, expires_at).

    Values are stored serialized so callers never share mutable state with
    the cache, matching what a Redis round trip returns.
    """

    def __init__(
        self,
        namespace: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            namespace: Prefix prepended to every key (same layout as Redis).
            clock: Returns seconds; tests pass a controllable clock.
        """
        self.namespace = namespace
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()
        self._connected = True

    def _make_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        async with self._lock:
            self._entries.clear()
        self._connected = False

    def is_available(self) -> bool:
        return self._connected

    def _require_connected(self, operation: str, key: str) -> None:
        if not self._connected:
            raise CacheUnavailableError(operation, key, "cache is disconnected")

    async def get(self, key: str) -> Any | None:
        self._require_connected("get", key)
        cache_key = self._make_key(key)
        async with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                logger.debug("Cache MISS: %s", key)
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[cache_key]
                logger.debug("Cache EXPIRED: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self._require_connected("set", key)
        if ttl <= 0:
            # Redis rejects a non-positive SETEX expiry the same way
            logger.warning("Cache set refused for key %s: ttl %s is not positive", key, ttl)
            return False
        serialized = json.dumps(value)
        async with self._lock:
            self._entries[self._make_key(key)] = (serialized, self._clock() + ttl)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        self._require_connected("delete", key)
        async with self._lock:
            removed = self._entries.pop(self._make_key(key), None) is not None
        logger.debug("Cache DELETE: %s", key)
        return removed

    def __len__(self) -> int:
        """Number of stored entries, expired ones included until next read."""
        return len(self._entries)
