"""Read-through lookups and delete-only invalidation on top of CacheProtocol.

get_or_load: cache hit returns the decoded value without touching the
store; a miss calls the loader, and only a non-None result is written back
with the caller's TTL. Negative results are never cached.

invalidate_*: after a store write, every key the entity policy associates
with the record (before and after the write) is deleted. Values are never
written into the cache by a mutation; the next read repopulates it.

The cache is an accelerator only: timeouts, connection errors and
undecodable payloads are logged and treated as a miss.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from orgdesk.core.config import get_settings
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.codec import decode_value, encode_value
from orgdesk.infrastructure.cache.policy import EntityCachePolicy
from orgdesk.infrastructure.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)

# "Cache not reachable right now". OSError covers TimeoutError and ConnectionError;
# anything else is a bug and propagates.
_CACHE_FAILURES = (CacheUnavailableError, OSError)


class ReadThroughCache:
    """Cache-aside helper shared by all repositories.

    Args:
        cache: Backend implementing CacheProtocol, or None to disable caching.
        timeout: Per-operation bound in seconds (default settings.cache_operation_timeout).
        bypass: Called before every get_or_load; when it returns True the
            loader runs and the cache is neither read nor populated
            (repositories pass "the session has uncommitted writes").
    """

    def __init__(
        self,
        cache: CacheProtocol | None,
        *,
        timeout: float | None = None,
        bypass: Callable[[], bool] | None = None,
    ) -> None:
        self.cache = cache
        self.timeout = (
            timeout if timeout is not None else get_settings().cache_operation_timeout
        )
        self.bypass = bypass

    def is_enabled(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def lookup(self, key: str, value_type: Any) -> Any | None:
        """Return the decoded cached value for key, or None on miss or failure."""
        if not self.is_enabled() or self.cache is None:
            return None
        try:
            data = await asyncio.wait_for(self.cache.get(key), timeout=self.timeout)
        except _CACHE_FAILURES as e:
            logger.warning("Cache read failed for %s, falling back to store: %s", key, e)
            return None
        except ValueError:
            # backend could not parse the stored payload
            logger.warning("Discarding unparseable cache entry %s", key)
            await self._delete(key)
            return None
        if data is None:
            return None
        try:
            return decode_value(data, value_type)
        except ValueError:
            # pydantic ValidationError: payload does not match value_type
            logger.warning("Discarding undecodable cache entry %s", key)
            await self._delete(key)
            return None

    async def store(self, key: str, value: Any, value_type: Any, ttl: int) -> None:
        """Write value under key with ttl; failures are logged and ignored."""
        if not self.is_enabled() or self.cache is None:
            return
        try:
            await asyncio.wait_for(
                self.cache.set(key, encode_value(value, value_type), ttl),
                timeout=self.timeout,
            )
        except _CACHE_FAILURES as e:
            logger.warning("Cache populate failed for %s: %s", key, e)

    async def get_or_load[T](
        self,
        key: str,
        loader: Callable[[], Awaitable[T | None]],
        *,
        ttl: int,
        value_type: Any,
        alias_keys: Callable[[T], Iterable[str]] | None = None,
    ) -> T | None:
        """Return the value for key from cache, else from loader (then cache it).

        Args:
            key: Cache key for this lookup.
            loader: Reads the value from the durable store; None means not found.
            ttl: Seconds the populated entry may be served.
            value_type: Type used to encode/decode the cached value.
            alias_keys: Optional extra keys to populate with the same value on a
                miss (e.g. the primary key when looking up by slug).
        """
        if self.bypass is not None and self.bypass():
            return await loader()
        cached = await self.lookup(key, value_type)
        if cached is not None:
            return cached
        value = await loader()
        if value is None:
            return None
        populate = [key]
        if alias_keys is not None:
            populate.extend(k for k in alias_keys(value) if k != key)
        for cache_key in populate:
            await self.store(cache_key, value, value_type, ttl)
        return value

    async def _delete(self, key: str) -> None:
        if self.cache is None:
            return
        try:
            await asyncio.wait_for(self.cache.delete(key), timeout=self.timeout)
        except _CACHE_FAILURES as e:
            logger.warning("Cache invalidation failed for %s: %s", key, e)

    async def invalidate(self, keys: Iterable[str]) -> None:
        """Delete every key (idempotent; absent keys are fine)."""
        if not self.is_enabled():
            return
        for key in dict.fromkeys(keys):
            await self._delete(key)

    async def invalidate_created[R](
        self, policy: EntityCachePolicy[R], record: R
    ) -> list[str]:
        """After create: nothing was cached for the new record, only its aggregates.

        Returns the keys that were dropped (for the post-commit pass).
        """
        dropped = policy.derived_keys(record)
        await self.invalidate(dropped)
        return dropped

    async def invalidate_updated[R](
        self, policy: EntityCachePolicy[R], before: R, after: R
    ) -> list[str]:
        """After update: keys from the prior values (old slug/email) and the new ones."""
        dropped = list(
            dict.fromkeys([*policy.affected_keys(before), *policy.affected_keys(after)])
        )
        await self.invalidate(dropped)
        return dropped

    async def invalidate_deleted[R](
        self, policy: EntityCachePolicy[R], record: R
    ) -> list[str]:
        """After delete: primary, every secondary key and all aggregates."""
        dropped = policy.affected_keys(record)
        await self.invalidate(dropped)
        return dropped
