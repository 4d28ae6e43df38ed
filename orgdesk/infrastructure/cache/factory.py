"""Cache backend factory: builds the configured CacheProtocol implementation."""

import logging

from orgdesk.core.config import Settings, get_settings
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.cache.redis_cache import CacheService

logger = logging.getLogger(__name__)


def create_cache(settings: Settings | None = None) -> CacheService | InMemoryCache | None:
    """Return the cache backend selected by settings.cache_backend.

    "redis" -> CacheService (call connect() before use), "memory" -> InMemoryCache,
    "none" -> None (repositories then read straight from the database).
    """
    settings = settings or get_settings()
    if settings.cache_backend == "redis":
        return CacheService(settings=settings)
    if settings.cache_backend == "memory":
        return InMemoryCache(namespace=settings.cache_namespace)
    logger.info("Cache disabled (CACHE_BACKEND=none)")
    return None
