"""Cache: backends, key builders, entity policies and the read-through helper.

Repositories receive a CacheProtocol implementation (or None) and wrap it
in ReadThroughCache; key format lives in keys.py, TTLs and invalidation
targets in policy.py.
"""

from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.factory import create_cache
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.cache.policy import (
    CachePolicies,
    EntityCachePolicy,
    build_cache_policies,
    get_cache_policies,
)
from orgdesk.infrastructure.cache.read_through import ReadThroughCache
from orgdesk.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CachePolicies",
    "CacheProtocol",
    "CacheService",
    "EntityCachePolicy",
    "InMemoryCache",
    "ReadThroughCache",
    "build_cache_policies",
    "create_cache",
    "get_cache_policies",
]
