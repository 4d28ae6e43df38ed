"""Cache protocol for the repository layer (DIP).

Implemented by CacheService (Redis) and InMemoryCache. Repositories receive
an instance (or None for "no cache") through their constructor.
"""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Key-value store with per-key TTL. Values are JSON-compatible."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value, or None when absent or expired. Never raises on a miss."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds, overwriting any previous value."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Deleting an absent key is not an error."""
        ...
