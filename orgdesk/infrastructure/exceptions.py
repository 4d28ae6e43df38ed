"""Infrastructure exceptions for cache operations.

Cache errors never reach callers of the repositories: the read-through
layer treats them as a miss (reads) or logs and drops them (writes).
"""

from orgdesk.domain.exceptions import OrgdeskException


class CacheException(OrgdeskException):
    """Base exception for cache operations."""


class CacheUnavailableError(CacheException):
    """Cache backend could not be reached (connection refused, closed, timed out)."""

    def __init__(self, operation: str, key: str, reason: str) -> None:
        super().__init__(
            f"Cache {operation} failed for key {key}: {reason}",
            "CACHE_UNAVAILABLE",
            {"operation": operation, "key": key, "reason": reason},
        )
