"""FastAPI dependencies shared by v1 endpoints."""

from fastapi import Request

from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol


def get_cache_service(request: Request) -> CacheProtocol | None:
    """Cache backend created by the lifespan (None when CACHE_BACKEND=none)."""
    return getattr(request.app.state, "cache", None)
