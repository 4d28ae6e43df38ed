"""Application lifespan: startup and shutdown.

Wiring only: the cache backend selected by CACHE_BACKEND is created and
connected on startup and exposed as app.state.cache; on shutdown the cache
is disconnected and the SQL engine disposed.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from orgdesk.core.config import get_settings
from orgdesk.infrastructure.cache.factory import create_cache
from orgdesk.infrastructure.persistence.database import dispose_engine
from orgdesk.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    A cache that cannot be reached at startup leaves app.state.cache set
    but unavailable; repositories then read straight from the database.
    """
    settings = get_settings()

    # ---- Startup ----
    cache = create_cache(settings)
    if cache is not None:
        await cache.connect()
        logger.info(
            "Cache backend %s ready (available=%s)", settings.cache_backend, cache.is_available()
        )
    app.state.cache = cache

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    await dispose_engine()
