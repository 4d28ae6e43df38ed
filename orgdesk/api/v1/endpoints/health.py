"""Health check endpoints. Liveness has no dependencies; readiness reports cache state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from orgdesk.api.v1.dependencies import get_cache_service
from orgdesk.core.config import get_settings
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    cache: Annotated[CacheProtocol | None, Depends(get_cache_service)],
) -> ReadinessResponse:
    """Return 200 with the cache state; a down cache degrades latency, not correctness."""
    settings = get_settings()
    if cache is None:
        state = "disabled"
    elif cache.is_available():
        state = "connected"
    else:
        state = "unavailable"
    return ReadinessResponse(cache=state, cache_backend=settings.cache_backend)
