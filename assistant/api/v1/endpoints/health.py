"""Health check endpoints: liveness and cache-aware readiness."""

from typing import Annotated

from fastapi import APIRouter, Depends

from assistant.api.v1.dependencies import get_cache
from assistant.core.constants import HEALTH_CHECK_KEY, HEALTH_CHECK_TTL
from assistant.infrastructure.cache import KeyValueCache
from assistant.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    cache: Annotated[KeyValueCache, Depends(get_cache)],
) -> ReadinessResponse:
    """Check the cache with a short-lived write/read and report its stats.

    Always 200: a failed check reports "degraded" since the app keeps
    serving without cache.
    """
    await cache.set(HEALTH_CHECK_KEY, "ok", ttl=HEALTH_CHECK_TTL)
    healthy = await cache.get(HEALTH_CHECK_KEY) == "ok"
    stats = await cache.stats()
    return ReadinessResponse(
        status="ok" if healthy else "degraded",
        cache={"status": "healthy" if healthy else "unhealthy", **stats},
    )
