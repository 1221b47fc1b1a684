"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from feed_service import __version__
from feed_service.api.deps import Stores, get_preference_cache, get_stores
from feed_service.config import Settings, get_settings
from feed_service.infrastructure.redis import PreferenceCache
from shared.categories import CATEGORIES

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    timestamp: str
    storage_backend: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Used by load balancers to determine if the service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
        storage_backend=settings.storage_backend,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    stores: Stores = Depends(get_stores),
    cache: PreferenceCache = Depends(get_preference_cache),
    settings: Settings = Depends(get_settings),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    The catalog must answer a count query. Redis is reported but optional,
    since the service runs without the preference cache.
    """
    checks: dict[str, bool] = {}

    try:
        await stores.catalog.count(CATEGORIES[0].id)
        checks["catalog"] = True
    except Exception as e:
        logger.warning("Catalog readiness check failed", error=str(e))
        checks["catalog"] = False

    if settings.redis_enabled:
        checks["redis"] = await cache.health_check()

    return ReadinessResponse(ready=checks["catalog"], checks=checks)


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Returns 200 while the process is running."""
    return {"status": "alive"}
