"""
Health check endpoints.

Sandi Metz Principles:
- Single Responsibility: Health check logic only
- Small functions: Each check isolated
- Clear naming: Descriptive endpoint names
"""

import time

from fastapi import APIRouter, Depends

from staycache.api.deps import get_coordinator
from staycache.cache.coordinator import CacheCoordinator
from staycache.config import config
from staycache.models.response import ComponentHealth, HealthResponse
from staycache.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

VERSION = "0.1.0"


async def check_redis_health(coordinator: CacheCoordinator) -> ComponentHealth:
    """
    Check the shared cache tier.

    Redis being down degrades the service rather than breaking it, since
    the coordinator falls back to tier-1 and producers.
    """
    start = time.perf_counter()
    is_healthy = await coordinator.health_check()
    latency = (time.perf_counter() - start) * 1000

    if is_healthy:
        return ComponentHealth(status="healthy", latency_ms=round(latency, 2))
    return ComponentHealth(status="degraded", message="Redis ping failed")


@router.get("/health", response_model=HealthResponse)
async def health_check(
    coordinator: CacheCoordinator = Depends(get_coordinator),  # noqa: B008
) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Health status with per-component detail
    """
    components = {"redis": await check_redis_health(coordinator)}
    statuses = [component.status for component in components.values()]
    overall = "healthy" if all(s == "healthy" for s in statuses) else "degraded"

    return HealthResponse(
        status=overall,
        environment=config.app_env,
        version=VERSION,
        components=components,
    )
