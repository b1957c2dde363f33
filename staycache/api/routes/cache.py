"""
Cache operator endpoints.

Sandi Metz Principles:
- Single Responsibility: Expose cache statistics and invalidation
- Thin handlers: Work is delegated to the coordinator
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from staycache.api.deps import get_cache_registry, get_coordinator
from staycache.cache.coordinator import CacheCoordinator
from staycache.models.response import InvalidateRequest, InvalidateResponse, ResetResponse
from staycache.services.hotel_caches import CacheRegistry
from staycache.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/cache/stats")
async def get_cache_stats(
    registry: CacheRegistry = Depends(get_cache_registry),  # noqa: B008
) -> Dict[str, Any]:
    """
    Get cache statistics.

    Returns:
        Coordinator counters, derived rates and per-namespace lookups
    """
    return registry.all_stats()


@router.post("/cache/stats/reset", response_model=ResetResponse)
async def reset_cache_stats(
    coordinator: CacheCoordinator = Depends(get_coordinator),  # noqa: B008
) -> ResetResponse:
    """Zero the coordinator statistics."""
    coordinator.reset_stats()
    return ResetResponse(status="reset")


@router.post("/cache/invalidate", response_model=InvalidateResponse)
async def invalidate_cache(
    body: InvalidateRequest,
    coordinator: CacheCoordinator = Depends(get_coordinator),  # noqa: B008
) -> InvalidateResponse:
    """
    Invalidate keys containing a pattern in both tiers.

    Returns:
        Entries removed per tier
    """
    result = await coordinator.invalidate(body.pattern)
    logger.info("Operator invalidation", pattern=body.pattern, **result)
    return InvalidateResponse(
        pattern=body.pattern,
        tier1_removed=result["tier1"],
        tier2_removed=result["tier2"],
    )
