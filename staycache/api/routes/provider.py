"""
Search provider operator endpoints.

Sandi Metz Principles:
- Single Responsibility: Expose provider metrics and cache control
- Thin handlers: Work is delegated to the fetch client
"""

from fastapi import APIRouter, Depends

from staycache.api.deps import get_fetch_client
from staycache.fetch.client import ResilientFetchClient
from staycache.models.response import ResetResponse
from staycache.models.statistics import FetchMetrics

router = APIRouter()


@router.get("/provider/metrics", response_model=FetchMetrics)
async def get_provider_metrics(
    client: ResilientFetchClient = Depends(get_fetch_client),  # noqa: B008
) -> FetchMetrics:
    """
    Get provider metrics.

    Returns:
        Request, error and latency metrics
    """
    return client.get_metrics()


@router.post("/provider/metrics/reset", response_model=ResetResponse)
async def reset_provider_metrics(
    client: ResilientFetchClient = Depends(get_fetch_client),  # noqa: B008
) -> ResetResponse:
    """Zero the provider metrics."""
    client.reset_metrics()
    return ResetResponse(status="reset")


@router.delete("/provider/cache", response_model=ResetResponse)
async def clear_provider_cache(
    client: ResilientFetchClient = Depends(get_fetch_client),  # noqa: B008
) -> ResetResponse:
    """Drop every cached provider response."""
    removed = await client.clear_response_cache()
    return ResetResponse(status="cleared", removed=removed)
