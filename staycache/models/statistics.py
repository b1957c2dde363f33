"""
Cache and provider statistics models.

Sandi Metz Principles:
- Small classes with clear purpose
- Computed properties for derived metrics
- Clear naming conventions
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, computed_field


class CacheStatistics(BaseModel):
    """Snapshot of coordinator counters."""

    l1_hits: int = Field(default=0, ge=0, description="Tier-1 hits")
    l1_misses: int = Field(default=0, ge=0, description="Tier-1 misses")
    l2_hits: int = Field(default=0, ge=0, description="Tier-2 hits")
    l2_misses: int = Field(default=0, ge=0, description="Tier-2 misses")
    origin_fetches: int = Field(default=0, ge=0, description="Producer invocations")
    tier2_errors: int = Field(default=0, ge=0, description="Absorbed tier-2 failures")
    coalesced: int = Field(
        default=0, ge=0, description="Lookups that joined an in-flight fetch"
    )
    warming_enqueued: int = Field(default=0, ge=0, description="Warming tasks queued")
    warming_completed: int = Field(default=0, ge=0, description="Warming tasks done")
    warming_failed: int = Field(default=0, ge=0, description="Warming tasks dropped")
    last_tier2_error: Optional[str] = Field(None, description="Latest tier-2 error")

    @computed_field  # type: ignore[misc]
    @property
    def total_requests(self) -> int:
        """Lookups that reached tier-1."""
        return self.l1_hits + self.l1_misses

    @computed_field  # type: ignore[misc]
    @property
    def total_cache_hits(self) -> int:
        """Hits served by either tier."""
        return self.l1_hits + self.l2_hits

    @computed_field  # type: ignore[misc]
    @property
    def l1_hit_rate(self) -> float:
        """Tier-1 hit rate percentage."""
        return _rate(self.l1_hits, self.l1_hits + self.l1_misses)

    @computed_field  # type: ignore[misc]
    @property
    def l2_hit_rate(self) -> float:
        """Tier-2 hit rate percentage."""
        return _rate(self.l2_hits, self.l2_hits + self.l2_misses)


class FetchMetrics(BaseModel):
    """Snapshot of search provider metrics."""

    request_count: int = Field(default=0, ge=0, description="Provider requests")
    error_count: int = Field(default=0, ge=0, description="Fallbacks served")
    response_time_sum_ms: float = Field(
        default=0.0, ge=0.0, description="Summed latency of successful requests"
    )
    cache_size: int = Field(default=0, ge=0, description="Response cache entries")
    failures: Dict[str, int] = Field(
        default_factory=dict, description="Failures by classification"
    )
    last_updated: datetime = Field(
        default_factory=datetime.utcnow, description="Snapshot time"
    )

    @computed_field  # type: ignore[misc]
    @property
    def success_rate(self) -> float:
        """Success percentage, 100 when nothing was requested."""
        if self.request_count == 0:
            return 100.0
        return round(
            (self.request_count - self.error_count) / self.request_count * 100.0, 2
        )

    @computed_field  # type: ignore[misc]
    @property
    def average_response_time_ms(self) -> float:
        """Mean latency of successful requests."""
        successes = self.request_count - self.error_count
        if successes <= 0:
            return 0.0
        return round(self.response_time_sum_ms / successes, 2)


def _rate(hits: int, total: int) -> float:
    return round(hits / total * 100.0, 2) if total > 0 else 0.0
