"""
Hotel search request and response models.

Sandi Metz Principles:
- Small classes with clear purpose
- Validated at the boundary
- Clear naming conventions
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from staycache.models.hotel import HotelType, NormalizedHotelRecord
from staycache.models.statistics import FetchMetrics


class HotelSearchQuery(BaseModel):
    """Caller-facing hotel search parameters."""

    area: Optional[str] = Field(None, description="Area name, e.g. tokyo")
    sub_area: Optional[str] = Field(None, description="Free-form sub area")
    keyword: Optional[str] = Field(None, description="Keyword search text")
    check_in: Optional[Union[date, str]] = Field(None, description="Check-in date")
    check_out: Optional[Union[date, str]] = Field(None, description="Check-out date")
    guests: int = Field(default=2, ge=1, description="Adults per room")
    rooms: int = Field(default=1, ge=1, description="Number of rooms")
    min_price: Optional[int] = Field(None, ge=0, description="Minimum nightly price")
    max_price: Optional[int] = Field(None, ge=0, description="Maximum nightly price")
    rating: Optional[float] = Field(None, ge=0.0, le=5.0, description="Minimum rating")
    hotel_type: Optional[HotelType] = Field(None, description="Required hotel type")
    sort_by: str = Field(default="price", description="Sort option name")
    page: int = Field(default=1, ge=1, description="Result page")
    limit: int = Field(default=30, ge=1, le=30, description="Results per page")

    @property
    def has_stay_dates(self) -> bool:
        """Whether both stay dates were given."""
        return bool(self.check_in and self.check_out)


class Pagination(BaseModel):
    """Paging summary."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Records on this page after filtering")
    has_more: bool = Field(..., description="Page was full")


class HotelSearchResult(BaseModel):
    """Search response."""

    hotels: List[NormalizedHotelRecord] = Field(default_factory=list)
    pagination: Pagination
    filters: Dict[str, Any] = Field(default_factory=dict)
    metrics: FetchMetrics
