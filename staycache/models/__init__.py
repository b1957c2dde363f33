"""
Models package for StayCache.

Exports all model classes for easy imports throughout the application.
"""

# Cache models
from staycache.models.cache_entry import CacheEntry, CacheOptions, CacheTier

# Hotel models
from staycache.models.hotel import HotelType, NormalizedHotelRecord

# Request models
from staycache.models.request import Endpoint, ExternalRequestContext

# Response models
from staycache.models.response import ComponentHealth, HealthResponse

# Search models
from staycache.models.search import HotelSearchQuery, HotelSearchResult

# Statistics models
from staycache.models.statistics import CacheStatistics, FetchMetrics

__all__ = [
    # Cache
    "CacheEntry",
    "CacheOptions",
    "CacheTier",
    # Hotel
    "HotelType",
    "NormalizedHotelRecord",
    # Request
    "Endpoint",
    "ExternalRequestContext",
    # Response
    "ComponentHealth",
    "HealthResponse",
    # Search
    "HotelSearchQuery",
    "HotelSearchResult",
    # Statistics
    "CacheStatistics",
    "FetchMetrics",
]
