"""
Services module.

Contains business logic services for the application.
"""

from staycache.services.hotel_caches import (
    AvailabilityCache,
    CacheRegistry,
    HotelSearchCache,
    PriceCache,
)
from staycache.services.hotel_search import HotelSearchService

__all__ = [
    "AvailabilityCache",
    "CacheRegistry",
    "HotelSearchCache",
    "HotelSearchService",
    "PriceCache",
]
