"""
Namespaced cache façades.

Each façade composes the shared coordinator and fixes the key layout and
TTL policy for one kind of hotel data.

Sandi Metz Principles:
- Composition over inheritance: Façades wrap one coordinator
- Single Responsibility: Key layout and TTL policy per data type
- Clear naming: One method per cached lookup
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from staycache.cache.coordinator import CacheCoordinator
from staycache.models.cache_entry import CacheOptions, Producer
from staycache.utils.hasher import DEFAULT_KEY_VERSION, build_key
from staycache.utils.logger import get_logger

logger = get_logger(__name__)

LOCATION_SEARCH_TTL = 300
HOTEL_DETAILS_TTL = 3600
AVAILABILITY_TTL = 60
PRICE_TTL = 30
DEALS_TTL = 300
COORDINATE_PRECISION = 3


class NamespacedCache:
    """Base for façades that share a coordinator under one namespace."""

    namespace = ""

    def __init__(
        self, coordinator: CacheCoordinator, key_version: str = DEFAULT_KEY_VERSION
    ):
        """
        Initialize façade.

        Args:
            coordinator: Shared cache coordinator
            key_version: Version tag embedded in hashed keys
        """
        self._coordinator = coordinator
        self._key_version = key_version
        self._lookups = 0

    def key(self, params: Mapping[str, Any]) -> str:
        """Build a hashed key in this namespace."""
        return build_key(self.namespace, params, self._key_version)

    async def _get(self, key: str, producer: Producer, options: CacheOptions) -> Any:
        self._lookups += 1
        return await self._coordinator.get(key, producer, options)

    async def invalidate(self) -> Dict[str, int]:
        """Drop every key in this namespace."""
        return await self._coordinator.invalidate(f"{self.namespace}:")

    def get_stats(self) -> Dict[str, Any]:
        """Lookups routed through this façade."""
        return {"namespace": self.namespace, "lookups": self._lookups}


class HotelSearchCache(NamespacedCache):
    """Location searches and hotel details."""

    namespace = "hotel:search"

    async def cache_location_search(
        self,
        lat: float,
        lng: float,
        radius: float,
        filters: Optional[Mapping[str, Any]],
        producer: Producer,
    ) -> Any:
        """
        Cache a radius search around a point.

        Coordinates are rounded to 3 decimals so nearby points share
        an entry.

        Args:
            lat: Latitude
            lng: Longitude
            radius: Search radius
            filters: Additional scalar filters
            producer: Computes the result on a miss

        Returns:
            Cached or produced search result
        """
        params = {
            "lat": round(lat, COORDINATE_PRECISION),
            "lng": round(lng, COORDINATE_PRECISION),
            "radius": radius,
            **(filters or {}),
        }
        options = CacheOptions(ttl_seconds=LOCATION_SEARCH_TTL, warm=True)
        return await self._get(self.key(params), producer, options)

    async def cache_hotel_details(self, hotel_id: str | int, producer: Producer) -> Any:
        """Cache one hotel's details for an hour."""
        key = f"{self.namespace}:details:{hotel_id}"
        return await self._get(key, producer, CacheOptions(ttl_seconds=HOTEL_DETAILS_TTL))


class AvailabilityCache(NamespacedCache):
    """Short-lived vacancy lookups."""

    namespace = "availability"

    def availability_key(self, hotel_id: str | int, check_in: str, check_out: str) -> str:
        """Key for one hotel and stay."""
        return self.key({"hotelId": hotel_id, "checkIn": check_in, "checkOut": check_out})

    async def cache_availability(
        self, hotel_id: str | int, check_in: str, check_out: str, producer: Producer
    ) -> Any:
        """Cache one hotel's availability for a minute."""
        key = self.availability_key(hotel_id, check_in, check_out)
        return await self._get(key, producer, CacheOptions(ttl_seconds=AVAILABILITY_TTL))

    async def batch_cache_availability(
        self,
        queries: Sequence[Mapping[str, Any]],
        producer: Callable[[List[Mapping[str, Any]]], Any],
    ) -> List[Any]:
        """
        Cache availability for many stays with one producer call.

        Args:
            queries: Mappings with hotelId, checkIn and checkOut
            producer: Receives the queries no tier could serve and returns
                positionally aligned results

        Returns:
            Results in the same order as queries
        """
        by_key: Dict[str, Mapping[str, Any]] = {}
        keys = []
        for query in queries:
            key = self.availability_key(query["hotelId"], query["checkIn"], query["checkOut"])
            by_key.setdefault(key, query)
            keys.append(key)

        def produce_missing(missing_keys: List[str]) -> Any:
            return producer([by_key[key] for key in missing_keys])

        self._lookups += len(keys)
        return await self._coordinator.batch_get(
            keys, produce_missing, CacheOptions(ttl_seconds=AVAILABILITY_TTL)
        )


class PriceCache(NamespacedCache):
    """Near real-time prices and the best-deals list."""

    namespace = "price"

    async def cache_prices(self, hotel_id: str | int, date: str, producer: Producer) -> Any:
        """Cache one hotel's price for a date, refreshed by warming."""
        key = f"{self.namespace}:{hotel_id}:{date}"
        return await self._get(key, producer, CacheOptions(ttl_seconds=PRICE_TTL, warm=True))

    async def cache_deals(self, producer: Producer) -> Any:
        """Cache the best-deals list, refreshed by warming."""
        key = f"{self.namespace}:deals:best"
        return await self._get(key, producer, CacheOptions(ttl_seconds=DEALS_TTL, warm=True))


class CacheRegistry:
    """All façades over one coordinator."""

    def __init__(
        self, coordinator: CacheCoordinator, key_version: str = DEFAULT_KEY_VERSION
    ):
        self.coordinator = coordinator
        self.hotel_search = HotelSearchCache(coordinator, key_version)
        self.availability = AvailabilityCache(coordinator, key_version)
        self.price = PriceCache(coordinator, key_version)

    @property
    def facades(self) -> Dict[str, NamespacedCache]:
        """Façades by name."""
        return {
            "hotel_search": self.hotel_search,
            "availability": self.availability,
            "price": self.price,
        }

    def all_stats(self) -> Dict[str, Any]:
        """Coordinator statistics plus per-façade lookup counts."""
        return {
            "coordinator": self.coordinator.get_stats().model_dump(),
            **{name: facade.get_stats() for name, facade in self.facades.items()},
        }

    async def clear_all(self) -> Dict[str, Dict[str, int]]:
        """Invalidate every façade namespace."""
        results = {name: await facade.invalidate() for name, facade in self.facades.items()}
        logger.info("All namespaced caches cleared")
        return results
