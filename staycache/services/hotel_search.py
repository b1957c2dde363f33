"""
Hotel search service.

Translates caller-facing search queries into provider requests and
applies the filters the provider cannot.

Sandi Metz Principles:
- Single Responsibility: Search orchestration
- Dependency Injection: Fetch client injected
- Small methods: Endpoint choice, params and filters isolated
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from staycache.exceptions import MalformedInput
from staycache.fetch.client import ResilientFetchClient
from staycache.models.hotel import NormalizedHotelRecord
from staycache.models.request import Endpoint
from staycache.models.search import HotelSearchQuery, HotelSearchResult, Pagination
from staycache.utils.logger import get_logger

logger = get_logger(__name__)

LARGE_CLASS_CODE = "japan"

AREA_CODES = (
    "tokyo",
    "osaka",
    "kyoto",
    "kanagawa",
    "chiba",
    "saitama",
    "hokkaido",
    "okinawa",
)

SORT_OPTIONS = {
    "price": "+roomCharge",
    "price_desc": "-roomCharge",
    "rating": "-reviewAverage",
    "name": "+hotelName",
    "distance": "+distance",
}
DEFAULT_SORT = "+roomCharge"

# World geodetic system coordinates in degrees
DATUM_TYPE = 1


def format_date(value: Union[date, str]) -> str:
    """
    Format a stay date as YYYY-MM-DD.

    Args:
        value: date, datetime or ISO-8601 string

    Returns:
        Date string

    Raises:
        MalformedInput: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return datetime.fromisoformat(value).date().isoformat()
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Invalid date: {value!r}") from e


def apply_filters(
    hotels: List[NormalizedHotelRecord], query: HotelSearchQuery
) -> List[NormalizedHotelRecord]:
    """Apply price, rating and type filters the provider does not support."""
    kept = []
    for hotel in hotels:
        if query.min_price and hotel.pricing.min_price < query.min_price:
            continue
        if query.max_price and hotel.pricing.min_price > query.max_price:
            continue
        if query.rating and hotel.rating.overall < query.rating:
            continue
        if query.hotel_type and hotel.hotel_type != query.hotel_type:
            continue
        kept.append(hotel)
    return kept


class HotelSearchService:
    """
    Hotel search over the resilient fetch client.
    """

    def __init__(self, fetch_client: ResilientFetchClient):
        """
        Initialize service.

        Args:
            fetch_client: Provider client
        """
        self._fetch_client = fetch_client

    async def search_hotels(self, query: HotelSearchQuery) -> HotelSearchResult:
        """
        Search hotels.

        Vacancy search is used when both stay dates are given, keyword
        search when a keyword is given, simple search otherwise.

        Args:
            query: Search parameters

        Returns:
            Filtered hotels with paging summary and provider metrics
        """
        endpoint, params = self.build_request(query)
        logger.info("Hotel search", endpoint=endpoint.name, area=query.area)

        hotels = await self._fetch_client.fetch(endpoint, params)
        hotels = apply_filters(hotels, query)

        return HotelSearchResult(
            hotels=hotels,
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=len(hotels),
                has_more=len(hotels) == query.limit,
            ),
            filters=query.model_dump(
                include={
                    "area",
                    "sub_area",
                    "keyword",
                    "min_price",
                    "max_price",
                    "rating",
                    "hotel_type",
                    "sort_by",
                },
                mode="json",
            ),
            metrics=self._fetch_client.get_metrics(),
        )

    async def get_hotel_detail(
        self, hotel_id: Union[str, int]
    ) -> Optional[NormalizedHotelRecord]:
        """
        Get one hotel's details.

        Args:
            hotel_id: Provider hotel number

        Returns:
            The hotel, or None if the provider returned nothing
        """
        hotels = await self._fetch_client.fetch(
            Endpoint.HOTEL_DETAIL, {"hotelNo": hotel_id, "datumType": DATUM_TYPE}
        )
        return hotels[0] if hotels else None

    def build_request(self, query: HotelSearchQuery) -> Tuple[Endpoint, Dict[str, Any]]:
        """
        Choose the endpoint and provider parameters for a query.

        Args:
            query: Search parameters

        Returns:
            Tuple of (endpoint, params)
        """
        params: Dict[str, Any] = {
            "hits": query.limit,
            "page": query.page,
            "datumType": DATUM_TYPE,
        }

        if query.has_stay_dates:
            endpoint = Endpoint.VACANT_SEARCH
            params["checkinDate"] = format_date(query.check_in)
            params["checkoutDate"] = format_date(query.check_out)
            params["adultNum"] = query.guests
            params["roomNum"] = query.rooms
        elif query.keyword:
            endpoint = Endpoint.KEYWORD_SEARCH
            params["keyword"] = query.keyword
        else:
            endpoint = Endpoint.SIMPLE_SEARCH

        area = (query.area or "").lower()
        if area in AREA_CODES:
            params["largeClassCode"] = LARGE_CLASS_CODE
            params["middleClassCode"] = area

        params["sort"] = SORT_OPTIONS.get(query.sort_by, DEFAULT_SORT)
        return endpoint, params
