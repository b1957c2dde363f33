"""
Provider response normalization.

Converts the provider's nested hotel payloads into NormalizedHotelRecord.

Sandi Metz Principles:
- Single Responsibility: Payload -> canonical records
- Small methods: One builder per nested model
- Dependency Injection: Classification strategy injected
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from staycache.exceptions import UpstreamError
from staycache.fetch.classification import (
    ClassificationStrategy,
    JapaneseKeywordStrategy,
)
from staycache.models.hotel import (
    Address,
    Availability,
    GeoLocation,
    HotelImages,
    NormalizedHotelRecord,
    Pricing,
    RatingBreakdown,
)
from staycache.models.request import Endpoint
from staycache.utils.logger import get_logger

logger = get_logger(__name__)

ROOM_INFO = "roomInfo"


def to_int(value: Any) -> int:
    """Coerce a provider number to int, 0 when missing, invalid or non-finite."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


def to_float(value: Any) -> float:
    """Coerce a provider number to float, 0.0 when missing, invalid or non-finite."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(number, 0.0)


def to_str(value: Any) -> str:
    """Coerce a provider string, "" when missing."""
    if value is None:
        return ""
    return str(value)


def part(parts: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Get a named payload part, {} when missing or not an object."""
    value = parts.get(name)
    return value if isinstance(value, dict) else {}


class HotelNormalizer:
    """
    Normalizes provider payloads.

    Accepts both payload shapes the provider emits:
    hotels[i].hotel = [parts...] and hotels[i] = [parts...].
    """

    def __init__(self, strategy: Optional[ClassificationStrategy] = None):
        """
        Initialize normalizer.

        Args:
            strategy: Classification rules for derived fields
        """
        self._strategy = strategy or JapaneseKeywordStrategy()

    def normalize(self, payload: Any, endpoint: Endpoint) -> List[NormalizedHotelRecord]:
        """
        Normalize a provider payload.

        Args:
            payload: Decoded JSON body
            endpoint: Endpoint that produced the payload

        Returns:
            Normalized records (empty when the payload has no hotels)

        Raises:
            UpstreamError: If the payload carries a provider error
        """
        if isinstance(payload, dict) and payload.get("error"):
            detail = payload.get("error_description") or payload["error"]
            raise UpstreamError(f"Provider error: {detail}")

        hotels = payload.get("hotels") if isinstance(payload, dict) else None
        if not isinstance(hotels, list):
            return []

        records = []
        for item in hotels:
            parts = self._merge_parts(item)
            if not parts:
                continue
            records.append(self.build_record(parts, endpoint))
        return records

    def build_record(
        self, parts: Dict[str, Any], endpoint: Endpoint
    ) -> NormalizedHotelRecord:
        """
        Build one record from merged payload parts.

        Args:
            parts: Mapping of part name (hotelBasicInfo, ...) to its data
            endpoint: Endpoint that produced the payload

        Returns:
            Normalized record
        """
        basic = part(parts, "hotelBasicInfo")
        rating = part(parts, "hotelRatingInfo")
        detail = part(parts, "hotelDetailInfo")

        name = to_str(basic.get("hotelName"))
        description = to_str(basic.get("hotelSpecial") or basic.get("hotelComment"))
        access = to_str(basic.get("access"))

        return NormalizedHotelRecord(
            id=to_str(basic.get("hotelNo")),
            name=name,
            name_kana=to_str(basic.get("hotelKanaName")),
            description=description,
            address=self._address(basic),
            location=GeoLocation(
                latitude=to_float(basic.get("latitude")),
                longitude=to_float(basic.get("longitude")),
            ),
            access=access,
            nearest_station=to_str(basic.get("nearestStation")),
            nearby_stations=self._strategy.nearby_stations(access),
            images=HotelImages(
                main=to_str(basic.get("hotelImageUrl")),
                thumbnail=to_str(basic.get("hotelThumbnailUrl")),
            ),
            pricing=Pricing(
                min_price=to_int(basic.get("hotelMinCharge")),
                max_price=to_int(basic.get("hotelMaxCharge")),
            ),
            rating=self._rating(basic, rating),
            review_count=to_int(basic.get("reviewCount")),
            room_count=to_int(basic.get("roomCount") or detail.get("roomCount")),
            check_in=to_str(basic.get("checkinTime") or detail.get("checkinTime")),
            check_out=to_str(basic.get("checkoutTime") or detail.get("checkoutTime")),
            telephone=to_str(basic.get("telephoneNo")),
            plan_list_url=to_str(basic.get("planListUrl")),
            hotel_type=self._strategy.hotel_type(name, description),
            amenities=self._strategy.amenities(description),
            accessibility=self._strategy.accessibility(description),
            availability=self._availability(parts, endpoint),
            last_refreshed=datetime.utcnow(),
        )

    @staticmethod
    def _merge_parts(item: Any) -> Dict[str, Any]:
        if isinstance(item, dict) and isinstance(item.get("hotel"), list):
            fragments = item["hotel"]
        elif isinstance(item, list):
            fragments = item
        elif isinstance(item, dict):
            fragments = [item]
        else:
            logger.warning("Skipping unrecognised hotel item", item_type=type(item).__name__)
            return {}

        merged: Dict[str, Any] = {ROOM_INFO: []}
        for fragment in fragments:
            if not isinstance(fragment, dict):
                continue
            for name, value in fragment.items():
                if name == ROOM_INFO:
                    # One roomInfo fragment per bookable plan
                    merged[ROOM_INFO].append(value)
                elif isinstance(value, dict) and isinstance(merged.get(name), dict):
                    merged[name] = {**merged[name], **value}
                else:
                    merged[name] = value
        if len(merged) == 1 and not merged[ROOM_INFO]:
            return {}
        return merged

    @staticmethod
    def _address(basic: Dict[str, Any]) -> Address:
        prefecture = to_str(basic.get("address1"))
        city = to_str(basic.get("address2"))
        return Address(
            zip_code=to_str(basic.get("postalCode")),
            prefecture=prefecture,
            city=city,
            full_address=f"{prefecture}{city}",
        )

    @staticmethod
    def _rating(basic: Dict[str, Any], rating: Dict[str, Any]) -> RatingBreakdown:
        return RatingBreakdown(
            overall=to_float(basic.get("reviewAverage")),
            service=to_float(rating.get("serviceAverage")),
            location=to_float(rating.get("locationAverage")),
            room=to_float(rating.get("roomAverage")),
            equipment=to_float(rating.get("equipmentAverage")),
            bath=to_float(rating.get("bathAverage")),
            meal=to_float(rating.get("mealAverage")),
        )

    @staticmethod
    def _availability(parts: Dict[str, Any], endpoint: Endpoint) -> Availability:
        if not endpoint.reports_availability:
            return Availability()
        plans = parts.get(ROOM_INFO) or []
        return Availability(is_available=True, available_plans=len(plans))
