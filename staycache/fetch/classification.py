"""
Keyword-based hotel classification.

Sandi Metz Principles:
- Single Responsibility: Infer categories from free text
- Open/Closed: Strategies are pluggable through a protocol
- Pure functions: No side effects
"""

import re
from typing import List, Protocol, Sequence, Tuple

from staycache.models.hotel import Accessibility, HotelType

STATION_PATTERN = re.compile(r"[^\s、，,。・/()（）]+?駅")

AMENITY_KEYWORDS: Tuple[str, ...] = (
    "Wi-Fi",
    "WiFi",
    "無線LAN",
    "インターネット",
    "駐車場",
    "パーキング",
    "温泉",
    "大浴場",
    "スパ",
    "レストラン",
    "朝食",
    "夕食",
    "ジム",
    "フィットネス",
    "プール",
    "会議室",
    "ランドリー",
)

# (type, keywords, also match the description) in priority order
TYPE_RULES: Tuple[Tuple[HotelType, Tuple[str, ...], bool], ...] = (
    (HotelType.RESORT, ("リゾート",), True),
    (HotelType.BUSINESS, ("ビジネス",), True),
    (HotelType.RYOKAN, ("旅館",), True),
    (HotelType.HOSTEL, ("ホステル", "ゲスト"), False),
    (HotelType.PENSION, ("ペンション", "民宿"), False),
    (HotelType.HOTEL, ("ホテル",), False),
)


class ClassificationStrategy(Protocol):
    """Infers derived fields of a hotel record from its text."""

    def hotel_type(self, name: str, description: str) -> HotelType:
        """Categorize a hotel."""
        ...

    def nearby_stations(self, access: str) -> List[str]:
        """Extract station names from access directions."""
        ...

    def amenities(self, description: str) -> List[str]:
        """List amenities mentioned in a description."""
        ...

    def accessibility(self, description: str) -> Accessibility:
        """Infer accessibility flags from a description."""
        ...


class JapaneseKeywordStrategy:
    """
    Default rule set for Japanese provider text.

    Type rules are checked in priority order and the first match wins.
    Amenity matching is an exact, case-sensitive substring test.
    """

    def __init__(
        self,
        amenity_keywords: Sequence[str] = AMENITY_KEYWORDS,
        type_rules: Sequence[Tuple[HotelType, Tuple[str, ...], bool]] = TYPE_RULES,
    ):
        self._amenity_keywords = tuple(amenity_keywords)
        self._type_rules = tuple(type_rules)

    def hotel_type(self, name: str, description: str) -> HotelType:
        name = name.lower()
        description = description.lower()
        for hotel_type, keywords, check_description in self._type_rules:
            for keyword in keywords:
                if keyword in name or (check_description and keyword in description):
                    return hotel_type
        return HotelType.OTHER

    def nearby_stations(self, access: str) -> List[str]:
        if not access:
            return []
        return list(dict.fromkeys(STATION_PATTERN.findall(access)))

    def amenities(self, description: str) -> List[str]:
        if not description:
            return []
        return [keyword for keyword in self._amenity_keywords if keyword in description]

    def accessibility(self, description: str) -> Accessibility:
        if not description:
            return Accessibility()
        return Accessibility(
            wheelchair_accessible="車椅子" in description or "バリアフリー" in description,
            elevator_available="エレベーター" in description,
            parking_available="駐車場" in description,
        )
