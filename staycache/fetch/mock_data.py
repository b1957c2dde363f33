"""
Built-in fallback dataset.

Served when the provider is unreachable, rejects our credentials, or
keeps throttling. Records are kept in the provider's payload shape and
normalized like live responses, then flagged with is_fallback.

Sandi Metz Principles:
- Single Responsibility: Select fallback records for a request
- Data over code: The dataset is plain provider-shaped dicts
"""

from typing import Any, Dict, List, Optional

from staycache.fetch.normalizer import HotelNormalizer
from staycache.models.hotel import NormalizedHotelRecord
from staycache.models.request import Endpoint, ExternalRequestContext

DEFAULT_AREA = "tokyo"
DEFAULT_HITS = 30


def _hotel(**basic: Any) -> Dict[str, Any]:
    rating = basic.pop("rating")
    return {
        "hotelBasicInfo": basic,
        "hotelRatingInfo": {
            "serviceAverage": rating[0],
            "locationAverage": rating[1],
            "roomAverage": rating[2],
            "equipmentAverage": rating[3],
            "bathAverage": rating[4],
            "mealAverage": rating[5],
        },
    }


MOCK_HOTELS: Dict[str, List[Dict[str, Any]]] = {
    "tokyo": [
        _hotel(
            hotelNo=143637,
            hotelName="デモホテル東京",
            hotelKanaName="デモホテルトウキョウ",
            hotelSpecial="デモモード用のサンプルホテルです。実際の予約はできません。",
            postalCode="100-0001",
            address1="東京都",
            address2="千代田区丸の内1-1-1",
            latitude=35.6812,
            longitude=139.7671,
            access="JR東京駅徒歩5分",
            nearestStation="東京駅",
            hotelImageUrl="https://via.placeholder.com/400x300/0066cc/ffffff?text=Demo+Hotel",
            hotelThumbnailUrl="https://via.placeholder.com/200x150/0066cc/ffffff?text=Demo",
            hotelMinCharge=8000,
            hotelMaxCharge=25000,
            reviewAverage=4.2,
            reviewCount=1234,
            roomCount=200,
            checkinTime="15:00",
            checkoutTime="10:00",
            telephoneNo="03-0000-0000",
            rating=(4.1, 4.5, 4.0, 4.2, 4.3, 3.8),
        ),
        _hotel(
            hotelNo=177607,
            hotelName="ホテルグレイスリー新宿",
            hotelKanaName="ホテルグレイスリーシンジュク",
            hotelSpecial="新宿歌舞伎町、ゴジラヘッドが目印のホテル。無料Wi-Fi、レストラン完備。",
            postalCode="160-8466",
            address1="東京都",
            address2="新宿区歌舞伎町1-19-1",
            latitude=35.6952,
            longitude=139.7036,
            access="JR新宿駅東口徒歩5分",
            nearestStation="新宿駅",
            hotelMinCharge=8000,
            hotelMaxCharge=35000,
            reviewAverage=4.3,
            reviewCount=5623,
            roomCount=970,
            checkinTime="14:00",
            checkoutTime="11:00",
            telephoneNo="03-6833-2489",
            rating=(4.2, 4.6, 4.1, 4.3, 4.0, 4.0),
        ),
    ],
    "osaka": [
        _hotel(
            hotelNo=145832,
            hotelName="ホテル阪急インターナショナル",
            hotelKanaName="ホテルハンキュウインターナショナル",
            hotelSpecial="梅田駅直結、大阪の中心地に位置する老舗ホテル",
            postalCode="530-0013",
            address1="大阪府",
            address2="大阪市北区茶屋町19-19",
            latitude=34.7024,
            longitude=135.4963,
            access="JR大阪駅徒歩3分、阪急梅田駅直結",
            nearestStation="梅田駅",
            hotelMinCharge=12000,
            hotelMaxCharge=50000,
            reviewAverage=4.4,
            reviewCount=3456,
            roomCount=919,
            checkinTime="15:00",
            checkoutTime="12:00",
            telephoneNo="06-6377-2100",
            rating=(4.5, 4.8, 4.2, 4.3, 4.1, 4.2),
        ),
    ],
    "kyoto": [
        _hotel(
            hotelNo=163289,
            hotelName="ホテルグランヴィア京都",
            hotelKanaName="ホテルグランヴィアキョウト",
            hotelSpecial="JR京都駅直結の便利な立地。駐車場、エレベーター完備。",
            postalCode="600-8216",
            address1="京都府",
            address2="京都市下京区烏丸通塩小路下ル",
            latitude=34.9858,
            longitude=135.7581,
            access="JR京都駅直結",
            nearestStation="京都駅",
            hotelMinCharge=15000,
            hotelMaxCharge=80000,
            reviewAverage=4.3,
            reviewCount=4521,
            roomCount=537,
            checkinTime="15:00",
            checkoutTime="12:00",
            telephoneNo="075-344-8888",
            rating=(4.4, 4.7, 4.2, 4.2, 4.0, 4.1),
        ),
    ],
}

MOCK_VACANT_PLANS = 3


class MockDataset:
    """Selects and normalizes fallback records for a request."""

    def __init__(
        self,
        normalizer: Optional[HotelNormalizer] = None,
        hotels: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    ):
        self._normalizer = normalizer or HotelNormalizer()
        self._hotels = hotels or MOCK_HOTELS

    def records_for(self, context: ExternalRequestContext) -> List[NormalizedHotelRecord]:
        """
        Fallback records for a request.

        Detail requests select by hotel number. Searches select by area
        code, then keyword, and fall back to the default area. The result
        is never empty.

        Args:
            context: Request that could not be served live

        Returns:
            Normalized records flagged as fallback data
        """
        items = self._select(context)
        endpoint = context.endpoint
        records = []
        for item in items:
            parts = dict(item)
            if endpoint.reports_availability:
                parts["roomInfo"] = [{} for _ in range(MOCK_VACANT_PLANS)]
            record = self._normalizer.build_record(parts, endpoint)
            records.append(record.model_copy(update={"is_fallback": True}))
        return records

    def _select(self, context: ExternalRequestContext) -> List[Dict[str, Any]]:
        params = context.params
        default = self._hotels[DEFAULT_AREA]
        everything = [item for items in self._hotels.values() for item in items]

        if context.endpoint is Endpoint.HOTEL_DETAIL and "hotelNo" in params:
            hotel_no = str(params["hotelNo"])
            matches = [
                item for item in everything
                if str(item["hotelBasicInfo"]["hotelNo"]) == hotel_no
            ]
            return matches or default[:1]

        area = params.get("middleClassCode")
        if isinstance(area, str) and area:
            selected = self._hotels.get(area.lower(), default)
        elif isinstance(params.get("keyword"), str) and params["keyword"]:
            selected = self._match_keyword(everything, str(params["keyword"])) or default
        else:
            selected = default

        hits = params.get("hits", DEFAULT_HITS)
        limit = hits if isinstance(hits, int) and hits > 0 else DEFAULT_HITS
        return selected[:limit]

    @staticmethod
    def _match_keyword(
        items: List[Dict[str, Any]], keyword: str
    ) -> List[Dict[str, Any]]:
        needle = keyword.lower()
        matches = []
        for item in items:
            basic = item["hotelBasicInfo"]
            haystack = " ".join(
                str(basic.get(field, ""))
                for field in ("hotelName", "hotelSpecial", "address1", "address2")
            ).lower()
            if needle in haystack:
                matches.append(item)
        return matches
