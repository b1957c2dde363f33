"""
Pytest configuration and fixtures.

Provides common fixtures for testing.
"""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from staycache.cache.coordinator import CacheCoordinator, CoordinatorConfig
from staycache.cache.memory_cache import MemoryCache
from staycache.cache.redis_cache import RedisCache
from staycache.config import AppConfig
from staycache.exceptions import CacheTierUnavailable


@pytest.fixture
def test_config() -> AppConfig:
    """
    Create test configuration.

    Returns:
        Test configuration instance
    """
    return AppConfig(
        app_env="development",
        redis_host="localhost",
        redis_port=6379,
        provider_application_id="test-app",
        provider_min_interval_seconds=0.0,
        provider_throttle_backoff_seconds=0.0,
    )


@pytest.fixture
def mock_redis_pool():
    """
    Mock Redis connection pool.

    Returns:
        Mocked Redis pool
    """
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    return pool


@pytest.fixture
def mock_tier2():
    """
    Dict-backed stand-in for the Redis tier.

    The backing dict is exposed as `store`; set `failing = True` to make
    every call raise CacheTierUnavailable.
    """
    tier2 = AsyncMock(spec=RedisCache)
    tier2.store = {}
    tier2.failing = False

    def _check(operation: str) -> None:
        if tier2.failing:
            raise CacheTierUnavailable(operation, ConnectionError("connection refused"))

    async def _get(key: str) -> Any:
        _check("get")
        return tier2.store.get(key)

    async def _set(key: str, value: Any, ttl_seconds: int) -> bool:
        _check("setex")
        tier2.store[key] = value
        return True

    async def _batch_get(keys: List[str]) -> List[Any]:
        _check("mget")
        return [tier2.store.get(key) for key in keys]

    async def _invalidate(pattern: str) -> int:
        _check("delete")
        doomed = [key for key in tier2.store if pattern in key]
        for key in doomed:
            del tier2.store[key]
        return len(doomed)

    tier2.get.side_effect = _get
    tier2.set.side_effect = _set
    tier2.batch_get.side_effect = _batch_get
    tier2.invalidate.side_effect = _invalidate
    tier2.health_check.return_value = True
    return tier2


@pytest.fixture
def tier1() -> MemoryCache:
    """Process-local tier with default sizing."""
    return MemoryCache(max_entries=500, retention_seconds=300)


@pytest.fixture
def coordinator(tier1, mock_tier2) -> CacheCoordinator:
    """Coordinator over a real tier-1 and a dict-backed tier-2."""
    return CacheCoordinator(tier1, mock_tier2, CoordinatorConfig())


@pytest.fixture
def basic_info() -> Dict[str, Any]:
    """Provider hotelBasicInfo block."""
    return {
        "hotelNo": 74944,
        "hotelName": "ホテルサンルート新宿",
        "hotelKanaName": "ほてるさんるーとしんじゅく",
        "hotelSpecial": "新宿駅南口徒歩3分。無料Wi-Fi、レストラン、エレベーター完備。",
        "postalCode": "151-0053",
        "address1": "東京都",
        "address2": "渋谷区代々木2-3-1",
        "latitude": 35.6862,
        "longitude": 139.6989,
        "access": "JR新宿駅南口徒歩3分、都営新宿線新宿駅徒歩5分",
        "nearestStation": "新宿",
        "hotelImageUrl": "https://img.example.com/74944.jpg",
        "hotelThumbnailUrl": "https://img.example.com/74944_s.jpg",
        "hotelMinCharge": 9000,
        "hotelMaxCharge": 21000,
        "reviewAverage": 4.1,
        "reviewCount": 2210,
        "telephoneNo": "03-3375-3211",
        "planListUrl": "https://travel.example.com/plans/74944",
        "checkinTime": "14:00",
        "checkoutTime": "11:00",
    }


@pytest.fixture
def rating_info() -> Dict[str, Any]:
    """Provider hotelRatingInfo block."""
    return {
        "serviceAverage": 4.0,
        "locationAverage": 4.6,
        "roomAverage": 3.9,
        "equipmentAverage": 3.8,
        "bathAverage": 3.7,
        "mealAverage": 3.9,
    }


@pytest.fixture
def provider_payload(basic_info, rating_info) -> Dict[str, Any]:
    """Search payload in the formatVersion=2 shape."""
    return {
        "pagingInfo": {"recordCount": 1, "page": 1, "pageCount": 1},
        "hotels": [[{"hotelBasicInfo": basic_info}, {"hotelRatingInfo": rating_info}]],
    }
