"""Test Redis repository."""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from staycache.exceptions import CacheTierUnavailable, ConfigurationError, MalformedInput
from staycache.models.hotel import HotelType, Pricing
from staycache.repositories.redis_repository import (
    RedisRepository,
    contains_pattern,
    create_redis_pool,
    encode_value,
)


@pytest.fixture
def mock_pool():
    """Create mock Redis connection pool."""
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    return pool


@pytest.fixture
def redis_repository(mock_pool):
    """Create Redis repository with mock pool."""
    return RedisRepository(pool=mock_pool)


def _scan(keys):
    async def _iter(*args, **kwargs):
        for key in keys:
            yield key

    return MagicMock(side_effect=_iter)


class TestRedisRepository:
    """Test Redis repository implementation."""

    @pytest.mark.asyncio
    async def test_should_fetch_entry(self, redis_repository):
        """Test fetching and decoding a stored value."""
        mock_redis = AsyncMock()
        mock_redis.get.return_value = json.dumps({"id": "74944", "price": 9000})

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.fetch("hotel:search:v2:abc")

            assert result == {"id": "74944", "price": 9000}
            mock_redis.get.assert_called_once_with("hotel:search:v2:abc")

    @pytest.mark.asyncio
    async def test_should_return_none_when_not_found(self, redis_repository):
        """Test fetching non-existent entry."""
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.fetch("non_existent_key")

            assert result is None

    @pytest.mark.asyncio
    async def test_should_treat_corrupt_entry_as_missing(self, redis_repository):
        """Test undecodable payloads read as a miss."""
        mock_redis = AsyncMock()
        mock_redis.get.return_value = "{not json"

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            assert await redis_repository.fetch("k") is None

    @pytest.mark.asyncio
    async def test_should_raise_tier_unavailable_on_fetch_error(self, redis_repository):
        """Test connection errors surface as CacheTierUnavailable."""
        mock_redis = AsyncMock()
        mock_redis.get.side_effect = RedisConnectionError("refused")

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            with pytest.raises(CacheTierUnavailable) as exc_info:
                await redis_repository.fetch("k")

            assert exc_info.value.operation == "get"

    @pytest.mark.asyncio
    async def test_should_store_entry_with_ttl(self, redis_repository):
        """Test storing a value with SETEX."""
        mock_redis = AsyncMock()

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.store("price:1:2026-01-01", {"min": 8000}, 30)

            assert result is True
            mock_redis.setex.assert_called_once_with(
                "price:1:2026-01-01", 30, json.dumps({"min": 8000})
            )

    @pytest.mark.asyncio
    async def test_should_raise_tier_unavailable_on_store_error(self, redis_repository):
        """Test store errors surface as CacheTierUnavailable."""
        mock_redis = AsyncMock()
        mock_redis.setex.side_effect = OSError("broken pipe")

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            with pytest.raises(CacheTierUnavailable) as exc_info:
                await redis_repository.store("k", "v", 60)

            assert exc_info.value.operation == "setex"

    @pytest.mark.asyncio
    async def test_should_batch_fetch_in_key_order(self, redis_repository):
        """Test MGET values are decoded and aligned with keys."""
        mock_redis = AsyncMock()
        mock_redis.mget.return_value = ['"a"', None, "3"]

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.batch_fetch(["k1", "k2", "k3"])

            assert result == ["a", None, 3]
            mock_redis.mget.assert_called_once_with(["k1", "k2", "k3"])

    @pytest.mark.asyncio
    async def test_should_skip_round_trip_for_empty_batch(self, redis_repository):
        """Test empty batch returns without touching Redis."""
        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            assert await redis_repository.batch_fetch([]) == []
            mock_redis_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_delete_matching_keys(self, redis_repository):
        """Test scan-and-delete by key fragment."""
        mock_redis = AsyncMock()
        mock_redis.scan_iter = _scan(["hotel:search:v2:a", "hotel:search:v2:b"])
        mock_redis.delete.return_value = 2

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.delete_containing("hotel:search")

            assert result == 2
            mock_redis.scan_iter.assert_called_once_with(match="*hotel:search*")
            mock_redis.delete.assert_called_once_with(
                "hotel:search:v2:a", "hotel:search:v2:b"
            )

    @pytest.mark.asyncio
    async def test_should_not_delete_when_nothing_matches(self, redis_repository):
        """Test no DEL is issued for an empty scan."""
        mock_redis = AsyncMock()
        mock_redis.scan_iter = _scan([])

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            assert await redis_repository.delete_containing("price") == 0
            mock_redis.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_ping_successfully(self, redis_repository):
        """Test successful Redis ping."""
        mock_redis = AsyncMock()
        mock_redis.ping.return_value = True

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.ping()

            assert result is True
            mock_redis.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_should_handle_ping_failure(self, redis_repository):
        """Test handling Redis ping failure."""
        mock_redis = AsyncMock()
        mock_redis.ping.side_effect = RedisConnectionError("Connection failed")

        with patch("staycache.repositories.redis_repository.Redis") as mock_redis_class:
            mock_redis_class.return_value.__aenter__.return_value = mock_redis

            result = await redis_repository.ping()

            assert result is False

    @pytest.mark.asyncio
    async def test_should_disconnect_pool_on_close(self, redis_repository, mock_pool):
        """Test close releases pooled connections."""
        await redis_repository.close()
        mock_pool.disconnect.assert_awaited_once()


class TestCreateRedisPool:
    """Test connection pool construction."""

    @pytest.mark.asyncio
    async def test_should_build_pool_from_config(self, test_config):
        """Test pool uses the configured URL and limits."""
        with patch(
            "staycache.repositories.redis_repository.ConnectionPool.from_url"
        ) as from_url:
            pool = await create_redis_pool(test_config)

        assert pool is from_url.return_value
        from_url.assert_called_once_with(
            test_config.redis_url,
            max_connections=test_config.redis_max_connections,
            socket_timeout=test_config.redis_socket_timeout,
            socket_connect_timeout=test_config.redis_socket_timeout,
            decode_responses=True,
        )

    @pytest.mark.asyncio
    async def test_should_reject_malformed_url(self, test_config):
        """Test URL errors surface as ConfigurationError."""
        with patch(
            "staycache.repositories.redis_repository.ConnectionPool.from_url",
            side_effect=ValueError("invalid scheme"),
        ):
            with pytest.raises(ConfigurationError):
                await create_redis_pool(test_config)


class TestValueEncoding:
    """Test cache value serialization."""

    def test_should_encode_pydantic_models(self):
        """Test models are stored as their JSON dump."""
        encoded = encode_value(Pricing(min_price=8000, max_price=25000))
        assert json.loads(encoded)["min_price"] == 8000

    def test_should_encode_dates_and_enums(self):
        """Test dates and enums are stored as plain JSON."""
        encoded = encode_value({"day": date(2026, 1, 5), "type": HotelType.RYOKAN})
        assert json.loads(encoded) == {"day": "2026-01-05", "type": "ryokan"}

    def test_should_keep_japanese_text_readable(self):
        """Test non-ASCII text is not escaped."""
        assert "新宿" in encode_value({"name": "新宿"})

    def test_should_reject_uncacheable_value(self):
        """Test arbitrary objects raise MalformedInput."""
        with pytest.raises(MalformedInput):
            encode_value(object())


class TestContainsPattern:
    """Test SCAN pattern construction."""

    def test_should_wrap_fragment(self):
        """Test substring match pattern."""
        assert contains_pattern("availability") == "*availability*"

    def test_should_match_everything_for_empty_fragment(self):
        """Test empty fragment flushes all keys."""
        assert contains_pattern("") == "*"

    def test_should_escape_glob_characters(self):
        """Test glob specials in the fragment are literal."""
        assert contains_pattern("a*b?[c]") == r"*a\*b\?\[c\]*"
