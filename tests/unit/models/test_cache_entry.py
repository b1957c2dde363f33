"""Test cache entry models."""

import pytest

from staycache.exceptions import MalformedInput
from staycache.models.cache_entry import CacheEntry, CacheOptions, CacheTier


class TestCacheOptions:
    """Test per-call cache options."""

    def test_should_use_defaults(self):
        """Test default TTL and warming flag."""
        options = CacheOptions()
        assert options.ttl_seconds == 300
        assert options.warm is False

    def test_should_resolve_mapping(self):
        """Test loose dict options are validated."""
        options = CacheOptions.resolve({"ttl_seconds": 60, "warm": True})
        assert options == CacheOptions(ttl_seconds=60, warm=True)

    def test_should_pass_through_instance(self):
        """Test an existing instance is reused."""
        options = CacheOptions(ttl_seconds=30)
        assert CacheOptions.resolve(options) is options

    def test_should_reject_unknown_option(self):
        """Test unknown keys raise malformed input."""
        with pytest.raises(MalformedInput):
            CacheOptions.resolve({"ttl": 60})

    def test_should_reject_non_positive_ttl(self):
        """Test TTL lower bound."""
        with pytest.raises(MalformedInput):
            CacheOptions.resolve({"ttl_seconds": 0})

    def test_should_reject_non_mapping(self):
        """Test unsupported option types."""
        with pytest.raises(MalformedInput):
            CacheOptions.resolve(60)


class TestCacheEntry:
    """Test process-local cache entry."""

    def test_should_expire_at_deadline(self):
        """Test expiry check."""
        entry = CacheEntry(key="k", value=1, stored_at=0.0, expires_at=10.0)
        assert entry.is_expired(9.9) is False
        assert entry.is_expired(10.0) is True

    def test_should_touch_without_extending_expiry(self):
        """Test reads refresh recency only."""
        entry = CacheEntry(key="k", value=1, stored_at=0.0, last_accessed=0.0, expires_at=10.0)
        entry.touch(5.0)
        assert entry.last_accessed == 5.0
        assert entry.expires_at == 10.0

    def test_should_default_to_tier1(self):
        """Test default tier."""
        assert CacheEntry(key="k", value=1).tier == CacheTier.TIER1
