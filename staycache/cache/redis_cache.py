"""
Redis cache service.

Shared tier of the coordinator. Survives process restarts and is
visible to every instance.

Sandi Metz Principles:
- Single Responsibility: Shared-tier cache operations
- Small methods: Each operation < 10 lines
- Dependency Injection: Repository injected
"""

from typing import Any, Optional

from staycache.repositories.redis_repository import RedisRepository
from staycache.utils.logger import get_logger, log_cache_hit, log_cache_miss

logger = get_logger(__name__)


class RedisCache:
    """
    Redis cache service.

    Provides high-level cache operations. Errors are raised as
    CacheTierUnavailable; the coordinator decides how to degrade.
    """

    def __init__(self, repository: RedisRepository):
        """
        Initialize cache service.

        Args:
            repository: Redis repository
        """
        self._repository = repository

    async def get(self, key: str) -> Optional[Any]:
        """
        Get cached value for key.

        Args:
            key: Cache key

        Returns:
            Cached value if found, None otherwise
        """
        value = await self._repository.fetch(key)

        if value is not None:
            log_cache_hit(key, tier="tier2")
            return value

        log_cache_miss(key, tier="tier2")
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """
        Store value with TTL.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if stored successfully
        """
        stored = await self._repository.store(key, value, ttl_seconds)
        logger.debug("Tier-2 stored", key=key, ttl_seconds=ttl_seconds)
        return stored

    async def batch_get(self, keys: list[str]) -> list[Optional[Any]]:
        """
        Get multiple values in one round trip.

        Args:
            keys: List of cache keys

        Returns:
            Values aligned with keys (None where missing)
        """
        if not keys:
            return []

        values = await self._repository.batch_fetch(keys)
        hits = sum(1 for value in values if value is not None)
        logger.debug("Tier-2 batch lookup", requested=len(keys), hits=hits)
        return values

    async def invalidate(self, pattern: str) -> int:
        """
        Invalidate entries whose key contains pattern.

        Args:
            pattern: Key substring (empty string flushes every key)

        Returns:
            Number of entries invalidated
        """
        count = await self._repository.delete_containing(pattern)
        logger.info("Tier-2 invalidated by pattern", pattern=pattern, count=count)
        return count

    async def health_check(self) -> bool:
        """
        Check Redis health.

        Returns:
            True if healthy, False otherwise
        """
        return await self._repository.ping()
