"""
Cache module.

Process-local and Redis tiers behind a single coordinator.
"""

from staycache.cache.coordinator import CacheCoordinator, CoordinatorConfig
from staycache.cache.memory_cache import MemoryCache
from staycache.cache.redis_cache import RedisCache
from staycache.cache.warming import CacheWarmer, WarmingConfig

__all__ = [
    "CacheCoordinator",
    "CoordinatorConfig",
    "MemoryCache",
    "RedisCache",
    "CacheWarmer",
    "WarmingConfig",
]
