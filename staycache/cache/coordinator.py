"""
Two-tier cache coordinator.

Read-through and write-through across the process-local tier and the
shared Redis tier, with hit/miss statistics and a warming queue.

Sandi Metz Principles:
- Single Responsibility: Orchestrate tier lookups and writes
- Dependency Injection: Both tiers injected
- Tell, Don't Ask: Tier-2 failures are absorbed here, never by callers
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from staycache.cache.memory_cache import MemoryCache
from staycache.cache.producers import call_batch_producer, call_producer
from staycache.cache.redis_cache import RedisCache
from staycache.cache.single_flight import InFlightRegistry
from staycache.cache.warming import WarmingQueue, WarmingTask
from staycache.config import AppConfig
from staycache.exceptions import CacheTierUnavailable, MalformedInput
from staycache.models.cache_entry import BatchProducer, CacheOptions, Producer
from staycache.models.statistics import CacheStatistics
from staycache.repositories.redis_repository import encode_value
from staycache.utils.logger import get_logger, log_cache_hit, log_cache_miss

logger = get_logger(__name__)


@dataclass
class CoordinatorConfig:
    """Coordinator configuration."""

    default_ttl_seconds: int = 300
    tier1_max_entries: int = 500
    tier1_ttl_seconds: int = 300
    single_flight: bool = True

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "CoordinatorConfig":
        """Build from application settings."""
        return cls(
            default_ttl_seconds=app_config.cache_default_ttl_seconds,
            tier1_max_entries=app_config.tier1_max_entries,
            tier1_ttl_seconds=app_config.tier1_ttl_seconds,
            single_flight=app_config.cache_single_flight,
        )


class CacheCoordinator:
    """
    Coordinates the process-local and shared cache tiers.

    Lookup order is tier-1, tier-2, then the caller's producer. Results
    are written back to both tiers. Tier-2 unavailability is treated as
    a miss; producer errors propagate unchanged.

    A value read from tier-1 is the object that was stored, while a value
    promoted from tier-2 has been through JSON. Callers that need one
    shape should revalidate, as ResponseCache does with a TypeAdapter.
    """

    def __init__(
        self,
        tier1: MemoryCache,
        tier2: RedisCache,
        config: Optional[CoordinatorConfig] = None,
    ):
        """
        Initialize coordinator.

        Args:
            tier1: Process-local cache
            tier2: Shared Redis cache
            config: Coordinator configuration
        """
        self._tier1 = tier1
        self._tier2 = tier2
        self._config = config or CoordinatorConfig()
        self._stats = CacheStatistics()
        self._stats_lock = threading.Lock()
        self._in_flight = InFlightRegistry()
        self._warming_queue = WarmingQueue()

    async def get(
        self,
        key: str,
        producer: Producer,
        options: Optional[CacheOptions | Dict[str, Any]] = None,
    ) -> Any:
        """
        Get a value, falling back through tier-2 to the producer.

        Args:
            key: Cache key
            producer: Zero-argument callable (sync or async) computing the value
            options: TTL and warming options

        Returns:
            Cached or freshly produced value

        Raises:
            MalformedInput: If options are invalid
            Exception: Whatever the producer raises
        """
        opts = self._resolve_options(options)

        value = self._tier1.get(key)
        if value is not None:
            self._count(l1_hits=1)
            log_cache_hit(key, tier="tier1")
            return value
        self._count(l1_misses=1)

        value = await self._tier2_get(key)
        if value is not None:
            self._count(l2_hits=1)
            self._tier1.set(key, value, opts.ttl_seconds)
            return value
        self._count(l2_misses=1)
        log_cache_miss(key)

        return await self._produce(key, producer, opts)

    async def peek(self, key: str) -> Optional[Any]:
        """
        Look a key up in both tiers without invoking a producer.

        Statistics are updated as for get; nothing is produced on a miss.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        value = self._tier1.get(key)
        if value is not None:
            self._count(l1_hits=1)
            return value
        self._count(l1_misses=1)

        value = await self._tier2_get(key)
        if value is not None:
            self._count(l2_hits=1)
            self._tier1.set(key, value, self._config.default_ttl_seconds)
            return value
        self._count(l2_misses=1)
        return None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """
        Write a value to both tiers.

        Tier-1 is written unconditionally, tier-2 best-effort. Values that
        cannot be stored as JSON are rejected before either tier is touched.

        Args:
            key: Cache key
            value: Value to store (None is never cached)
            ttl_seconds: Time-to-live in seconds (default TTL when None)

        Raises:
            MalformedInput: If the TTL is not positive or the value is not cacheable
        """
        if value is None:
            return
        ttl = self._resolve_ttl(ttl_seconds)
        encode_value(value)
        await self._write(key, value, ttl)

    async def batch_get(
        self,
        keys: Sequence[str],
        producer: BatchProducer,
        options: Optional[CacheOptions | Dict[str, Any]] = None,
    ) -> List[Any]:
        """
        Get many values with one tier-2 round trip and one producer call.

        Args:
            keys: Cache keys
            producer: Callable receiving the keys no tier could serve and
                returning positionally aligned values (None allowed)
            options: TTL options

        Returns:
            Values in the same order as keys

        Raises:
            MalformedInput: If options are invalid or the producer
                returns the wrong number of values
            Exception: Whatever the producer raises
        """
        opts = self._resolve_options(options)
        found: Dict[str, Any] = {}
        missing: List[str] = []

        for key in keys:
            value = self._tier1.get(key)
            if value is not None:
                found[key] = value
                self._count(l1_hits=1)
            else:
                self._count(l1_misses=1)
                if key not in missing:
                    missing.append(key)

        if not missing:
            return [found[key] for key in keys]

        remaining = await self._batch_tier2(missing, found, opts.ttl_seconds)

        if remaining:
            values = await call_batch_producer(producer, remaining)
            self._count(origin_fetches=len(remaining))
            produced = [(key, value) for key, value in zip(remaining, values) if value is not None]
            # Reject the whole batch before writing any key
            for _, value in produced:
                encode_value(value)
            for key, value in produced:
                found[key] = value
                await self._write(key, value, opts.ttl_seconds)

        return [found.get(key) for key in keys]

    async def invalidate(self, pattern: str) -> Dict[str, int]:
        """
        Drop every key containing pattern from both tiers.

        Args:
            pattern: Key substring; empty string flushes everything

        Returns:
            Number of entries removed per tier (-1 if tier-2 was unreachable)
        """
        removed_tier1 = self._tier1.invalidate(pattern)
        try:
            removed_tier2 = await self._tier2.invalidate(pattern)
        except CacheTierUnavailable as e:
            self._record_tier2_error(e, pattern=pattern)
            removed_tier2 = -1

        logger.info(
            "Cache invalidated",
            pattern=pattern,
            tier1=removed_tier1,
            tier2=removed_tier2,
        )
        return {"tier1": removed_tier1, "tier2": removed_tier2}

    def get_stats(self) -> CacheStatistics:
        """Get a snapshot of the statistics counters."""
        with self._stats_lock:
            return self._stats.model_copy()

    def reset_stats(self) -> None:
        """Zero every statistics counter."""
        with self._stats_lock:
            self._stats = CacheStatistics()
        logger.info("Cache statistics reset")

    def enqueue_warming(self, key: str, producer: Producer, ttl_seconds: int) -> bool:
        """
        Queue a key for background refresh.

        Returns:
            True if queued, False if the key was already queued
        """
        queued = self._warming_queue.enqueue(
            WarmingTask(key=key, producer=producer, ttl_seconds=ttl_seconds)
        )
        if queued:
            self._count(warming_enqueued=1)
        return queued

    def record_warming(self, completed: int, failed: int) -> None:
        """Record the outcome of a warming sweep."""
        self._count(warming_completed=completed, warming_failed=failed)

    async def health_check(self) -> bool:
        """Check whether tier-2 is reachable."""
        return await self._tier2.health_check()

    @property
    def warming_queue(self) -> WarmingQueue:
        """Get the warming queue."""
        return self._warming_queue

    @property
    def tier1(self) -> MemoryCache:
        """Get the process-local tier."""
        return self._tier1

    async def _produce(self, key: str, producer: Producer, opts: CacheOptions) -> Any:
        if not self._config.single_flight:
            return await self._produce_and_store(key, producer, opts)

        is_leader, future = self._in_flight.join(key)
        if not is_leader:
            self._count(coalesced=1)
            return await self._in_flight.wait(future)

        try:
            value = await self._produce_and_store(key, producer, opts)
        except BaseException as e:
            self._in_flight.reject(key, e)
            raise
        self._in_flight.resolve(key, value)
        return value

    async def _produce_and_store(
        self, key: str, producer: Producer, opts: CacheOptions
    ) -> Any:
        value = await call_producer(producer)
        self._count(origin_fetches=1)
        if value is not None:
            await self.set(key, value, opts.ttl_seconds)
            if opts.warm:
                self.enqueue_warming(key, producer, opts.ttl_seconds)
        return value

    async def _tier2_get(self, key: str) -> Optional[Any]:
        try:
            return await self._tier2.get(key)
        except CacheTierUnavailable as e:
            self._record_tier2_error(e, key=key)
            return None

    async def _batch_tier2(
        self, missing: List[str], found: Dict[str, Any], ttl_seconds: int
    ) -> List[str]:
        try:
            values = await self._tier2.batch_get(missing)
        except CacheTierUnavailable as e:
            self._record_tier2_error(e, keys=len(missing))
            self._count(l2_misses=len(missing))
            return list(missing)

        remaining = []
        for key, value in zip(missing, values):
            if value is None:
                remaining.append(key)
                continue
            found[key] = value
            self._tier1.set(key, value, ttl_seconds)
        self._count(l2_hits=len(missing) - len(remaining), l2_misses=len(remaining))
        return remaining

    async def _write(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._tier1.set(key, value, ttl_seconds)
        try:
            await self._tier2.set(key, value, ttl_seconds)
        except CacheTierUnavailable as e:
            self._record_tier2_error(e, key=key)

    def _resolve_ttl(self, ttl_seconds: Optional[int]) -> int:
        ttl = ttl_seconds if ttl_seconds is not None else self._config.default_ttl_seconds
        if ttl < 1:
            raise MalformedInput(f"ttl_seconds must be positive, got {ttl}")
        return ttl

    def _resolve_options(
        self, options: Optional[CacheOptions | Dict[str, Any]]
    ) -> CacheOptions:
        if options is None:
            return CacheOptions(ttl_seconds=self._config.default_ttl_seconds)
        return CacheOptions.resolve(options)

    def _record_tier2_error(self, error: CacheTierUnavailable, **context: Any) -> None:
        with self._stats_lock:
            self._stats.tier2_errors += 1
            self._stats.last_tier2_error = str(error)
        logger.warning("Tier-2 unavailable", error=str(error), **context)

    def _count(self, **increments: int) -> None:
        with self._stats_lock:
            for name, amount in increments.items():
                setattr(self._stats, name, getattr(self._stats, name) + amount)
