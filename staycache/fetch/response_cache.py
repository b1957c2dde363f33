"""
Request-level response cache for the fetch client.

Sandi Metz Principles:
- Single Responsibility: Remember recent provider responses
- Bounded: Oldest half evicted when full
- Dependency Injection: Optional coordinator backing
"""

import threading
import time
from collections import OrderedDict
from typing import TYPE_CHECKING, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

from staycache.models.hotel import NormalizedHotelRecord
from staycache.models.request import RESPONSE_NAMESPACE
from staycache.utils.logger import get_logger

if TYPE_CHECKING:
    from staycache.cache.coordinator import CacheCoordinator

logger = get_logger(__name__)

_RECORDS = TypeAdapter(List[NormalizedHotelRecord])


class ResponseCache:
    """
    TTL cache of normalized provider responses.

    When the number of entries exceeds max_entries, the oldest half is
    evicted. If a coordinator is supplied, responses are also written
    through it so other processes can reuse them.
    """

    def __init__(
        self,
        ttl_seconds: int = 300,
        max_entries: int = 100,
        coordinator: Optional["CacheCoordinator"] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize response cache.

        Args:
            ttl_seconds: Freshness window
            max_entries: Size that triggers eviction of the oldest half
            coordinator: Optional shared cache backing
            clock: Monotonic time source
        """
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._coordinator = coordinator
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, List[NormalizedHotelRecord]]]" = (
            OrderedDict()
        )
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[List[NormalizedHotelRecord]]:
        """
        Get a fresh response.

        Args:
            key: Response cache key

        Returns:
            Cached records if younger than the TTL, None otherwise
        """
        records = self._get_local(key)
        if records is not None or self._coordinator is None:
            return records

        shared = await self._coordinator.peek(key)
        if shared is None:
            return None
        try:
            records = _RECORDS.validate_python(shared)
        except ValidationError as e:
            logger.warning("Discarding malformed shared response", key=key, error=str(e))
            return None
        self._put_local(key, records)
        return records

    async def set(self, key: str, records: List[NormalizedHotelRecord]) -> None:
        """
        Store a response.

        Args:
            key: Response cache key
            records: Normalized records
        """
        self._put_local(key, records)
        if self._coordinator is not None:
            await self._coordinator.set(key, records, self._ttl)

    async def clear(self) -> int:
        """
        Drop every cached response.

        Returns:
            Number of local entries removed
        """
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        if self._coordinator is not None:
            await self._coordinator.invalidate(f"{RESPONSE_NAMESPACE}:")
        logger.info("Response cache cleared", removed=removed)
        return removed

    @property
    def size(self) -> int:
        """Get current number of entries."""
        return len(self._entries)

    def _get_local(self, key: str) -> Optional[List[NormalizedHotelRecord]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, records = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[key]
                return None
            return records

    def _put_local(self, key: str, records: List[NormalizedHotelRecord]) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), records)
            self._entries.move_to_end(key)
            if len(self._entries) > self._max_entries:
                self._evict_oldest_half()

    def _evict_oldest_half(self) -> None:
        evict_count = len(self._entries) // 2
        for _ in range(evict_count):
            self._entries.popitem(last=False)
        logger.debug("Response cache trimmed", evicted=evict_count)
