"""
Process-local cache tier.

Bounded, recency-evicting store that fronts the shared Redis tier.

Sandi Metz Principles:
- Single Responsibility: Hold hot entries in memory
- Small class: Focused LRU logic
- Dependency Injection: Clock injected for tests
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional

from staycache.models.cache_entry import CacheEntry, CacheTier
from staycache.utils.logger import get_logger

logger = get_logger(__name__)


class MemoryCache:
    """
    In-memory LRU cache with a retention window.

    Entries live for the shorter of their own TTL and the tier's
    retention window. Reads refresh recency, never age.

    Values are held by reference, so callers must treat returned
    objects as read-only. Values promoted from Redis arrive in their
    JSON shape (tuples and sets as lists, models as dicts).
    """

    def __init__(
        self,
        max_entries: int = 500,
        retention_seconds: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize memory cache.

        Args:
            max_entries: Maximum number of cached entries
            retention_seconds: Upper bound on entry lifetime
            clock: Monotonic time source
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._retention_seconds = retention_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a live value and mark it most recently used.

        Args:
            key: Cache key

        Returns:
            Cached value or None if absent or expired
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            entry.touch(now)
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value, evicting the least recently used entry when full.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Requested TTL (capped by the retention window)
        """
        now = self._clock()
        lifetime = min(ttl_seconds, self._retention_seconds)
        entry = CacheEntry(
            key=key,
            value=value,
            tier=CacheTier.TIER1,
            stored_at=now,
            last_accessed=now,
            expires_at=now + lifetime,
        )
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted LRU entry", key=evicted)

    def delete(self, key: str) -> bool:
        """Remove a single entry. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate(self, pattern: str) -> int:
        """
        Drop every key containing pattern.

        Args:
            pattern: Substring to match; empty string matches everything

        Returns:
            Number of entries removed
        """
        with self._lock:
            if not pattern:
                removed = len(self._entries)
                self._entries.clear()
                return removed
            doomed = [key for key in self._entries if pattern in key]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    @property
    def size(self) -> int:
        """Get current number of entries (expired ones included until read)."""
        return len(self._entries)

    @property
    def max_entries(self) -> int:
        """Get maximum cache size."""
        return self._max_entries
