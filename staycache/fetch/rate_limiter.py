"""
Rate limiting for the search provider.

Sandi Metz Principles:
- Single Responsibility: Space outbound calls
- Small methods: Each method < 10 lines
- Dependency Injection: Configuration injected
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Callable

from staycache.config import AppConfig
from staycache.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    min_interval_seconds: float = 0.1

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "RateLimitConfig":
        """Build from application settings."""
        return cls(min_interval_seconds=app_config.provider_min_interval_seconds)


class RateLimiter:
    """
    Minimum-spacing rate limiter for provider calls.

    Each caller reserves the next free slot under a lock, then sleeps
    outside it, so turns are granted in arrival order and no lock is
    held while suspended.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize rate limiter.

        Args:
            config: Rate limit configuration
            clock: Monotonic time source
        """
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._last_request_at: float | None = None
        self._lock = threading.Lock()

    async def await_turn(self) -> float:
        """
        Wait until the minimum interval since the previous turn has passed.

        Returns:
            Seconds spent waiting
        """
        wait_time = self._reserve_slot()
        if wait_time > 0:
            logger.debug("Rate limit spacing", wait_seconds=round(wait_time, 3))
            await asyncio.sleep(wait_time)
        return wait_time

    def _reserve_slot(self) -> float:
        """Record the granted slot and return how long to wait for it."""
        with self._lock:
            now = self._clock()
            if self._last_request_at is None:
                slot = now
            else:
                slot = max(now, self._last_request_at + self._config.min_interval_seconds)
            self._last_request_at = slot
            return slot - now

    @property
    def last_request_at(self) -> float | None:
        """Monotonic time of the most recently granted turn."""
        return self._last_request_at

    @property
    def min_interval_seconds(self) -> float:
        """Configured minimum spacing."""
        return self._config.min_interval_seconds
