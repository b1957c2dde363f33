"""
In-flight lookup coalescing.

Concurrent full misses for the same key share one producer call.

Sandi Metz Principles:
- Single Responsibility: Track pending producer calls
- Small methods: join, resolve, reject
- No awaits inside bookkeeping, so the event loop keeps it atomic
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict

from staycache.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PendingFetch:
    """A producer call currently running for a key."""

    key: str
    future: asyncio.Future
    waiters: int = field(default=0)


class InFlightRegistry:
    """
    Registry of producer calls in progress.

    The first caller for a key becomes the leader and runs the producer.
    Later callers await the leader's future and receive the same value
    or the same exception instance.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, PendingFetch] = {}

    def join(self, key: str) -> tuple[bool, asyncio.Future]:
        """
        Join or start the in-flight call for key.

        Args:
            key: Cache key

        Returns:
            Tuple of (is_leader, future)
        """
        pending = self._pending.get(key)
        if pending is not None:
            pending.waiters += 1
            logger.debug("Joined in-flight fetch", key=key, waiters=pending.waiters)
            return (False, pending.future)

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[key] = PendingFetch(key=key, future=future)
        return (True, future)

    def resolve(self, key: str, value: Any) -> None:
        """Publish the leader's value to every waiter."""
        pending = self._pending.pop(key, None)
        if pending is not None and not pending.future.done():
            pending.future.set_result(value)

    def reject(self, key: str, error: BaseException) -> None:
        """Publish the leader's exception to every waiter."""
        pending = self._pending.pop(key, None)
        if pending is None or pending.future.done():
            return
        if isinstance(error, asyncio.CancelledError):
            pending.future.cancel()
            return
        pending.future.set_exception(error)
        # Mark retrieved so a leader without waiters does not warn at GC
        pending.future.exception()

    @staticmethod
    async def wait(future: asyncio.Future) -> Any:
        """Await a leader's result without letting cancellation spread to it."""
        return await asyncio.shield(future)

    @property
    def pending_count(self) -> int:
        """Get number of in-flight keys."""
        return len(self._pending)
