"""
Background cache warming.

Keys marked warm-worthy are queued and refreshed by a periodic sweep.

Sandi Metz Principles:
- Single Responsibility: Queue and sweep warming tasks
- Small methods: enqueue, take, sweep
- Dependency Injection: Coordinator and config injected
"""

import asyncio
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from staycache.cache.producers import call_producer
from staycache.config import AppConfig
from staycache.models.cache_entry import Producer
from staycache.utils.logger import get_logger

if TYPE_CHECKING:
    from staycache.cache.coordinator import CacheCoordinator

logger = get_logger(__name__)


@dataclass
class WarmingConfig:
    """Warming sweep configuration."""

    interval_seconds: float = 30.0
    batch_size: int = 10

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "WarmingConfig":
        """Build from application settings."""
        return cls(
            interval_seconds=app_config.warming_interval_seconds,
            batch_size=app_config.warming_batch_size,
        )


@dataclass
class WarmingTask:
    """A key to refresh, with the producer that recomputes it."""

    key: str
    producer: Producer
    ttl_seconds: int
    enqueued_at: float = field(default_factory=time.monotonic)


class WarmingQueue:
    """
    FIFO queue of warming tasks, deduplicated by key.

    A key that is already queued is not queued again. A task leaves the
    queue the moment it is taken, so each enqueue runs at most once.
    """

    def __init__(self) -> None:
        self._tasks: "OrderedDict[str, WarmingTask]" = OrderedDict()
        self._lock = threading.Lock()

    def enqueue(self, task: WarmingTask) -> bool:
        """
        Queue a task unless its key is already queued.

        Returns:
            True if the task was added
        """
        with self._lock:
            if task.key in self._tasks:
                return False
            self._tasks[task.key] = task
            return True

    def take(self, limit: int) -> List[WarmingTask]:
        """Remove and return up to limit tasks in arrival order."""
        with self._lock:
            batch = []
            while self._tasks and len(batch) < limit:
                _, task = self._tasks.popitem(last=False)
                batch.append(task)
            return batch

    def clear(self) -> None:
        """Drop every queued task."""
        with self._lock:
            self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: str) -> bool:
        return key in self._tasks


class CacheWarmer:
    """
    Periodic warming sweep.

    Runs as its own asyncio task, detached from any caller.
    """

    def __init__(
        self,
        coordinator: "CacheCoordinator",
        config: Optional[WarmingConfig] = None,
    ):
        """
        Initialize warmer.

        Args:
            coordinator: Coordinator whose queue is swept
            config: Sweep interval and batch size
        """
        self._coordinator = coordinator
        self._config = config or WarmingConfig()
        self._task: Optional[asyncio.Task] = None

    async def sweep(self) -> Dict[str, int]:
        """
        Refresh one batch of queued keys.

        Producer failures are logged and the task is dropped.

        Returns:
            Counts of processed, refreshed and failed tasks
        """
        batch = self._coordinator.warming_queue.take(self._config.batch_size)
        refreshed = 0
        failed = 0

        for task in batch:
            try:
                value = await call_producer(task.producer)
                if value is not None:
                    await self._coordinator.set(task.key, value, task.ttl_seconds)
                refreshed += 1
            except Exception as e:
                failed += 1
                logger.warning("Cache warming failed", key=task.key, error=str(e))

        self._coordinator.record_warming(refreshed, failed)
        if batch:
            logger.info(
                "Warming sweep completed",
                processed=len(batch),
                refreshed=refreshed,
                failed=failed,
                remaining=len(self._coordinator.warming_queue),
            )
        return {"processed": len(batch), "refreshed": refreshed, "failed": failed}

    def start(self) -> None:
        """Start the background sweep loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="cache-warming")
        logger.info(
            "Cache warming started",
            interval_seconds=self._config.interval_seconds,
            batch_size=self._config.batch_size,
        )

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Cache warming stopped")

    @property
    def is_running(self) -> bool:
        """Check if the sweep loop is active."""
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._config.interval_seconds)
            try:
                await self.sweep()
            except Exception as e:
                logger.error("Warming sweep crashed", error=str(e), exc_info=True)
