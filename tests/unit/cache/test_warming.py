"""Test background cache warming."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from staycache.cache.warming import CacheWarmer, WarmingConfig, WarmingQueue, WarmingTask


def _task(key: str, value="v") -> WarmingTask:
    return WarmingTask(key=key, producer=AsyncMock(return_value=value), ttl_seconds=60)


class TestWarmingQueue:
    """Test warming queue semantics."""

    def test_should_deduplicate_by_key(self):
        """Test a queued key is not queued twice."""
        queue = WarmingQueue()

        assert queue.enqueue(_task("a")) is True
        assert queue.enqueue(_task("a")) is False
        assert len(queue) == 1

    def test_should_take_in_arrival_order(self):
        """Test FIFO batches bounded by limit."""
        queue = WarmingQueue()
        for key in ("a", "b", "c"):
            queue.enqueue(_task(key))

        batch = queue.take(2)

        assert [task.key for task in batch] == ["a", "b"]
        assert len(queue) == 1
        assert "c" in queue

    def test_should_allow_requeue_after_take(self):
        """Test taken keys may be queued again."""
        queue = WarmingQueue()
        queue.enqueue(_task("a"))
        queue.take(10)

        assert queue.enqueue(_task("a")) is True

    def test_should_clear(self):
        """Test clear empties the queue."""
        queue = WarmingQueue()
        queue.enqueue(_task("a"))
        queue.clear()
        assert len(queue) == 0


class TestCacheWarmer:
    """Test warming sweeps."""

    @pytest.mark.asyncio
    async def test_sweep_should_refresh_queued_keys(self, coordinator, tier1):
        """Test producers are re-run and values written to both tiers."""
        producer = AsyncMock(return_value="fresh")
        coordinator.enqueue_warming("hotel:1", producer, 60)
        warmer = CacheWarmer(coordinator, WarmingConfig(batch_size=10))

        result = await warmer.sweep()

        assert result == {"processed": 1, "refreshed": 1, "failed": 0}
        assert tier1.get("hotel:1") == "fresh"
        assert len(coordinator.warming_queue) == 0
        assert coordinator.get_stats().warming_completed == 1

    @pytest.mark.asyncio
    async def test_sweep_should_count_failures(self, coordinator):
        """Test a failing producer does not stop the sweep."""
        coordinator.enqueue_warming("bad", AsyncMock(side_effect=RuntimeError("x")), 60)
        coordinator.enqueue_warming("good", lambda: 1, 60)
        warmer = CacheWarmer(coordinator)

        result = await warmer.sweep()

        assert result == {"processed": 2, "refreshed": 1, "failed": 1}
        assert coordinator.get_stats().warming_failed == 1

    @pytest.mark.asyncio
    async def test_sweep_should_respect_batch_size(self, coordinator):
        """Test at most batch_size tasks per sweep."""
        for i in range(5):
            coordinator.enqueue_warming(f"k{i}", lambda: 1, 60)
        warmer = CacheWarmer(coordinator, WarmingConfig(batch_size=2))

        result = await warmer.sweep()

        assert result["processed"] == 2
        assert len(coordinator.warming_queue) == 3

    @pytest.mark.asyncio
    async def test_should_start_and_stop(self, coordinator):
        """Test background loop lifecycle."""
        warmer = CacheWarmer(coordinator, WarmingConfig(interval_seconds=0.01))

        warmer.start()
        assert warmer.is_running
        coordinator.enqueue_warming("k", lambda: "v", 60)
        await asyncio.sleep(0.05)
        await warmer.stop()

        assert not warmer.is_running
        assert "k" not in coordinator.warming_queue

    @pytest.mark.asyncio
    async def test_stop_should_be_noop_when_not_started(self, coordinator):
        """Test stopping an idle warmer."""
        warmer = CacheWarmer(coordinator)
        await warmer.stop()
        assert not warmer.is_running

    @pytest.mark.asyncio
    async def test_loop_should_survive_sweep_errors(self, coordinator):
        """Test an error outside the per-task guard does not stop the loop."""
        warmer = CacheWarmer(coordinator, WarmingConfig(interval_seconds=0.01))

        with patch.object(
            coordinator, "record_warming", MagicMock(side_effect=RuntimeError("boom"))
        ) as record_warming:
            warmer.start()
            await asyncio.sleep(0.05)

            assert warmer.is_running
            assert record_warming.call_count >= 2
            await warmer.stop()

        assert not warmer.is_running
