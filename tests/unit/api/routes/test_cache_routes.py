"""Unit tests for cache operator endpoints."""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from staycache.api.routes.cache import router
from staycache.services.hotel_caches import CacheRegistry


@pytest.fixture
def app(coordinator):
    """Create test FastAPI app."""
    app = FastAPI()
    app.include_router(router)
    app.state.app_state = SimpleNamespace(
        coordinator=coordinator, cache_registry=CacheRegistry(coordinator)
    )
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


class TestCacheStats:
    """Tests for statistics endpoints."""

    def test_should_return_stats(self, client):
        """Test stats include coordinator counters and façades."""
        response = client.get("/cache/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["coordinator"]["l1_hits"] == 0
        assert body["coordinator"]["l1_hit_rate"] == 0.0
        assert set(body) == {"coordinator", "hotel_search", "availability", "price"}

    def test_should_reset_stats(self, client, coordinator):
        """Test POST /cache/stats/reset zeroes counters."""
        coordinator.record_warming(completed=3, failed=1)

        response = client.post("/cache/stats/reset")

        assert response.status_code == 200
        assert response.json()["status"] == "reset"
        assert coordinator.get_stats().warming_completed == 0


class TestInvalidate:
    """Tests for POST /cache/invalidate."""

    def test_should_invalidate_pattern(self, client, tier1, mock_tier2):
        """Test matching keys are removed from both tiers."""
        for key, value in (("price:1:2026-01-05", 100), ("availability:v2:abc", {"rooms": 1})):
            tier1.set(key, value, 60)
            mock_tier2.store[key] = value

        response = client.post("/cache/invalidate", json={"pattern": "price"})

        assert response.status_code == 200
        assert response.json() == {
            "pattern": "price",
            "tier1_removed": 1,
            "tier2_removed": 1,
        }
        assert tier1.get("availability:v2:abc") == {"rooms": 1}

    def test_should_report_unreachable_redis(self, client, mock_tier2):
        """Test tier-2 failure is reported as -1."""
        mock_tier2.failing = True

        response = client.post("/cache/invalidate", json={"pattern": ""})

        assert response.status_code == 200
        assert response.json()["tier2_removed"] == -1
