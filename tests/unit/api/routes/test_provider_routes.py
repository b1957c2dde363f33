"""Unit tests for provider operator endpoints."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from staycache.api.routes.provider import router
from staycache.models.statistics import FetchMetrics


@pytest.fixture
def mock_fetch_client():
    """Fetch client with canned metrics."""
    client = MagicMock()
    client.get_metrics.return_value = FetchMetrics(
        request_count=4,
        error_count=1,
        response_time_sum_ms=300.0,
        cache_size=2,
        failures={"auth_error": 1},
    )
    client.clear_response_cache = AsyncMock(return_value=2)
    return client


@pytest.fixture
def client(mock_fetch_client):
    """Create test client."""
    app = FastAPI()
    app.include_router(router)
    app.state.app_state = SimpleNamespace(fetch_client=mock_fetch_client)
    return TestClient(app)


class TestProviderRoutes:
    """Tests for provider metrics and cache control."""

    def test_should_return_metrics(self, client):
        """Test GET /provider/metrics includes derived fields."""
        response = client.get("/provider/metrics")

        assert response.status_code == 200
        body = response.json()
        assert body["request_count"] == 4
        assert body["success_rate"] == 75.0
        assert body["average_response_time_ms"] == 100.0
        assert body["failures"] == {"auth_error": 1}

    def test_should_reset_metrics(self, client, mock_fetch_client):
        """Test POST /provider/metrics/reset."""
        response = client.post("/provider/metrics/reset")

        assert response.status_code == 200
        assert response.json()["status"] == "reset"
        mock_fetch_client.reset_metrics.assert_called_once()

    def test_should_clear_response_cache(self, client, mock_fetch_client):
        """Test DELETE /provider/cache."""
        response = client.delete("/provider/cache")

        assert response.status_code == 200
        assert response.json() == {"status": "cleared", "removed": 2}
        mock_fetch_client.clear_response_cache.assert_awaited_once()
