"""
Provider metrics recording.

Sandi Metz Principles:
- Single Responsibility: Count provider outcomes
- Thread-safe: Counters updated under a lock
- Snapshots: Callers get immutable copies
"""

import threading
from collections import Counter
from datetime import datetime

from staycache.models.statistics import FetchMetrics


class MetricsRecorder:
    """
    Request, error and latency counters for the fetch client.

    A logical fetch counts as one request however many attempts it
    takes. Every fallback to mock data counts as one error.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._request_count = 0
        self._error_count = 0
        self._response_time_sum_ms = 0.0
        self._failures: Counter = Counter()

    def record_request(self) -> None:
        """Count one logical provider request."""
        with self._lock:
            self._request_count += 1

    def record_success(self, latency_ms: float) -> None:
        """Add the latency of a successful request."""
        with self._lock:
            self._response_time_sum_ms += latency_ms

    def record_failure(self, kind: str) -> None:
        """Count a classified failure attempt (throttles included)."""
        with self._lock:
            self._failures[kind] += 1

    def record_fallback(self) -> None:
        """Count a fallback to the mock dataset."""
        with self._lock:
            self._error_count += 1

    def snapshot(self, cache_size: int = 0) -> FetchMetrics:
        """
        Build a metrics snapshot.

        Args:
            cache_size: Current response cache size

        Returns:
            Metrics with derived success rate and average latency
        """
        with self._lock:
            return FetchMetrics(
                request_count=self._request_count,
                error_count=self._error_count,
                response_time_sum_ms=self._response_time_sum_ms,
                cache_size=cache_size,
                failures=dict(self._failures),
                last_updated=datetime.utcnow(),
            )

    def reset(self) -> None:
        """Zero every counter."""
        with self._lock:
            self._request_count = 0
            self._error_count = 0
            self._response_time_sum_ms = 0.0
            self._failures.clear()
