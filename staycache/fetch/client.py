"""
Resilient search provider client.

Issues rate-limited, time-bounded requests, classifies failures, retries
throttled calls once and falls back to the built-in dataset otherwise.

Sandi Metz Principles:
- Single Responsibility: Provider I/O and failure policy
- Dependency Injection: HTTP client, limiter, metrics and caches injected
- Small methods: One step of the fetch pipeline per method
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError

from staycache.config import AppConfig
from staycache.exceptions import (
    ApiTimeout,
    AuthError,
    FetchError,
    MalformedInput,
    Throttled,
    UpstreamError,
)
from staycache.fetch.metrics import MetricsRecorder
from staycache.fetch.mock_data import MockDataset
from staycache.fetch.normalizer import HotelNormalizer
from staycache.fetch.rate_limiter import RateLimiter
from staycache.fetch.response_cache import ResponseCache
from staycache.models.hotel import NormalizedHotelRecord
from staycache.models.request import Endpoint, ExternalRequestContext
from staycache.models.statistics import FetchMetrics
from staycache.utils.logger import get_logger, log_provider_call

logger = get_logger(__name__)

AUTH_STATUSES = (401, 403)
THROTTLE_STATUS = 429


@dataclass
class FetchClientConfig:
    """Fetch client configuration."""

    base_url: str = "https://app.rakuten.co.jp/services/api/Travel"
    application_id: str = ""
    affiliate_id: str = ""
    timeout_seconds: float = 10.0
    throttle_backoff_seconds: float = 1.0
    max_throttle_retries: int = 1
    response_ttl_seconds: int = 300
    response_cache_max_entries: int = 100
    user_agent: str = "StayCache/1.0"

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "FetchClientConfig":
        """Build from application settings."""
        return cls(
            base_url=app_config.provider_base_url,
            application_id=app_config.provider_application_id,
            affiliate_id=app_config.provider_affiliate_id,
            timeout_seconds=app_config.provider_timeout_seconds,
            throttle_backoff_seconds=app_config.provider_throttle_backoff_seconds,
            response_ttl_seconds=app_config.provider_response_ttl_seconds,
            response_cache_max_entries=app_config.provider_response_cache_max_entries,
            user_agent=app_config.provider_user_agent,
        )


class ResilientFetchClient:
    """
    Client for the hotel search provider.

    fetch never raises for expected provider failures; callers always
    receive a list of normalized records. Only unknown endpoints and
    malformed parameters raise (MalformedInput).
    """

    def __init__(
        self,
        config: Optional[FetchClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        metrics: Optional[MetricsRecorder] = None,
        response_cache: Optional[ResponseCache] = None,
        normalizer: Optional[HotelNormalizer] = None,
        mock_dataset: Optional[MockDataset] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize fetch client.

        Args:
            config: Client configuration
            http_client: HTTP client (created and owned here if omitted)
            rate_limiter: Shared provider rate limiter
            metrics: Metrics recorder
            response_cache: Request-level response cache
            normalizer: Payload normalizer
            mock_dataset: Fallback dataset
            sleep: Coroutine used for throttle backoff
        """
        self._config = config or FetchClientConfig()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._config.timeout_seconds
        )
        self._rate_limiter = rate_limiter or RateLimiter()
        self._metrics = metrics or MetricsRecorder()
        self._response_cache = response_cache or ResponseCache(
            ttl_seconds=self._config.response_ttl_seconds,
            max_entries=self._config.response_cache_max_entries,
        )
        self._normalizer = normalizer or HotelNormalizer()
        self._mock_dataset = mock_dataset or MockDataset(self._normalizer)
        self._sleep = sleep

    async def fetch(
        self,
        endpoint: Endpoint | str,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[NormalizedHotelRecord]:
        """
        Fetch and normalize hotels from the provider.

        Args:
            endpoint: Provider endpoint (enum, path or member name)
            params: Endpoint specific query parameters (None values dropped)

        Returns:
            Normalized records, from the provider, the response cache or
            the fallback dataset

        Raises:
            MalformedInput: If the endpoint is unknown or params are not scalars
        """
        context = self._build_context(endpoint, params)
        cache_key = context.cache_key

        cached = await self._response_cache.get(cache_key)
        if cached is not None:
            logger.debug("Response cache hit", endpoint=context.endpoint.name, key=cache_key)
            return cached

        self._metrics.record_request()
        try:
            records = await self._fetch_live(context)
        except FetchError as e:
            return self._fallback(context, e)

        await self._response_cache.set(cache_key, records)
        return records

    def get_metrics(self) -> FetchMetrics:
        """Get a snapshot of provider metrics."""
        return self._metrics.snapshot(cache_size=self._response_cache.size)

    async def clear_response_cache(self) -> int:
        """
        Drop every cached provider response.

        Returns:
            Number of entries removed
        """
        return await self._response_cache.clear()

    def reset_metrics(self) -> None:
        """Zero the provider metrics."""
        self._metrics.reset()
        logger.info("Provider metrics reset")

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _fetch_live(self, context: ExternalRequestContext) -> List[NormalizedHotelRecord]:
        attempts = 0
        while True:
            attempts += 1
            try:
                return await self._attempt(context)
            except Throttled as e:
                self._metrics.record_failure(e.kind)
                if attempts > self._config.max_throttle_retries:
                    raise UpstreamError(
                        f"Provider still throttling after {attempts} attempts",
                        status_code=THROTTLE_STATUS,
                    ) from e
                logger.warning(
                    "Provider throttled, backing off",
                    endpoint=context.endpoint.name,
                    backoff_seconds=self._config.throttle_backoff_seconds,
                )
                await self._sleep(self._config.throttle_backoff_seconds)

    async def _attempt(self, context: ExternalRequestContext) -> List[NormalizedHotelRecord]:
        await self._rate_limiter.await_turn()

        started = time.perf_counter()
        response = await self._send(context)
        latency_ms = (time.perf_counter() - started) * 1000
        log_provider_call(context.endpoint.value, response.status_code, latency_ms)

        self._raise_for_status(response)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError("Provider returned invalid JSON", response.status_code) from e

        try:
            records = self._normalizer.normalize(payload, context.endpoint)
        except (TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(
                f"Provider returned malformed hotel data: {e}", response.status_code
            ) from e
        self._metrics.record_success(latency_ms)
        return records

    async def _send(self, context: ExternalRequestContext) -> httpx.Response:
        try:
            return await self._http.get(
                f"{self._config.base_url}{context.endpoint.value}",
                params=context.query_params(
                    self._config.application_id, self._config.affiliate_id
                ),
                headers={
                    "User-Agent": self._config.user_agent,
                    "Accept": "application/json",
                },
                timeout=self._config.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise ApiTimeout(
                f"Provider timed out after {self._config.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Provider request failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status in AUTH_STATUSES:
            raise AuthError(f"Provider rejected credentials ({status})", status)
        if status == THROTTLE_STATUS:
            raise Throttled("Provider rate limit exceeded", status)
        if status >= 400:
            raise UpstreamError(f"Provider returned HTTP {status}", status)

    def _fallback(
        self, context: ExternalRequestContext, error: FetchError
    ) -> List[NormalizedHotelRecord]:
        self._metrics.record_failure(error.kind)
        self._metrics.record_fallback()
        logger.warning(
            "Serving fallback dataset",
            endpoint=context.endpoint.name,
            failure=error.kind,
            status_code=error.status_code,
            error=str(error),
        )
        return self._mock_dataset.records_for(context)

    @staticmethod
    def _build_context(
        endpoint: Endpoint | str, params: Optional[Dict[str, Any]]
    ) -> ExternalRequestContext:
        resolved = Endpoint.parse(endpoint)
        if params is not None and not isinstance(params, dict):
            raise MalformedInput(f"Params must be a mapping, got {type(params).__name__}")
        cleaned = {name: value for name, value in (params or {}).items() if value is not None}
        try:
            return ExternalRequestContext(endpoint=resolved, params=cleaned)
        except ValidationError as e:
            raise MalformedInput(f"Invalid request params: {e}") from e
