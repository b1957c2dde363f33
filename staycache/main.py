"""
Main FastAPI application.

Following Sandi Metz:
- Single Responsibility: Application setup and configuration
- Small methods: Each lifecycle stage isolated
- Clear naming: Descriptive function names
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import ConnectionPool

from staycache.api.routes import cache, health, provider
from staycache.cache.coordinator import CacheCoordinator, CoordinatorConfig
from staycache.cache.memory_cache import MemoryCache
from staycache.cache.redis_cache import RedisCache
from staycache.cache.warming import CacheWarmer, WarmingConfig
from staycache.config import AppConfig, config
from staycache.fetch.client import FetchClientConfig, ResilientFetchClient
from staycache.fetch.metrics import MetricsRecorder
from staycache.fetch.rate_limiter import RateLimitConfig, RateLimiter
from staycache.fetch.response_cache import ResponseCache
from staycache.repositories.redis_repository import RedisRepository, create_redis_pool
from staycache.services.hotel_caches import CacheRegistry
from staycache.services.hotel_search import HotelSearchService
from staycache.utils.logger import get_logger, log_error, setup_logging

setup_logging(config.log_level)
logger = get_logger(__name__)


class ApplicationState:
    """
    Manages application-wide state.

    Single Responsibility: Lifecycle management of shared resources.
    Every cache, limiter and metrics object is constructed once here
    and injected where needed.
    """

    def __init__(self, app_config: AppConfig = config) -> None:
        self.config = app_config
        self.redis_pool: Optional[ConnectionPool] = None
        self.coordinator: Optional[CacheCoordinator] = None
        self.warmer: Optional[CacheWarmer] = None
        self.cache_registry: Optional[CacheRegistry] = None
        self.fetch_client: Optional[ResilientFetchClient] = None
        self.search_service: Optional[HotelSearchService] = None

    def build(self, redis_pool: ConnectionPool) -> None:
        """
        Wire every component around a Redis pool.

        Args:
            redis_pool: Redis connection pool for the shared tier
        """
        app_config = self.config
        self.redis_pool = redis_pool

        tier1 = MemoryCache(
            max_entries=app_config.tier1_max_entries,
            retention_seconds=app_config.tier1_ttl_seconds,
        )
        tier2 = RedisCache(RedisRepository(redis_pool))
        self.coordinator = CacheCoordinator(
            tier1, tier2, CoordinatorConfig.from_app_config(app_config)
        )
        self.warmer = CacheWarmer(
            self.coordinator, WarmingConfig.from_app_config(app_config)
        )
        self.cache_registry = CacheRegistry(
            self.coordinator, key_version=app_config.cache_key_version
        )

        client_config = FetchClientConfig.from_app_config(app_config)
        self.fetch_client = ResilientFetchClient(
            config=client_config,
            rate_limiter=RateLimiter(RateLimitConfig.from_app_config(app_config)),
            metrics=MetricsRecorder(),
            response_cache=ResponseCache(
                ttl_seconds=client_config.response_ttl_seconds,
                max_entries=client_config.response_cache_max_entries,
                coordinator=self.coordinator,
            ),
        )
        self.search_service = HotelSearchService(self.fetch_client)

    async def startup(self) -> None:
        """Initialize application resources."""
        logger.info("Starting StayCache", env=self.config.app_env)
        try:
            self.build(await create_redis_pool(self.config))
            logger.info("Redis pool initialized")
            self.warmer.start()
            logger.info("StayCache started successfully")
        except Exception as e:
            log_error(e, "startup")
            raise

    async def shutdown(self) -> None:
        """Cleanup application resources."""
        logger.info("Shutting down StayCache")
        if self.warmer:
            await self.warmer.stop()
        if self.fetch_client:
            await self.fetch_client.close()
        if self.redis_pool:
            await self.redis_pool.disconnect()
            logger.info("Redis pool closed")
        logger.info("StayCache shut down successfully")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    state = ApplicationState()
    await state.startup()
    app.state.app_state = state

    yield

    await state.shutdown()


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=config.app_name,
        description="Two-tier hotel data cache and resilient search provider client",
        version="0.1.0",
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(cache.router, tags=["cache"])
    app.include_router(provider.router, tags=["provider"])

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "staycache.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development,
    )
