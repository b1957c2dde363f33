"""
Redis repository for data access.

Sandi Metz Principles:
- Single Responsibility: Redis data access
- Small methods: Each operation isolated
- Dependency Injection: Redis pool injected
"""

import json
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from staycache.config import AppConfig, config
from staycache.exceptions import (
    CacheTierUnavailable,
    ConfigurationError,
    MalformedInput,
)
from staycache.utils.logger import get_logger

logger = get_logger(__name__)

# Network and protocol failures that mean the shared tier is unreachable
TIER_ERRORS = (RedisError, OSError, TimeoutError)

_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


async def create_redis_pool(app_config: AppConfig = config) -> ConnectionPool:
    """
    Create Redis connection pool.

    Args:
        app_config: Application configuration

    Returns:
        Redis connection pool

    Raises:
        ConfigurationError: If the Redis URL is malformed
    """
    try:
        return ConnectionPool.from_url(
            app_config.redis_url,
            max_connections=app_config.redis_max_connections,
            socket_timeout=app_config.redis_socket_timeout,
            socket_connect_timeout=app_config.redis_socket_timeout,
            decode_responses=True,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid Redis URL: {e}") from e


def encode_value(value: Any) -> str:
    """Serialize a cache value to JSON text."""
    try:
        return json.dumps(value, default=_json_default, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Value is not cacheable: {e}") from e


def decode_value(data: str) -> Any:
    """Deserialize JSON text stored by encode_value."""
    return json.loads(data)


def contains_pattern(fragment: str) -> str:
    """Build a SCAN match pattern for keys containing fragment."""
    if not fragment:
        return "*"
    escaped = _GLOB_SPECIALS.sub(r"\\\1", fragment)
    return f"*{escaped}*"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not cacheable")


class RedisRepository:
    """
    Repository for Redis operations.

    Handles low-level Redis interactions. Connection and protocol
    failures surface as CacheTierUnavailable so callers can degrade.
    """

    def __init__(self, pool: ConnectionPool):
        """
        Initialize repository.

        Args:
            pool: Redis connection pool
        """
        self._pool = pool

    async def fetch(self, key: str) -> Optional[Any]:
        """
        Fetch a value by key.

        Args:
            key: Cache key

        Returns:
            Decoded value if found, None otherwise

        Raises:
            CacheTierUnavailable: If Redis cannot be reached
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                data = await client.get(key)
        except TIER_ERRORS as e:
            raise CacheTierUnavailable("get", e) from e
        return self._decode(key, data)

    async def store(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """
        Store a value with an expiry.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if stored

        Raises:
            CacheTierUnavailable: If Redis cannot be reached
        """
        data = encode_value(value)
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.setex(key, ttl_seconds, data)
                return True
        except TIER_ERRORS as e:
            raise CacheTierUnavailable("setex", e) from e

    async def batch_fetch(self, keys: list[str]) -> list[Optional[Any]]:
        """
        Fetch multiple values with a single MGET.

        Args:
            keys: List of cache keys

        Returns:
            Values aligned with keys (None where missing)

        Raises:
            CacheTierUnavailable: If Redis cannot be reached
        """
        if not keys:
            return []

        try:
            async with Redis(connection_pool=self._pool) as client:
                values = await client.mget(keys)
        except TIER_ERRORS as e:
            raise CacheTierUnavailable("mget", e) from e
        return [self._decode(key, data) for key, data in zip(keys, values)]

    async def delete_containing(self, fragment: str) -> int:
        """
        Delete keys containing fragment.

        Args:
            fragment: Key substring; empty string matches every key

        Returns:
            Number of keys deleted

        Raises:
            CacheTierUnavailable: If Redis cannot be reached
        """
        pattern = contains_pattern(fragment)
        try:
            async with Redis(connection_pool=self._pool) as client:
                keys = []
                async for key in client.scan_iter(match=pattern):
                    keys.append(key)
                if keys:
                    return await client.delete(*keys)
                return 0
        except TIER_ERRORS as e:
            raise CacheTierUnavailable("delete", e) from e

    async def ping(self) -> bool:
        """
        Ping Redis server.

        Returns:
            True if connected, False otherwise
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.ping()
                return True
        except TIER_ERRORS as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        """Disconnect pooled connections."""
        await self._pool.disconnect()

    @staticmethod
    def _decode(key: str, data: Optional[str]) -> Optional[Any]:
        if data is None:
            return None
        try:
            return decode_value(data)
        except ValueError as e:
            logger.error("Entry parse failed", key=key, error=str(e))
            return None
