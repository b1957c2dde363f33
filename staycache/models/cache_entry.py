"""
Cache entry models.

Sandi Metz Principles:
- Single Responsibility: Cache data structure
- Clear naming: Descriptive fields
- Validated at the boundary: Options reject unknown fields
"""

import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from staycache.exceptions import MalformedInput

DEFAULT_TTL_SECONDS = 300

Producer = Callable[[], Union[Any, Awaitable[Any]]]
BatchProducer = Callable[[list[str]], Union[list[Any], Awaitable[list[Any]]]]


class CacheTier(str, Enum):
    """Cache tier that holds an entry."""

    TIER1 = "tier1"
    TIER2 = "tier2"


class CacheOptions(BaseModel):
    """Per-call options for coordinator lookups."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl_seconds: int = Field(
        default=DEFAULT_TTL_SECONDS, ge=1, description="Entry TTL in seconds"
    )
    warm: bool = Field(default=False, description="Queue the key for warming")

    @classmethod
    def resolve(cls, options: Any = None) -> "CacheOptions":
        """
        Coerce caller-supplied options into a validated instance.

        Args:
            options: None, a CacheOptions, or a mapping of option values

        Returns:
            Validated options

        Raises:
            MalformedInput: If options are not recognised or out of range
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, dict):
            raise MalformedInput(f"Unsupported cache options: {options!r}")
        try:
            return cls(**options)
        except ValidationError as e:
            raise MalformedInput(f"Invalid cache options: {e}") from e


class CacheEntry(BaseModel):
    """Value held by the process-local tier."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str = Field(..., description="Cache key")
    value: Any = Field(..., description="Cached value")
    tier: CacheTier = Field(default=CacheTier.TIER1, description="Owning tier")
    stored_at: float = Field(
        default_factory=time.monotonic, description="Monotonic write time"
    )
    last_accessed: float = Field(
        default_factory=time.monotonic, description="Monotonic last read time"
    )
    expires_at: Optional[float] = Field(None, description="Monotonic expiry time")

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check whether the entry outlived its retention window."""
        if self.expires_at is None:
            return False
        return (now if now is not None else time.monotonic()) >= self.expires_at

    def touch(self, now: Optional[float] = None) -> None:
        """Refresh recency without extending the retention window."""
        self.last_accessed = now if now is not None else time.monotonic()

    @property
    def age_seconds(self) -> float:
        """Calculate entry age in seconds."""
        return time.monotonic() - self.stored_at
