"""
Application configuration management.

Following Sandi Metz principles:
- Single Responsibility: Configuration loading and validation
- Small class: Settings grouped by component
- Clear naming: Descriptive property names
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Application configuration with validation.

    Loads from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="StayCache", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="CORS allowed origins",
    )

    # Redis (tier-2) settings
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    redis_db: int = Field(default=0, ge=0, le=15, description="Redis database")
    redis_password: str = Field(default="", description="Redis password")
    redis_max_connections: int = Field(default=10, ge=1, description="Max connections")
    redis_socket_timeout: float = Field(
        default=2.0, gt=0.0, description="Redis socket timeout in seconds"
    )

    # Cache settings
    cache_key_version: str = Field(default="2", description="Key schema version")
    cache_default_ttl_seconds: int = Field(
        default=300, ge=1, description="Default entry TTL"
    )
    tier1_max_entries: int = Field(
        default=500, ge=1, description="Process-local cache capacity"
    )
    tier1_ttl_seconds: int = Field(
        default=300, ge=1, description="Process-local retention window"
    )
    cache_single_flight: bool = Field(
        default=True, description="Coalesce concurrent origin fetches per key"
    )
    warming_interval_seconds: float = Field(
        default=30.0, gt=0.0, description="Warming sweep interval"
    )
    warming_batch_size: int = Field(
        default=10, ge=1, description="Tasks executed per warming sweep"
    )

    # Search provider settings
    provider_base_url: str = Field(
        default="https://app.rakuten.co.jp/services/api/Travel",
        description="Search provider base URL",
    )
    provider_application_id: str = Field(default="", description="Provider app id")
    provider_affiliate_id: str = Field(default="", description="Provider affiliate id")
    provider_timeout_seconds: float = Field(
        default=10.0, gt=0.0, description="Request timeout"
    )
    provider_min_interval_seconds: float = Field(
        default=0.1, ge=0.0, description="Minimum spacing between provider calls"
    )
    provider_throttle_backoff_seconds: float = Field(
        default=1.0, ge=0.0, description="Wait before retrying a throttled call"
    )
    provider_response_ttl_seconds: int = Field(
        default=300, ge=1, description="Response cache TTL"
    )
    provider_response_cache_max_entries: int = Field(
        default=100, ge=2, description="Response cache capacity"
    )
    provider_user_agent: str = Field(
        default="StayCache/1.0", description="User-Agent sent to the provider"
    )

    @field_validator("cache_key_version")
    @classmethod
    def strip_version_prefix(cls, v: str) -> str:
        """Accept both '2' and 'v2'."""
        v = v.strip()
        return v[1:] if v.lower().startswith("v") else v

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def redis_url(self) -> str:
        """Build Redis URL."""
        if self.redis_password:
            return (
                f"redis://:{self.redis_password}@"
                f"{self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


# Global configuration instance
config = AppConfig()
