"""
Operator API request and response models.

Sandi Metz Principles:
- Small classes with clear purpose
- Immutable response data
- Clear naming conventions
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class ComponentHealth(BaseModel):
    """Health status of a component."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Component status"
    )
    latency_ms: Optional[float] = Field(None, description="Check latency in ms")
    message: Optional[str] = Field(None, description="Status message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Overall status"
    )
    environment: str = Field(..., description="Environment name")
    version: str = Field(..., description="Application version")
    components: Dict[str, ComponentHealth] = Field(
        default_factory=dict, description="Component health status"
    )


class InvalidateRequest(BaseModel):
    """Cache invalidation request."""

    pattern: str = Field(
        default="", description="Key substring; empty flushes every key"
    )


class InvalidateResponse(BaseModel):
    """Cache invalidation result."""

    pattern: str = Field(..., description="Pattern that was invalidated")
    tier1_removed: int = Field(..., ge=0, description="Process-local entries removed")
    tier2_removed: int = Field(
        ..., description="Shared entries removed, -1 if Redis was unreachable"
    )


class ResetResponse(BaseModel):
    """Acknowledgement of a reset action."""

    status: Literal["reset", "cleared"] = Field(..., description="Action performed")
    removed: Optional[int] = Field(None, ge=0, description="Entries removed")
