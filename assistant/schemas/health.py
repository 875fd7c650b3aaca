"""Health check API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready.

    Status is "degraded" (still 200) when the cache round-trip fails; the
    cache is non-essential.
    """

    status: str = Field(default="ok", description="ok or degraded")
    cache: dict[str, Any] = Field(default_factory=dict, description="Cache stats and write/read check result")
