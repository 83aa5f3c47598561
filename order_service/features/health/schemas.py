"""Health probe response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LivenessResponse(BaseModel):
    """Liveness probe response: the process is up and serving requests."""

    alive: bool = Field(description="Liveness status")
    timestamp: datetime = Field(description="Check timestamp")
    service: str = Field(min_length=1, max_length=100, description="Service name")


class ReadinessResponse(BaseModel):
    """Readiness probe response.

    Returns 200 when every check passes, 503 otherwise.
    """

    ready: bool = Field(description="Overall readiness status")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual dependency checks")
    timestamp: datetime = Field(description="Check timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ready": True,
                "checks": {"database": True},
                "timestamp": "2025-01-01T00:00:00Z",
            }
        },
    )
