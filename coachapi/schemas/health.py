"""Pydantic models for health endpoints."""

from pydantic import BaseModel, Field

from coachapi.config import settings


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = Field("healthy", description="healthy | degraded")
    database: str = Field("ok", description="ok | unavailable")
    service: str = settings.APP_NAME
    environment: str = settings.ENVIRONMENT
