"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when the pool is wired."""

    status: str = Field(default="ok", description="Readiness status")
    in_flight: int = Field(default=0, description="Pool operations not yet delivered")
