"""Health check endpoint for Docker probes."""

from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter()


class HealthStatus(BaseModel):
    status: str = Field(description="Always 'ok' while the process serves requests")
    timestamp: str = Field(description="ISO timestamp of the check")


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    """Liveness check. No upstream calls."""
    return HealthStatus(status="ok", timestamp=datetime.now(UTC).isoformat())
