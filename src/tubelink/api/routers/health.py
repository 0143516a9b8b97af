"""Health check endpoint - no authentication required."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from tubelink import __version__
from tubelink.api.schemas.resolve import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Health check endpoint.

    The resolver has no backing store, so the service is healthy whenever
    it can answer.
    """
    return HealthStatus(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )
