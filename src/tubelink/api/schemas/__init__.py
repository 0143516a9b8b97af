"""API schema exports."""

from tubelink.api.schemas.resolve import HealthStatus, ResolveErrorResponse

__all__ = [
    "HealthStatus",
    "ResolveErrorResponse",
]
