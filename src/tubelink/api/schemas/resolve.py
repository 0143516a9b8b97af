"""Response schemas for the resolution and health endpoints.

A successful ``GET /resolve`` returns the flattened ``ResolvedChannel``
payload directly (see ``ResolvedChannel.to_payload``). Failures of any kind
share the ``ResolveErrorResponse`` envelope and are still served with
status 200.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class ResolveErrorResponse(BaseModel):
    """Failure body: ``{"success": false, "error": "..."}``."""

    model_config = ConfigDict(strict=True)

    success: Literal[False] = False
    error: str


class HealthStatus(BaseModel):
    """Application health status."""

    model_config = ConfigDict(strict=True)

    status: str  # "healthy"
    version: str
    timestamp: datetime
