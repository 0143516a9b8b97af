"""Channel handle resolution endpoint - no authentication required."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from tubelink.api.deps import get_resolver
from tubelink.api.schemas.resolve import ResolveErrorResponse
from tubelink.exceptions import InvalidHandleError
from tubelink.services.resolution.orchestrator import ChannelResolver

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_body(message: str) -> dict[str, Any]:
    return ResolveErrorResponse(error=message).model_dump()


@router.get("/resolve", response_model=None)
async def resolve_channel_id(
    channel_name: Optional[str] = Query(
        default=None,
        alias="channelName",
        description="Channel handle, with or without the leading @",
    ),
    resolver: ChannelResolver = Depends(get_resolver),
) -> dict[str, Any]:
    """
    Resolve a channel handle to its channel ID and metadata.

    Always answers with status 200. On success the body is the flattened,
    camelCase channel record (``channelId``, ``title``, ``viewCount``, ...).
    On failure it is ``{"success": false, "error": "..."}``.
    """
    if channel_name is None or not channel_name.strip():
        return _error_body(InvalidHandleError().message)

    try:
        outcome = await resolver.resolve(channel_name)
    except InvalidHandleError as e:
        return _error_body(e.message)

    channel = outcome.channel
    if channel is None:
        return _error_body(outcome.error or "Failed to scrape channel info")

    return channel.to_payload()
