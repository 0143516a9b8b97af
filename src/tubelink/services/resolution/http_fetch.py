"""
Shared outbound GET for the feed and HTML strategies.

Maps HTTP status codes and transport errors onto the pipeline's failure
taxonomy so that neither strategy has to raise.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tubelink.config.settings import Settings
from tubelink.services.resolution.models import FailureReason, StrategyFailure

logger = logging.getLogger(__name__)

_HTTP_NOT_FOUND = 404


async def _get(
    url: str,
    *,
    settings: Settings,
    handle: str,
    resource: str,
    params: dict[str, Any] | None = None,
) -> httpx.Response | StrategyFailure:
    """
    Fetch a URL and return the 2xx response, or a tagged failure.

    Parameters
    ----------
    url : str
        Absolute URL to fetch.
    settings : Settings
        Supplies the request timeout and user agent.
    handle : str
        Normalized channel handle, used in failure messages.
    resource : str
        Short description of what is being fetched (``"feed"``,
        ``"channel page"``), used in failure messages and logs.
    params : dict[str, Any] | None, optional
        Query parameters appended to ``url`` (default: None).

    Returns
    -------
    httpx.Response | StrategyFailure
        The response on a 2xx status. Otherwise a failure tagged
        ``NOT_FOUND`` for 404 and ``FETCH_ERROR`` for any other status
        or transport error.
    """
    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.get(
                url,
                params=params,
                timeout=settings.request_timeout,
                headers={"User-Agent": settings.user_agent},
            )
    except httpx.TimeoutException as e:
        logger.warning(
            "Timed out fetching %s for %s after %.1fs (%s)",
            resource,
            handle,
            settings.request_timeout,
            type(e).__name__,
        )
        return StrategyFailure(
            reason=FailureReason.FETCH_ERROR,
            message=f"Timed out fetching {resource} for {handle}",
        )
    except httpx.HTTPError as e:
        logger.warning(
            "Failed to fetch %s for %s: %s: %s",
            resource,
            handle,
            type(e).__name__,
            e,
        )
        return StrategyFailure(
            reason=FailureReason.FETCH_ERROR,
            message=f"Failed to fetch {resource}: {type(e).__name__}",
        )

    status_code = response.status_code
    if status_code == _HTTP_NOT_FOUND:
        logger.info("%s not found for %s", resource.capitalize(), handle)
        return StrategyFailure(
            reason=FailureReason.NOT_FOUND,
            message=f"Channel not found: {handle}",
        )

    if not 200 <= status_code < 300:
        logger.warning(
            "Unexpected status %d fetching %s for %s", status_code, resource, handle
        )
        return StrategyFailure(
            reason=FailureReason.FETCH_ERROR,
            message=f"Failed to fetch {resource}: {status_code}",
        )

    return response


async def fetch_text(
    url: str,
    *,
    settings: Settings,
    handle: str,
    resource: str,
    params: dict[str, Any] | None = None,
) -> str | StrategyFailure:
    """Fetch a URL and return its decoded text body, or a tagged failure."""
    response = await _get(
        url, settings=settings, handle=handle, resource=resource, params=params
    )
    if isinstance(response, StrategyFailure):
        return response
    return response.text


async def fetch_bytes(
    url: str,
    *,
    settings: Settings,
    handle: str,
    resource: str,
    params: dict[str, Any] | None = None,
) -> bytes | StrategyFailure:
    """
    Fetch a URL and return its raw body, or a tagged failure.

    Used for XML documents, where the parser reads the declared encoding
    itself.
    """
    response = await _get(
        url, settings=settings, handle=handle, resource=resource, params=params
    )
    if isinstance(response, StrategyFailure):
        return response
    return response.content
