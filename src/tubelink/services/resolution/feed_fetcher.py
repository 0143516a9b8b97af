"""
Feed Fetcher: the cheapest resolution strategy.

Reads the public Atom video feed for a handle
(``/feeds/videos.xml?user=<handle>``) and builds a ``ResolvedChannel`` from
the feed-level author and title plus latest-video fields taken from one
feed entry.

Entry selection
---------------
Latest-video fields (thumbnail, view count, video ID, publish date) are read
from the entry at ``Settings.feed_latest_entry_index``, which defaults to
``1`` (the *second* entry). The first entry is treated as the channel's
self-referential entry rather than its latest upload. Set the index to ``0``
to read the first entry instead.
"""

from __future__ import annotations

import io
import logging
from typing import Any

import feedparser

from tubelink.config.settings import Settings
from tubelink.services.resolution.http_fetch import fetch_bytes
from tubelink.services.resolution.models import (
    FailureReason,
    ResolutionSource,
    ResolvedChannel,
    StrategyFailure,
    StrategyOutcome,
    StrategySuccess,
    is_channel_id,
)

logger = logging.getLogger(__name__)


def _parse_view_count(statistics: Any) -> int:
    """Parse ``media:statistics@views`` into a non-negative int, default 0."""
    if not isinstance(statistics, dict):
        return 0
    views = statistics.get("views")
    if views is None:
        return 0
    try:
        return max(int(str(views).strip()), 0)
    except (ValueError, TypeError):
        return 0


def _first_thumbnail_url(entry: Any) -> str | None:
    thumbnails = entry.get("media_thumbnail") or []
    for thumbnail in thumbnails:
        url = thumbnail.get("url") if isinstance(thumbnail, dict) else None
        if url:
            return str(url)
    return None


def parse_feed(
    document: bytes | str, handle: str, entry_index: int = 1
) -> StrategyOutcome:
    """
    Parse an Atom video feed into a tagged outcome.

    Parameters
    ----------
    document : bytes | str
        Raw feed body. It is always parsed as a document, never opened as
        a URL or file path.
    handle : str
        Normalized handle the feed was requested for.
    entry_index : int, optional
        Index of the entry supplying latest-video fields (default: 1).

    Returns
    -------
    StrategyOutcome
        ``StrategySuccess`` when the feed author name, author URI and feed
        title are present and the URI ends in a valid channel ID.
        Otherwise ``StrategyFailure`` tagged ``PARSE_ERROR``.
    """
    if isinstance(document, str):
        document = document.encode("utf-8")
    parsed = feedparser.parse(io.BytesIO(document))
    feed = parsed.get("feed", {})

    author_detail = feed.get("author_detail") or {}
    author = author_detail.get("name")
    uri = author_detail.get("href")
    title = feed.get("title")

    missing = [
        name
        for name, value in (("author", author), ("uri", uri), ("title", title))
        if not value
    ]
    if missing:
        bozo = parsed.get("bozo_exception")
        logger.warning(
            "Feed for %s is missing %s%s",
            handle,
            ", ".join(missing),
            f" ({type(bozo).__name__}: {bozo})" if bozo else "",
        )
        return StrategyFailure(
            reason=FailureReason.PARSE_ERROR,
            message=f"Feed for {handle} is missing {', '.join(missing)}",
        )

    channel_id = str(uri).rstrip("/").split("/")[-1]
    if not is_channel_id(channel_id):
        logger.warning("Feed author URI for %s has no channel ID: %s", handle, uri)
        return StrategyFailure(
            reason=FailureReason.PARSE_ERROR,
            message=f"Feed author URI is not a channel URL: {uri}",
        )

    entries = parsed.get("entries", [])
    latest: Any = entries[entry_index] if len(entries) > entry_index else {}

    channel = ResolvedChannel(
        channel_id=channel_id,
        author=str(author),
        uri=str(uri),
        title=str(title),
        thumbnail=_first_thumbnail_url(latest),
        view_count=_parse_view_count(latest.get("media_statistics")),
        last_video_id=latest.get("yt_videoid"),
        last_video_date=latest.get("published"),
        source=ResolutionSource.FEED,
    )
    logger.info("Channel id %s resolved from feed for %s", channel_id, handle)
    return StrategySuccess(channel=channel)


class FeedFetcher:
    """
    Resolve a handle from its public Atom video feed.

    Parameters
    ----------
    settings : Settings
        Supplies the base URL, timeout, user agent and entry index.

    Examples
    --------
    >>> fetcher = FeedFetcher(settings=get_settings())
    >>> outcome = await fetcher.resolve("GoogleDevelopers")
    """

    name = "feed"

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def resolve(self, handle: str) -> StrategyOutcome:
        """
        Fetch and parse the feed for a normalized handle.

        Parameters
        ----------
        handle : str
            Handle without its ``@`` marker.

        Returns
        -------
        StrategyOutcome
            Success, or a failure tagged ``NOT_FOUND``, ``FETCH_ERROR``
            or ``PARSE_ERROR``.
        """
        body = await fetch_bytes(
            self._settings.feed_url,
            params={"user": handle},
            settings=self._settings,
            handle=handle,
            resource="feed",
        )
        if isinstance(body, StrategyFailure):
            return body

        return parse_feed(body, handle, self._settings.feed_latest_entry_index)
