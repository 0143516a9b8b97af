"""
HTML Extractor: static-page resolution strategy.

Fetches the public ``/@handle`` page without running JavaScript and
pattern-matches metadata that YouTube embeds server-side: Open Graph and
``name="title"`` meta tags (read with BeautifulSoup) and inline
``ytInitialData`` JSON fragments (read with regular expressions).

Each field is extracted by an ordered tuple of extractor functions. The
first extractor returning a non-empty value wins; later extractors are
not consulted even if they would produce a "better" value.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from bs4 import BeautifulSoup

from tubelink.config.settings import Settings
from tubelink.services.resolution.http_fetch import fetch_text
from tubelink.services.resolution.models import (
    FailureReason,
    ResolutionSource,
    ResolvedChannel,
    StrategyFailure,
    StrategyOutcome,
    StrategySuccess,
    channel_id_from_url,
    is_channel_id,
)

logger = logging.getLogger(__name__)

_EMBEDDED_CHANNEL_ID_RE = re.compile(r'"channelId":"(UC[A-Za-z0-9_-]{22})"')
_AVATAR_THUMBNAIL_RE = re.compile(r'"avatar":\{"thumbnails":\[\{"url":"([^"]+)"')
_GENERIC_THUMBNAIL_RE = re.compile(
    r'"thumbnails":\[\{"url":"([^"]+)","width":\d+,"height":\d+\}\]'
)
_SUBSCRIBER_TEXT_RE = re.compile(
    r'"subscriberCountText":\{"simpleText":"([^"]+)"'
    r'|"metadataParts":\[\{"text":\{"content":"([^"]+subscribers)"'
)
_TITLE_SUFFIX_RE = re.compile(r"\s+-\s+YouTube\s*$")

_SUBSCRIBER_SUFFIXES: dict[str, int] = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}


@dataclass(frozen=True)
class ChannelPage:
    """A fetched channel page, parsed once and shared by all extractors."""

    html: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, html: str) -> ChannelPage:
        return cls(html=html, soup=BeautifulSoup(html, "html.parser"))

    def meta_content(self, **attrs: str) -> str | None:
        """Return the stripped ``content`` of the first matching meta tag."""
        tag = self.soup.find("meta", attrs=attrs)
        if tag is None:
            return None
        content = tag.get("content")
        if not content:
            return None
        return str(content).strip() or None


Extractor = Callable[[ChannelPage], str | None]


def first_match(page: ChannelPage, extractors: tuple[Extractor, ...]) -> str | None:
    """
    Apply extractors in order and return the first non-empty result.

    Parameters
    ----------
    page : ChannelPage
        The parsed page.
    extractors : tuple[Extractor, ...]
        Candidate extractors in priority order.

    Returns
    -------
    str | None
        The first non-empty value, or None if no extractor matched.
    """
    for extractor in extractors:
        value = extractor(page)
        if value:
            return value
    return None


def _decode_json_string(raw: str) -> str:
    """Decode JSON string escapes (``\\u0026``, ``\\/``) in a regex capture."""
    try:
        return str(json.loads(f'"{raw}"'))
    except (json.JSONDecodeError, ValueError):
        return raw


def strip_title_suffix(title: str) -> str:
    """
    Remove the trailing site-name suffix from a page title.

    Examples
    --------
    >>> strip_title_suffix("My Channel - YouTube")
    'My Channel'
    """
    return _TITLE_SUFFIX_RE.sub("", title).strip()


# -- Channel ID ---------------------------------------------------------------


def _channel_id_from_og_url(page: ChannelPage) -> str | None:
    channel_id = channel_id_from_url(page.meta_content(property="og:url"))
    return channel_id if is_channel_id(channel_id) else None


def _channel_id_from_embedded_json(page: ChannelPage) -> str | None:
    match = _EMBEDDED_CHANNEL_ID_RE.search(page.html)
    return match.group(1) if match else None


CHANNEL_ID_EXTRACTORS: tuple[Extractor, ...] = (
    _channel_id_from_og_url,
    _channel_id_from_embedded_json,
)


# -- Title --------------------------------------------------------------------


def _title_from_name_meta(page: ChannelPage) -> str | None:
    return page.meta_content(name="title")


def _title_from_og_title(page: ChannelPage) -> str | None:
    return page.meta_content(property="og:title")


def _title_from_title_element(page: ChannelPage) -> str | None:
    title_tag = page.soup.find("title")
    if title_tag is None:
        return None
    return title_tag.get_text(strip=True) or None


TITLE_EXTRACTORS: tuple[Extractor, ...] = (
    _title_from_name_meta,
    _title_from_og_title,
    _title_from_title_element,
)


# -- Thumbnail ----------------------------------------------------------------


def _thumbnail_from_avatar_json(page: ChannelPage) -> str | None:
    match = _AVATAR_THUMBNAIL_RE.search(page.html)
    return _decode_json_string(match.group(1)) if match else None


def _thumbnail_from_og_image(page: ChannelPage) -> str | None:
    return page.meta_content(property="og:image")


def _thumbnail_from_generic_json(page: ChannelPage) -> str | None:
    match = _GENERIC_THUMBNAIL_RE.search(page.html)
    return _decode_json_string(match.group(1)) if match else None


THUMBNAIL_EXTRACTORS: tuple[Extractor, ...] = (
    _thumbnail_from_avatar_json,
    _thumbnail_from_og_image,
    _thumbnail_from_generic_json,
)


# -- Subscribers --------------------------------------------------------------


def _subscriber_text(page: ChannelPage) -> str | None:
    match = _SUBSCRIBER_TEXT_RE.search(page.html)
    if match is None:
        return None
    return match.group(1) or match.group(2)


def parse_subscriber_count(text: str | None) -> int | None:
    """
    Parse a human-readable subscriber count string into an integer.

    Handles SI suffixes (K, M, B), comma-separated numbers, and the
    special "No subscribers" case.

    Parameters
    ----------
    text : str | None
        Subscriber count text, e.g. ``"1.2M subscribers"``.

    Returns
    -------
    int | None
        Parsed count, or None if the text could not be parsed.

    Examples
    --------
    >>> parse_subscriber_count("1.2M subscribers")
    1200000
    >>> parse_subscriber_count("1,234 subscribers")
    1234
    >>> parse_subscriber_count("No subscribers")
    0
    """
    if not text or not text.strip():
        return None

    cleaned = text.strip()
    if cleaned.lower().startswith("no "):
        return 0

    cleaned = re.sub(r"\s*subscribers?\s*$", "", cleaned, flags=re.IGNORECASE).strip()
    if not cleaned:
        return None

    last_char = cleaned[-1].upper()
    if last_char in _SUBSCRIBER_SUFFIXES:
        numeric_part = cleaned[:-1].strip().replace(",", "")
        try:
            count = round(float(numeric_part) * _SUBSCRIBER_SUFFIXES[last_char])
        except (ValueError, TypeError):
            return None
    else:
        try:
            count = int(cleaned.replace(",", ""))
        except (ValueError, TypeError):
            return None

    return count if count >= 0 else None


def extract_channel(page: ChannelPage, handle: str, settings: Settings) -> StrategyOutcome:
    """
    Extract a ``ResolvedChannel`` from a fetched channel page.

    Parameters
    ----------
    page : ChannelPage
        The parsed page.
    handle : str
        Normalized handle, used as the title fallback.
    settings : Settings
        Supplies the base URL for the synthesized canonical URL.

    Returns
    -------
    StrategyOutcome
        Success, or a failure tagged ``ID_NOT_FOUND`` when no channel ID
        pattern matched.
    """
    channel_id = first_match(page, CHANNEL_ID_EXTRACTORS)
    if channel_id is None:
        logger.info("No channel ID found in page HTML for %s", handle)
        return StrategyFailure(
            reason=FailureReason.ID_NOT_FOUND,
            message="Channel ID not found in page HTML",
        )

    uri = page.meta_content(property="og:url") or settings.channel_id_url(channel_id)

    raw_title = first_match(page, TITLE_EXTRACTORS)
    title = strip_title_suffix(raw_title) if raw_title else ""
    title = title or handle

    thumbnail = first_match(page, THUMBNAIL_EXTRACTORS)
    subscribers_text = _subscriber_text(page)
    subscriber_count = parse_subscriber_count(subscribers_text)

    logger.info(
        "Channel info extracted from HTML for %s: id=%s title=%r subscribers=%s",
        handle,
        channel_id,
        title,
        subscribers_text,
    )
    return StrategySuccess(
        channel=ResolvedChannel(
            channel_id=channel_id,
            author=title,
            uri=uri,
            title=title,
            thumbnail=thumbnail,
            subscriber_count=subscriber_count,
            source=ResolutionSource.HTML,
        )
    )


class HtmlExtractor:
    """
    Resolve a handle by pattern-matching its static channel page.

    Parameters
    ----------
    settings : Settings
        Supplies the base URL, timeout and user agent.
    """

    name = "html"

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def resolve(self, handle: str) -> StrategyOutcome:
        """
        Fetch ``/@handle`` and extract channel metadata.

        Parameters
        ----------
        handle : str
            Handle without its ``@`` marker.

        Returns
        -------
        StrategyOutcome
            Success, or a failure tagged ``NOT_FOUND``, ``FETCH_ERROR``
            or ``ID_NOT_FOUND``.
        """
        body = await fetch_text(
            self._settings.channel_page_url(handle),
            settings=self._settings,
            handle=handle,
            resource="channel page",
        )
        if isinstance(body, StrategyFailure):
            return body

        return extract_channel(ChannelPage.from_html(body), handle, self._settings)
