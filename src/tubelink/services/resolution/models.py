"""
Pydantic models for the channel resolution pipeline.

Provides the validated output record, the tagged per-strategy outcomes,
and the orchestrator's aggregate outcome.

Models
------
ResolvedChannel
    Channel metadata produced by exactly one successful strategy.
StrategySuccess
    Tagged outcome wrapping a ``ResolvedChannel``.
StrategyFailure
    Tagged outcome carrying a ``FailureReason`` and a message.
ResolutionOutcome
    Final result of one orchestrated resolution call.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tubelink.exceptions import ChannelResolutionError, InvalidHandleError

CHANNEL_ID_PATTERN = re.compile(r"^UC[A-Za-z0-9_-]{22}$")
_CHANNEL_PATH_RE = re.compile(r"/channel/([^/?#]+)")


def validate_channel_id(v: str) -> str:
    """Validate YouTube Channel ID format."""
    if not isinstance(v, str):
        raise TypeError("ChannelId must be a string")

    if len(v) != 24:
        raise ValueError(
            f"ChannelId must be exactly 24 characters long, got {len(v)}: {v}"
        )

    if not v.startswith("UC"):
        raise ValueError(f'ChannelId must start with "UC", got: {v}')

    if not CHANNEL_ID_PATTERN.match(v):
        raise ValueError(f"ChannelId contains invalid characters: {v}")

    return v


ChannelId = Annotated[
    str,
    BeforeValidator(validate_channel_id),
    Field(description="YouTube Channel ID (24 chars, starts with UC)"),
]


def is_channel_id(value: str | None) -> bool:
    """Return True if ``value`` has the stable 24-character channel ID shape."""
    if not value:
        return False
    return CHANNEL_ID_PATTERN.match(value) is not None


def normalize_handle(handle: str | None) -> str:
    """
    Normalize a user-supplied channel handle.

    Strips surrounding whitespace and a single leading ``@`` marker.

    Parameters
    ----------
    handle : str | None
        Raw handle, e.g. ``"@MyChannel"`` or ``"MyChannel"``.

    Returns
    -------
    str
        The handle without its marker.

    Raises
    ------
    InvalidHandleError
        If nothing remains after normalization.

    Examples
    --------
    >>> normalize_handle("@MyChannel")
    'MyChannel'
    >>> normalize_handle("  MyChannel ")
    'MyChannel'
    """
    cleaned = (handle or "").strip()
    if cleaned.startswith("@"):
        cleaned = cleaned[1:].strip()
    if not cleaned:
        raise InvalidHandleError(handle=handle or "")
    return cleaned


def channel_id_from_url(url: str | None) -> str | None:
    """
    Extract the path segment following ``/channel/`` in a URL.

    Parameters
    ----------
    url : str | None
        Any URL, e.g. ``"https://www.youtube.com/channel/UCxxx/videos?x=1"``.

    Returns
    -------
    str | None
        The segment after ``/channel/`` with no trailing path, slash, query
        string or fragment retained, or ``None`` if the URL has no such
        segment.

    Examples
    --------
    >>> channel_id_from_url("https://www.youtube.com/channel/UCuAXFkgsw1L7xaCfnd5JJOw/")
    'UCuAXFkgsw1L7xaCfnd5JJOw'
    """
    if not url:
        return None
    match = _CHANNEL_PATH_RE.search(url)
    if match is None:
        return None
    return match.group(1)


class ResolutionSource(str, Enum):
    """Strategy that produced a ``ResolvedChannel``."""

    FEED = "feed"
    HTML = "html"
    BROWSER = "browser"


class FailureReason(str, Enum):
    """
    Failure taxonomy shared by all strategies.

    NOT_FOUND: target channel does not exist (HTTP 404)
    FETCH_ERROR: non-success status other than 404, or transport failure
    PARSE_ERROR: structurally invalid feed or page
    ID_NOT_FOUND: document fetched but no channel ID pattern matched
    TIMEOUT: browser wait exceeded its bound
    BROWSER_LAUNCH_ERROR: browser process or driver failure
    """

    NOT_FOUND = "not_found"
    FETCH_ERROR = "fetch_error"
    PARSE_ERROR = "parse_error"
    ID_NOT_FOUND = "id_not_found"
    TIMEOUT = "timeout"
    BROWSER_LAUNCH_ERROR = "browser_launch_error"


class ResolvedChannel(BaseModel):
    """
    Channel metadata produced by one successful resolution strategy.

    Serializes with camelCase aliases (``channelId``, ``viewCount``, ...)
    for the HTTP surface. Instances are frozen once constructed.

    Attributes
    ----------
    channel_id : ChannelId
        Stable platform identifier (``UC`` + 22 characters).
    title : str
        Display title; falls back to the input handle.
    author : str
        Author display name; falls back to the input handle.
    uri : str
        Canonical channel URL.
    thumbnail : str | None
        Avatar or latest-video thumbnail URL, if discoverable.
    view_count : int
        Non-negative view statistic. ``0`` means unknown.
    last_video_id : str | None
        Latest video ID (feed strategy only).
    last_video_date : str | None
        Latest video publish timestamp as published by the feed.
    subscriber_count : int | None
        Best-effort subscriber count (HTML strategy only).
    source : ResolutionSource
        Strategy that produced this record. Not part of the HTTP payload.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    channel_id: ChannelId
    title: str
    author: str
    uri: str
    thumbnail: str | None = None
    view_count: int = Field(default=0, ge=0)
    last_video_id: str | None = None
    last_video_date: str | None = None
    subscriber_count: int | None = Field(default=None, ge=0)
    source: ResolutionSource = Field(exclude=True)

    def to_payload(self) -> dict[str, object]:
        """
        Flatten into the camelCase response body used by ``GET /resolve``.

        Returns
        -------
        dict[str, object]
            JSON-serializable dictionary keyed by camelCase field aliases.
        """
        return self.model_dump(mode="json", by_alias=True)


class StrategySuccess(BaseModel):
    """Tagged outcome of a strategy that produced a channel."""

    model_config = ConfigDict(frozen=True)

    channel: ResolvedChannel


class StrategyFailure(BaseModel):
    """Tagged outcome of a strategy that could not produce a channel."""

    model_config = ConfigDict(frozen=True)

    reason: FailureReason
    message: str


StrategyOutcome = Union[StrategySuccess, StrategyFailure]


class StrategyAttempt(BaseModel):
    """One strategy invocation recorded by the orchestrator."""

    model_config = ConfigDict(frozen=True)

    strategy: str
    outcome: StrategyOutcome
    duration_seconds: float = Field(ge=0.0)


class ResolutionOutcome(BaseModel):
    """
    Final result of one orchestrated resolution call.

    Attributes
    ----------
    handle : str
        Normalized handle that was resolved.
    outcome : StrategyOutcome
        The winning success, or the terminal browser failure.
    attempts : list[StrategyAttempt]
        Every strategy invoked, in order.
    """

    model_config = ConfigDict(frozen=True)

    handle: str
    outcome: StrategyOutcome
    attempts: list[StrategyAttempt] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if a strategy produced a channel."""
        return isinstance(self.outcome, StrategySuccess)

    @property
    def channel(self) -> ResolvedChannel | None:
        """The resolved channel, or None on terminal failure."""
        if isinstance(self.outcome, StrategySuccess):
            return self.outcome.channel
        return None

    @property
    def attempted(self) -> list[str]:
        """Strategy names in the order they were invoked."""
        return [attempt.strategy for attempt in self.attempts]

    @property
    def error(self) -> str | None:
        """Terminal failure message, or None on success."""
        if isinstance(self.outcome, StrategyFailure):
            return self.outcome.message
        return None

    def unwrap(self) -> ResolvedChannel:
        """
        Return the resolved channel or raise.

        Returns
        -------
        ResolvedChannel
            The channel produced by the winning strategy.

        Raises
        ------
        ChannelResolutionError
            If every strategy failed.
        """
        if isinstance(self.outcome, StrategySuccess):
            return self.outcome.channel
        raise ChannelResolutionError(
            message=self.outcome.message,
            handle=self.handle,
            reason=self.outcome.reason.value,
            attempted=self.attempted,
        )
