"""
Pytest fixtures for channel resolution unit tests.

Provides sample feed and page documents, an httpx response builder, and a
call-counting fake strategy for orchestrator tests. No live HTTP calls are
made anywhere in this package.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from tubelink.services.resolution.models import StrategyOutcome

CHANNEL_ID = "UC_x5XG1OV2P6uZZ5FSM9Ttw"

SAMPLE_FEED_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns:media="http://search.yahoo.com/mrss/" xmlns="http://www.w3.org/2005/Atom">
 <link rel="self" href="http://www.youtube.com/feeds/videos.xml?channel_id={CHANNEL_ID}"/>
 <id>yt:channel:{CHANNEL_ID}</id>
 <yt:channelId>{CHANNEL_ID}</yt:channelId>
 <title>Google for Developers</title>
 <link rel="alternate" href="https://www.youtube.com/channel/{CHANNEL_ID}"/>
 <author>
  <name>Google for Developers</name>
  <uri>https://www.youtube.com/channel/{CHANNEL_ID}</uri>
 </author>
 <published>2007-08-23T00:34:43+00:00</published>
 <entry>
  <id>yt:video:first111111</id>
  <yt:videoId>first111111</yt:videoId>
  <yt:channelId>{CHANNEL_ID}</yt:channelId>
  <title>First entry</title>
  <link rel="alternate" href="https://www.youtube.com/watch?v=first111111"/>
  <published>2024-05-02T16:00:00+00:00</published>
  <updated>2024-05-02T16:05:00+00:00</updated>
  <media:group>
   <media:title>First entry</media:title>
   <media:thumbnail url="https://i4.ytimg.com/vi/first111111/hqdefault.jpg" width="480" height="360"/>
   <media:community>
    <media:statistics views="99"/>
   </media:community>
  </media:group>
 </entry>
 <entry>
  <id>yt:video:second22222</id>
  <yt:videoId>second22222</yt:videoId>
  <yt:channelId>{CHANNEL_ID}</yt:channelId>
  <title>Second entry</title>
  <link rel="alternate" href="https://www.youtube.com/watch?v=second22222"/>
  <published>2024-05-01T16:00:00+00:00</published>
  <updated>2024-05-01T16:05:00+00:00</updated>
  <media:group>
   <media:title>Second entry</media:title>
   <media:thumbnail url="https://i4.ytimg.com/vi/second22222/hqdefault.jpg" width="480" height="360"/>
   <media:community>
    <media:statistics views="12345"/>
   </media:community>
  </media:group>
 </entry>
</feed>
"""

SAMPLE_CHANNEL_PAGE = f"""<!DOCTYPE html>
<html><head>
<title>Google for Developers - YouTube</title>
<meta name="title" content="Google for Developers">
<meta property="og:title" content="Google for Developers">
<meta property="og:url" content="https://www.youtube.com/channel/{CHANNEL_ID}">
<meta property="og:image" content="https://yt3.googleusercontent.com/og-image=s900">
</head><body>
<script>var ytInitialData = {{"header":{{"c4TabbedHeaderRenderer":{{"channelId":"{CHANNEL_ID}","avatar":{{"thumbnails":[{{"url":"https://yt3.googleusercontent.com/avatar=s48","width":48,"height":48}}]}},"subscriberCountText":{{"simpleText":"2.39M subscribers"}}}}}}}};</script>
</body></html>
"""


def make_http_response(status_code: int = 200, text: str = "") -> MagicMock:
    """Build a mock httpx response exposing ``status_code``, ``text`` and ``content``."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.content = text.encode("utf-8")
    return response


class FakeStrategy:
    """Strategy double returning a fixed outcome and counting calls."""

    def __init__(
        self,
        name: str,
        outcome: StrategyOutcome | None = None,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self._outcome = outcome
        self._error = error
        self.calls: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def resolve(self, handle: str) -> StrategyOutcome:
        self.calls.append(handle)
        if self._error is not None:
            raise self._error
        assert self._outcome is not None
        return self._outcome


@pytest.fixture
def sample_feed_xml() -> str:
    """Atom feed with two entries; the second carries 12345 views."""
    return SAMPLE_FEED_XML


@pytest.fixture
def sample_channel_page() -> str:
    """Channel page with meta tags and an embedded ytInitialData blob."""
    return SAMPLE_CHANNEL_PAGE


@pytest.fixture
def channel_id() -> str:
    return CHANNEL_ID


@pytest.fixture
def http_response():
    """Factory fixture for mock httpx responses."""

    def _make(status_code: int = 200, text: str = "") -> Any:
        return make_http_response(status_code, text)

    return _make


@pytest.fixture
def fake_strategy():
    """Factory fixture for call-counting strategy doubles."""
    return FakeStrategy
