"""
Unit tests for the Atom feed resolution strategy.

All tests mock httpx responses. No live HTTP calls are made.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tubelink.config.settings import Settings
from tubelink.services.resolution.feed_fetcher import FeedFetcher, parse_feed
from tubelink.services.resolution.models import (
    FailureReason,
    ResolutionSource,
    StrategyFailure,
    StrategySuccess,
)

FEED_WITHOUT_STATISTICS = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns:media="http://search.yahoo.com/mrss/" xmlns="http://www.w3.org/2005/Atom">
 <title>Quiet Channel</title>
 <author>
  <name>Quiet Channel</name>
  <uri>https://www.youtube.com/channel/UCuAXFkgsw1L7xaCfnd5JJOw</uri>
 </author>
 <entry><yt:videoId>aaaaaaaaaaa</yt:videoId><title>A</title></entry>
 <entry><yt:videoId>bbbbbbbbbbb</yt:videoId><title>B</title></entry>
</feed>
"""

FEED_MISSING_AUTHOR = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
 <title>No Author</title>
</feed>
"""

FEED_BAD_URI = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
 <title>Legacy</title>
 <author>
  <name>Legacy</name>
  <uri>https://www.youtube.com/user/legacyname</uri>
 </author>
</feed>
"""


class TestParseFeed:
    """Tests for parse_feed."""

    def test_builds_channel_from_feed_and_second_entry(
        self, sample_feed_xml: str, channel_id: str
    ) -> None:
        outcome = parse_feed(sample_feed_xml, "GoogleDevelopers")

        assert isinstance(outcome, StrategySuccess)
        channel = outcome.channel
        assert channel.channel_id == channel_id
        assert channel.author == "Google for Developers"
        assert channel.title == "Google for Developers"
        assert channel.uri == f"https://www.youtube.com/channel/{channel_id}"
        assert channel.view_count == 12345
        assert channel.last_video_id == "second22222"
        assert channel.last_video_date == "2024-05-01T16:00:00+00:00"
        assert channel.thumbnail == "https://i4.ytimg.com/vi/second22222/hqdefault.jpg"
        assert channel.source == ResolutionSource.FEED

    def test_entry_index_zero_reads_first_entry(self, sample_feed_xml: str) -> None:
        outcome = parse_feed(sample_feed_xml, "GoogleDevelopers", entry_index=0)

        assert isinstance(outcome, StrategySuccess)
        assert outcome.channel.last_video_id == "first111111"
        assert outcome.channel.view_count == 99

    def test_absent_views_default_to_zero(self) -> None:
        outcome = parse_feed(FEED_WITHOUT_STATISTICS, "quiet")

        assert isinstance(outcome, StrategySuccess)
        assert outcome.channel.view_count == 0
        assert outcome.channel.thumbnail is None
        assert outcome.channel.last_video_id == "bbbbbbbbbbb"

    @pytest.mark.parametrize("views", ["abc", "", "-5"])
    def test_unparseable_views_default_to_zero(
        self, sample_feed_xml: str, views: str
    ) -> None:
        feed = sample_feed_xml.replace('views="12345"', f'views="{views}"')

        outcome = parse_feed(feed, "GoogleDevelopers")

        assert isinstance(outcome, StrategySuccess)
        assert outcome.channel.view_count == 0

    def test_out_of_range_entry_index_has_no_latest_video(self, sample_feed_xml: str) -> None:
        outcome = parse_feed(sample_feed_xml, "GoogleDevelopers", entry_index=5)

        assert isinstance(outcome, StrategySuccess)
        assert outcome.channel.last_video_id is None
        assert outcome.channel.view_count == 0

    def test_missing_author_is_parse_error(self) -> None:
        outcome = parse_feed(FEED_MISSING_AUTHOR, "noauthor")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.PARSE_ERROR
        assert "author" in outcome.message

    def test_non_channel_uri_is_parse_error(self) -> None:
        outcome = parse_feed(FEED_BAD_URI, "legacy")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.PARSE_ERROR

    def test_path_shaped_body_is_not_opened(
        self, tmp_path: Path, sample_feed_xml: str
    ) -> None:
        feed_file = tmp_path / "feed.xml"
        feed_file.write_text(sample_feed_xml, encoding="utf-8")

        outcome = parse_feed(str(feed_file), "GoogleDevelopers")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.PARSE_ERROR

    def test_accepts_bytes(self, sample_feed_xml: str, channel_id: str) -> None:
        outcome = parse_feed(sample_feed_xml.encode("utf-8"), "GoogleDevelopers")

        assert isinstance(outcome, StrategySuccess)
        assert outcome.channel.channel_id == channel_id

    def test_garbage_is_parse_error(self) -> None:
        outcome = parse_feed("this is not xml", "garbage")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.PARSE_ERROR


class TestFeedFetcher:
    """Tests for FeedFetcher.resolve."""

    pytestmark = pytest.mark.asyncio

    async def test_requests_feed_for_handle(
        self, test_settings: Settings, sample_feed_xml: str, http_response
    ) -> None:
        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.return_value = http_response(200, sample_feed_xml)

            outcome = await FeedFetcher(test_settings).resolve("GoogleDevelopers")

        assert isinstance(outcome, StrategySuccess)
        mock_get.assert_awaited_once()
        args, kwargs = mock_get.call_args
        assert args[0] == "https://www.youtube.com/feeds/videos.xml"
        assert kwargs["params"] == {"user": "GoogleDevelopers"}
        assert kwargs["timeout"] == test_settings.request_timeout
        assert kwargs["headers"]["User-Agent"] == test_settings.user_agent

    async def test_404_is_not_found(self, test_settings: Settings, http_response) -> None:
        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.return_value = http_response(404)

            outcome = await FeedFetcher(test_settings).resolve("missing")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.NOT_FOUND
        assert outcome.message == "Channel not found: missing"

    async def test_server_error_is_fetch_error(
        self, test_settings: Settings, http_response
    ) -> None:
        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.return_value = http_response(500)

            outcome = await FeedFetcher(test_settings).resolve("broken")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.FETCH_ERROR
        assert outcome.message == "Failed to fetch feed: 500"

    async def test_timeout_is_fetch_error(self, test_settings: Settings) -> None:
        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.side_effect = httpx.ReadTimeout("timed out")

            outcome = await FeedFetcher(test_settings).resolve("slow")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.FETCH_ERROR

    async def test_connection_error_is_fetch_error(self, test_settings: Settings) -> None:
        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.side_effect = httpx.ConnectError("refused")

            outcome = await FeedFetcher(test_settings).resolve("offline")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.FETCH_ERROR
        assert "ConnectError" in outcome.message

    async def test_body_naming_a_local_file_is_parse_error(
        self, test_settings: Settings, tmp_path: Path, sample_feed_xml: str, http_response
    ) -> None:
        feed_file = tmp_path / "feed.xml"
        feed_file.write_text(sample_feed_xml, encoding="utf-8")

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock
        ) as mock_get:
            mock_get.return_value = http_response(200, str(feed_file))

            outcome = await FeedFetcher(test_settings).resolve("GoogleDevelopers")

        assert isinstance(outcome, StrategyFailure)
        assert outcome.reason == FailureReason.PARSE_ERROR
