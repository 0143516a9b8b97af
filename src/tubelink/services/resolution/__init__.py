"""
YouTube channel handle resolution services.

Turns a human-readable handle into a stable channel ID plus metadata by
trying three strategies in order of cost, stopping at the first success.

Modules
-------
feed_fetcher
    Atom video feed lookup (cheapest)
html_extractor
    Static channel-page pattern matching
browser_scraper
    Headless Chromium rendering through Playwright (last resort)
orchestrator
    Strategy sequencing and terminal failure reporting
models
    Result records and the shared failure taxonomy
"""

from tubelink.services.resolution.browser_scraper import BrowserScraper
from tubelink.services.resolution.feed_fetcher import FeedFetcher
from tubelink.services.resolution.html_extractor import HtmlExtractor
from tubelink.services.resolution.models import (
    FailureReason,
    ResolutionOutcome,
    ResolutionSource,
    ResolvedChannel,
    StrategyFailure,
    StrategySuccess,
    normalize_handle,
)
from tubelink.services.resolution.orchestrator import (
    ChannelResolver,
    build_resolver,
    resolve_channel,
)

__all__ = [
    "BrowserScraper",
    "ChannelResolver",
    "FailureReason",
    "FeedFetcher",
    "HtmlExtractor",
    "ResolutionOutcome",
    "ResolutionSource",
    "ResolvedChannel",
    "StrategyFailure",
    "StrategySuccess",
    "build_resolver",
    "normalize_handle",
    "resolve_channel",
]
