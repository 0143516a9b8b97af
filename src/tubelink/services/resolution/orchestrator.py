"""
Resolution orchestrator for YouTube channel handles.

Runs the feed, HTML and browser strategies strictly in sequence and stops at
the first success. Feed and HTML failures always escalate to the next
strategy; a browser failure is terminal.

Classes
-------
ResolutionStrategy
    Structural type every strategy satisfies.
ChannelResolver
    Sequences injected strategies and records every attempt.

Functions
---------
build_resolver
    Wire the default strategy chain from ``Settings``.
resolve_channel
    One-shot convenience wrapper around ``ChannelResolver.resolve``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Protocol

from tubelink.config.settings import Settings, get_settings
from tubelink.services.resolution.browser_scraper import BrowserScraper
from tubelink.services.resolution.feed_fetcher import FeedFetcher
from tubelink.services.resolution.html_extractor import HtmlExtractor
from tubelink.services.resolution.models import (
    FailureReason,
    ResolutionOutcome,
    StrategyAttempt,
    StrategyFailure,
    StrategyOutcome,
    StrategySuccess,
    normalize_handle,
)

logger = logging.getLogger(__name__)

TERMINAL_ERROR_PREFIX = "Failed to scrape channel info"

# Reason recorded when a strategy raises instead of returning a failure
_DEFAULT_FAILURE_REASONS: dict[str, FailureReason] = {
    FeedFetcher.name: FailureReason.FETCH_ERROR,
    HtmlExtractor.name: FailureReason.FETCH_ERROR,
    BrowserScraper.name: FailureReason.BROWSER_LAUNCH_ERROR,
}


class ResolutionStrategy(Protocol):
    """A single way of turning a normalized handle into a channel."""

    name: str

    async def resolve(self, handle: str) -> StrategyOutcome: ...


class ChannelResolver:
    """
    Sequence resolution strategies for a channel handle.

    Parameters
    ----------
    feed : ResolutionStrategy
        First strategy tried.
    html : ResolutionStrategy
        Tried only if ``feed`` fails.
    browser : ResolutionStrategy
        Tried only if ``html`` fails. Its failure is terminal.

    Examples
    --------
    >>> resolver = build_resolver(get_settings())
    >>> outcome = await resolver.resolve("@GoogleDevelopers")
    >>> outcome.channel.channel_id if outcome.success else outcome.error
    'UC_x5XG1OV2P6uZZ5FSM9Ttw'
    """

    def __init__(
        self,
        feed: ResolutionStrategy,
        html: ResolutionStrategy,
        browser: ResolutionStrategy,
    ) -> None:
        self._strategies: tuple[ResolutionStrategy, ...] = (feed, html, browser)

    @property
    def strategies(self) -> Sequence[ResolutionStrategy]:
        return self._strategies

    async def resolve(self, handle: str) -> ResolutionOutcome:
        """
        Resolve a raw handle to a channel.

        Parameters
        ----------
        handle : str
            User-supplied handle, with or without a leading ``@``.

        Returns
        -------
        ResolutionOutcome
            The first success, or the terminal browser failure with its
            message prefixed by ``"Failed to scrape channel info: "``.

        Raises
        ------
        InvalidHandleError
            If the handle is empty after normalization. No strategy runs.
        """
        normalized = normalize_handle(handle)
        attempts: list[StrategyAttempt] = []
        outcome: StrategyOutcome | None = None

        for strategy in self._strategies:
            started = time.perf_counter()
            outcome = await self._run_strategy(strategy, normalized)
            attempts.append(
                StrategyAttempt(
                    strategy=strategy.name,
                    outcome=outcome,
                    duration_seconds=max(time.perf_counter() - started, 0.0),
                )
            )

            if isinstance(outcome, StrategySuccess):
                logger.info(
                    "Resolved %s to %s via %s strategy",
                    normalized,
                    outcome.channel.channel_id,
                    strategy.name,
                )
                return ResolutionOutcome(handle=normalized, outcome=outcome, attempts=attempts)

            logger.info(
                "%s strategy failed for %s (%s): %s",
                strategy.name.capitalize(),
                normalized,
                outcome.reason.value,
                outcome.message,
            )

        assert isinstance(outcome, StrategyFailure)
        terminal = StrategyFailure(
            reason=outcome.reason,
            message=f"{TERMINAL_ERROR_PREFIX}: {outcome.message}",
        )
        logger.error("Error resolving channel ID for %s: %s", normalized, terminal.message)
        return ResolutionOutcome(handle=normalized, outcome=terminal, attempts=attempts)

    async def _run_strategy(
        self, strategy: ResolutionStrategy, handle: str
    ) -> StrategyOutcome:
        try:
            return await strategy.resolve(handle)
        except Exception as e:
            reason = _DEFAULT_FAILURE_REASONS.get(strategy.name, FailureReason.FETCH_ERROR)
            logger.exception(
                "Unexpected error in %s strategy for %s", strategy.name, handle
            )
            return StrategyFailure(reason=reason, message=f"{type(e).__name__}: {e}")


def build_resolver(settings: Settings) -> ChannelResolver:
    """Wire the default feed, HTML and browser strategies."""
    return ChannelResolver(
        feed=FeedFetcher(settings),
        html=HtmlExtractor(settings),
        browser=BrowserScraper(settings),
    )


async def resolve_channel(handle: str, settings: Settings | None = None) -> ResolutionOutcome:
    """
    Resolve one handle with the default strategy chain.

    Parameters
    ----------
    handle : str
        User-supplied handle.
    settings : Settings | None, optional
        Settings to use (default: the cached application settings).

    Returns
    -------
    ResolutionOutcome
        See ``ChannelResolver.resolve``.
    """
    return await build_resolver(settings or get_settings()).resolve(handle)
