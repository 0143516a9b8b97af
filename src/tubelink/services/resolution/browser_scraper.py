"""
Browser Scraper: last-resort resolution strategy.

Renders the channel page in headless Chromium through Playwright and
reads metadata from the live DOM. This is the most expensive strategy and
the most tightly coupled to YouTube's page structure; it exists purely as
a safety net when the feed and static HTML strategies have failed.

Resource model
--------------
``browser_session()`` owns the Playwright driver, browser, context and
page. The driver and every object created before a failure are released
on all exit paths, including a failed launch.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any
from urllib.parse import urlparse

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from tubelink.config.settings import Settings
from tubelink.exceptions import BrowserLaunchError
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

INDICATOR_SELECTORS: tuple[str, ...] = (
    'meta[property="og:url"]',
    'link[rel="canonical"]',
    'meta[itemprop="channelId"]',
)
"""Elements whose presence signals that channel metadata has loaded."""

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

_DEV_CHROME_PATHS: dict[str, str] = {
    "win32": r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    "darwin": "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
}
_DEV_CHROME_PATH_DEFAULT = "/usr/bin/google-chrome"

_HTTP_NOT_FOUND = 404

# Runs in the page; mirrors the meta-tag fallbacks of the HTML strategy.
_EXTRACT_CHANNEL_INFO_JS = """() => {
    const getMetaContent = (selector) =>
        document.querySelector(selector)?.getAttribute("content") || null;
    const url =
        getMetaContent('meta[property="og:url"]') ||
        document.querySelector('link[rel="canonical"]')?.getAttribute("href") ||
        window.location.href;
    const title =
        getMetaContent('meta[property="og:title"]') ||
        getMetaContent('meta[name="title"]') ||
        document.title;
    const image =
        getMetaContent('meta[property="og:image"]') ||
        getMetaContent('meta[name="thumbnail"]');
    return { url, title, image };
}"""

SessionFactory = Callable[[Settings], AbstractAsyncContextManager[Page]]


def resolve_executable_path(settings: Settings, platform: str | None = None) -> str | None:
    """
    Pick the Chromium executable for the current environment.

    Parameters
    ----------
    settings : Settings
        ``browser_executable_path`` wins when set. Otherwise
        ``development_mode`` selects the platform's stock Chrome install.
    platform : str | None, optional
        Override for ``sys.platform`` (default: None).

    Returns
    -------
    str | None
        Executable path, or None to use Playwright's bundled Chromium.
    """
    if settings.browser_executable_path is not None:
        return str(settings.browser_executable_path)
    if settings.development_mode:
        return _DEV_CHROME_PATHS.get(platform or sys.platform, _DEV_CHROME_PATH_DEFAULT)
    return None


async def _close_quietly(resource: Any, label: str) -> None:
    try:
        await resource.close()
    except Exception as e:
        logger.warning("Failed to close browser %s: %s: %s", label, type(e).__name__, e)


@asynccontextmanager
async def browser_session(settings: Settings) -> AsyncIterator[Page]:
    """
    Launch an isolated headless browser and yield a configured page.

    Parameters
    ----------
    settings : Settings
        Supplies executable, headless flag, user agent and viewport.

    Yields
    ------
    Page
        A fresh page with the configured user agent and viewport.

    Raises
    ------
    BrowserLaunchError
        If the driver, browser, context or page cannot be created. Any
        part already created is released before the error propagates.
    """
    try:
        playwright = await async_playwright().start()
    except Exception as e:
        raise BrowserLaunchError(
            f"Failed to start browser driver: {type(e).__name__}: {e}",
            original_error=e,
        ) from e

    browser = None
    context = None
    try:
        try:
            browser = await playwright.chromium.launch(
                headless=settings.browser_headless,
                executable_path=resolve_executable_path(settings),
                args=_LAUNCH_ARGS,
            )
            context = await browser.new_context(
                user_agent=settings.user_agent,
                viewport={
                    "width": settings.browser_viewport_width,
                    "height": settings.browser_viewport_height,
                },
            )
            page = await context.new_page()
        except Exception as e:
            raise BrowserLaunchError(
                f"Failed to launch browser: {type(e).__name__}: {e}",
                original_error=e,
            ) from e

        yield page
    finally:
        if context is not None:
            await _close_quietly(context, "context")
        if browser is not None:
            await _close_quietly(browser, "process")
        try:
            await playwright.stop()
        except Exception as e:
            logger.warning("Failed to stop browser driver: %s: %s", type(e).__name__, e)


async def wait_for_any_indicator(page: Page, timeout_ms: float) -> str | None:
    """
    Race the indicator waits and return the first selector that appears.

    Parameters
    ----------
    page : Page
        The navigated page.
    timeout_ms : float
        Per-selector wait bound in milliseconds.

    Returns
    -------
    str | None
        The winning selector, or None if none appeared within the bound.
        Waits still running when a winner is found are cancelled.
    """
    tasks = {
        asyncio.ensure_future(
            page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
        ): selector
        for selector in INDICATOR_SELECTORS
    }
    pending: set[asyncio.Future[Any]] = set(tasks)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if task.exception() is None:
                    return tasks[task]
        return None
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _channel_id_from_rendered_url(url: str) -> str | None:
    channel_id = channel_id_from_url(url)
    if channel_id is None:
        path = urlparse(url).path.rstrip("/")
        channel_id = path.split("/")[-1] if path else None
    return channel_id if is_channel_id(channel_id) else None


class BrowserScraper:
    """
    Resolve a handle by rendering its channel page in a headless browser.

    Parameters
    ----------
    settings : Settings
        Supplies URLs, timeouts and browser options.
    session_factory : SessionFactory | None, optional
        Async context manager factory yielding a page. Defaults to
        ``browser_session``; tests inject fakes here.
    """

    name = "browser"

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._settings = settings
        self._session_factory = session_factory or browser_session

    async def resolve(self, handle: str) -> StrategyOutcome:
        """
        Render ``/@handle`` and extract channel metadata from the DOM.

        Parameters
        ----------
        handle : str
            Handle without its ``@`` marker.

        Returns
        -------
        StrategyOutcome
            Success, or a failure tagged ``NOT_FOUND``, ``TIMEOUT``,
            ``ID_NOT_FOUND``, ``PARSE_ERROR``, ``FETCH_ERROR`` or
            ``BROWSER_LAUNCH_ERROR``.
        """
        try:
            async with self._session_factory(self._settings) as page:
                return await self._scrape(page, handle)
        except BrowserLaunchError as e:
            logger.error("Browser launch failed for %s: %s", handle, e.message)
            return StrategyFailure(
                reason=FailureReason.BROWSER_LAUNCH_ERROR, message=e.message
            )
        except PlaywrightTimeoutError as e:
            logger.warning("Browser navigation timed out for %s: %s", handle, e)
            return StrategyFailure(
                reason=FailureReason.TIMEOUT,
                message=f"Navigation timed out for {handle}",
            )
        except PlaywrightError as e:
            logger.warning("Browser error for %s: %s", handle, e)
            return StrategyFailure(
                reason=FailureReason.FETCH_ERROR,
                message=f"Browser error: {e.message}",
            )

    async def _scrape(self, page: Page, handle: str) -> StrategyOutcome:
        url = self._settings.channel_page_url(handle)
        logger.info("Navigating to: %s", url)

        response = await page.goto(
            url,
            wait_until=self._settings.browser_wait_until,  # type: ignore[arg-type]
            timeout=self._settings.browser_navigation_timeout * 1000,
        )
        if response is not None and response.status == _HTTP_NOT_FOUND:
            return StrategyFailure(
                reason=FailureReason.NOT_FOUND,
                message=f"Channel not found: {handle}",
            )

        indicator = await wait_for_any_indicator(
            page, self._settings.browser_selector_timeout * 1000
        )
        if indicator is None:
            return await self._resolve_from_current_url(page, handle)

        logger.debug("Indicator %s appeared for %s", indicator, handle)
        info = await page.evaluate(_EXTRACT_CHANNEL_INFO_JS) or {}
        channel_url = info.get("url")
        if not channel_url:
            return StrategyFailure(
                reason=FailureReason.PARSE_ERROR,
                message="Could not find channel URL",
            )

        channel_id = _channel_id_from_rendered_url(channel_url)
        if channel_id is None:
            return StrategyFailure(
                reason=FailureReason.ID_NOT_FOUND,
                message=f"No channel ID in rendered URL: {channel_url}",
            )

        title = info.get("title") or handle
        logger.info("Successfully scraped channel info for %s: %s", handle, channel_id)
        return StrategySuccess(
            channel=ResolvedChannel(
                channel_id=channel_id,
                author=title,
                uri=channel_url,
                title=title,
                thumbnail=info.get("image") or None,
                view_count=0,
                source=ResolutionSource.BROWSER,
            )
        )

    async def _resolve_from_current_url(self, page: Page, handle: str) -> StrategyOutcome:
        current_url = page.url
        logger.info("Timeout waiting for indicators for %s, checking URL %s", handle, current_url)

        channel_id = channel_id_from_url(current_url)
        if not is_channel_id(channel_id):
            return StrategyFailure(
                reason=FailureReason.TIMEOUT,
                message=f"Timed out waiting for channel metadata for {handle}",
            )

        title = await page.title() or handle
        return StrategySuccess(
            channel=ResolvedChannel(
                channel_id=channel_id,
                author=title,
                uri=current_url,
                title=title,
                view_count=0,
                source=ResolutionSource.BROWSER,
            )
        )
