"""Browser factory for launching and tearing down Playwright browsers.

This module provides the BrowserFactory class that starts Playwright, launches
a browser with container-aware sandbox flags and opens the single browser
context an extraction runs in. The resulting BrowserSession is closed exactly
once, whichever way the extraction ends.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from ..config import BrowserSettings

logger = logging.getLogger(__name__)

# Chrome cannot use its setuid sandbox inside most containers
CONTAINER_SANDBOX_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']


class BrowserEngineType:
    """Supported browser engine types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


def running_in_container() -> bool:
    """Detect whether the process runs inside a Docker-style container."""
    if Path("/.dockerenv").exists():
        return True
    try:
        return "docker" in Path("/proc/self/cgroup").read_text()
    except OSError:
        return False


class BrowserSession:
    """Browser process, browser and context owned by one extraction."""

    def __init__(self, playwright: Playwright, browser: Browser, context: BrowserContext):
        """Initialize browser session.

        Args:
            playwright: Started Playwright driver
            browser: Launched browser
            context: Browser context all pages of the extraction live in
        """
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self._closed = False

    async def new_page(self) -> Page:
        """Open a new page (tab) in the session's context."""
        return await self.context.new_page()

    @property
    def pages(self) -> List[Page]:
        """All pages currently open in the session's context."""
        return list(self.context.pages)

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call more than once.

        Teardown errors are logged, not raised.
        """
        if self._closed:
            return
        self._closed = True

        try:
            await self.browser.close()
            logger.debug("Browser closed")
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")

    def __repr__(self) -> str:
        return f"BrowserSession(pages={len(self.pages)}, closed={self._closed})"


class BrowserFactory:
    """Factory for launching browser sessions from BrowserSettings."""

    def __init__(self, settings: Optional[BrowserSettings] = None):
        """Initialize browser factory.

        Args:
            settings: Browser launch settings, defaults when omitted
        """
        self.settings = settings or BrowserSettings()

    def sandbox_disabled(self) -> bool:
        """Whether the Chrome sandbox must be turned off for this launch."""
        if self.settings.sandbox is not None:
            return not self.settings.sandbox
        return running_in_container()

    def launch_args(self) -> List[str]:
        """Command-line flags passed to the browser."""
        if self.sandbox_disabled():
            return list(CONTAINER_SANDBOX_ARGS)
        return []

    def to_launch_options(self) -> dict:
        """Convert settings to Playwright launch options."""
        return {
            'headless': self.settings.headless,
            'slow_mo': self.settings.slow_mo,
            'args': self.launch_args(),
        }

    async def start(self) -> BrowserSession:
        """Start Playwright, launch the browser and open a context.

        Returns:
            Open BrowserSession; the caller owns it and must close it

        Raises:
            Exception: Whatever Playwright raised; partial resources are released
        """
        logger.debug(f"Starting browser (engine={self.settings.engine}, headless={self.settings.headless})")
        if self.sandbox_disabled():
            logger.debug("Launching with the Chrome sandbox disabled")

        playwright = await async_playwright().start()
        browser = None

        try:
            if self.settings.engine == BrowserEngineType.FIREFOX:
                browser_type = playwright.firefox
            elif self.settings.engine == BrowserEngineType.WEBKIT:
                browser_type = playwright.webkit
            else:
                browser_type = playwright.chromium

            browser = await browser_type.launch(**self.to_launch_options())
            context = await browser.new_context()

            if self.settings.default_timeout_ms is not None:
                context.set_default_timeout(self.settings.default_timeout_ms)

        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            if browser is not None:
                await browser.close()
            await playwright.stop()
            raise

        return BrowserSession(playwright, browser, context)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[BrowserSession, None]:
        """Context manager for a browser session.

        Yields:
            Open BrowserSession, closed when the block exits for any reason
        """
        browser_session = await self.start()
        try:
            yield browser_session
        finally:
            await browser_session.close()
            logger.debug("Browser session closed")

    def __repr__(self) -> str:
        return (
            f"BrowserFactory(engine={self.settings.engine}, "
            f"headless={self.settings.headless}, "
            f"sandbox_disabled={self.sandbox_disabled()})"
        )
