"""
Core Browser Management Module.

Provides the Browser class wrapping a Playwright Chromium instance
and the scrape modes that decide how a session is run and released.
"""

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from playwright.async_api import async_playwright, Browser as PWBrowser, Page, BrowserContext

from config import ScraperConfig, config as default_config
from opensea_scraper.stealth import Stealth

logger = logging.getLogger(__name__)


class ScrapeMode(str, Enum):
    """
    How a scraping session runs.

    HEADLESS runs without a visible window and closes the browser when
    the operation ends. DEBUG shows the window and leaves it open so the
    final page state can be inspected.
    """

    HEADLESS = "headless"
    DEBUG = "debug"

    @property
    def headless(self) -> bool:
        return self is ScrapeMode.HEADLESS

    @property
    def auto_close(self) -> bool:
        return self is ScrapeMode.HEADLESS


class Browser:
    """
    Browser controller for scraping sessions.

    Args:
        headless: Run browser in headless mode.
        stealth: Optional Stealth instance applied to new pages.
        timeout: Default action timeout in milliseconds.

    Example:
        >>> async with Browser(headless=True) as browser:
        ...     page = await browser.new_page()
        ...     await page.goto("https://opensea.io")
    """

    def __init__(
        self,
        headless: bool = True,
        stealth: Optional[Stealth] = None,
        timeout: int = 30000,
    ):
        self.headless = headless
        self.stealth = stealth
        self.timeout = timeout
        self._playwright = None
        self._browser: Optional[PWBrowser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self):
        """Launch Chromium for a scraping session."""
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Release the session, whether or not the scrape succeeded."""
        await self.close()

    async def launch(self) -> None:
        """
        Launch the Chromium instance.

        The Playwright driver is stopped again if Chromium fails to start.
        """
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--start-maximized"],
            )
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Browser launched (headless=%s)", self.headless)

    async def new_page(
        self,
        viewport: Optional[Dict[str, int]] = None,
        locale: str = "en-US",
    ) -> Page:
        """
        Create a page in a fresh context, ready to open an OpenSea URL.

        With stealth configured the context carries the generated user
        agent and headers, and the page hides the automation markers
        before any site script runs.

        Args:
            viewport: Custom viewport size {'width': int, 'height': int}.
            locale: Browser locale setting.

        Returns:
            Configured Playwright Page instance.
        """
        if not self._browser:
            raise RuntimeError("Browser not launched. Call launch() first.")

        context_options: Dict[str, Any] = {
            "viewport": viewport or {"width": 1920, "height": 1080},
            "locale": locale,
        }
        if self.stealth:
            context_options["user_agent"] = self.stealth.get_user_agent()
            context_options["extra_http_headers"] = self.stealth.extra_headers

        context = await self._browser.new_context(**context_options)
        self._contexts.append(context)

        page = await context.new_page()
        page.set_default_timeout(self.timeout)

        if self.stealth:
            await self.stealth.apply_to_page(page)

        logger.debug("New page created with viewport %s", context_options["viewport"])
        return page

    async def close(self) -> None:
        """Close all contexts and the browser."""
        for context in self._contexts:
            await context.close()
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Browser closed")

    @property
    def is_running(self) -> bool:
        """Check if browser is currently running."""
        return self._browser is not None and self._browser.is_connected()


@asynccontextmanager
async def open_page(
    mode: Union[ScrapeMode, str] = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> AsyncIterator[Page]:
    """
    Launch a browser for one operation and yield its page.

    The browser is closed on every exit path, except in debug mode
    where it is left open on purpose.
    """
    mode = ScrapeMode(mode)
    stealth = Stealth(settings.custom_user_agent) if settings.enable_stealth else None
    browser = Browser(headless=mode.headless, stealth=stealth, timeout=settings.timeout_ms)
    await browser.launch()
    try:
        yield await browser.new_page()
    finally:
        if mode.auto_close:
            await browser.close()
        else:
            logger.info("Debug mode: leaving browser open for inspection")
