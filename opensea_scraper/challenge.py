"""Wait strategy for the anti-bot verification screen."""

import logging

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from opensea_scraper.exceptions import ChallengeTimeoutError

logger = logging.getLogger(__name__)

CHALLENGE_SELECTOR = ".cf-browser-verification"


class ChallengeGate:
    """Blocks until the interstitial verification element is gone."""

    def __init__(self, selector: str = CHALLENGE_SELECTOR, timeout_ms: int = 60000):
        self.selector = selector
        self.timeout_ms = timeout_ms

    async def await_clearance(self, page: Page) -> None:
        """Wait for the verification element to be hidden or detached."""
        logger.info("Waiting for browser verification to resolve")
        try:
            await page.wait_for_selector(
                self.selector, state="hidden", timeout=self.timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise ChallengeTimeoutError(
                f"Verification screen still present after {self.timeout_ms}ms"
            ) from e
        logger.debug("Verification cleared (%s)", self.selector)
