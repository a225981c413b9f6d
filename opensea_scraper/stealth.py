"""
Stealth Module.

Makes the automated browser look like a regular Chrome session so the
target site's verification screen lets it through.
"""

import logging
from typing import Dict, Optional

from playwright.async_api import Page
from fake_useragent import UserAgent

logger = logging.getLogger(__name__)

STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
Object.defineProperty(navigator, 'languages', {
    get: () => ['en-US', 'en'],
});
window.chrome = window.chrome || { runtime: {} };
"""


class Stealth:
    """
    User agent and navigator overrides applied to every new page.

    Args:
        custom_user_agent: Use this user agent instead of a generated one.

    Example:
        >>> stealth = Stealth()
        >>> ua = stealth.get_user_agent()
        >>> await stealth.apply_to_page(page)
    """

    def __init__(self, custom_user_agent: Optional[str] = None):
        self._custom_ua = custom_user_agent
        self._ua_generator = None if custom_user_agent else UserAgent()

    @property
    def extra_headers(self) -> Dict[str, str]:
        return {
            "Accept-Language": "en-US,en;q=0.9",
            "Upgrade-Insecure-Requests": "1",
        }

    def get_user_agent(self) -> str:
        """Get a realistic Chrome user agent string."""
        if self._custom_ua:
            return self._custom_ua
        return self._ua_generator.chrome

    async def apply_to_page(self, page: Page) -> None:
        await page.add_init_script(STEALTH_SCRIPT)
        logger.debug("Stealth overrides applied to page")
