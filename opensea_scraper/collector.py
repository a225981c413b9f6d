"""
Rankings Collector Module.

Enumerates the lazily rendered rankings list by scrolling each page
to the bottom and following the "next page" control, accumulating
every row seen along the way.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from opensea_scraper.challenge import ChallengeGate
from opensea_scraper.exceptions import NextPageNotFoundError, ScrapeTimeoutError
from opensea_scraper.models import ListingItem
from opensea_scraper.urls import rankings_url

logger = logging.getLogger(__name__)

NEXT_PAGE_SELECTOR = "[value=arrow_forward_ios]"
ITEM_IMAGE_SELECTOR = ".Image--image"

# Installed once per page; exposes the row reader used by every scroll tick.
COLLECTOR_SCRIPT = """
window.__openseaScraper = {
    fetchCollections: function () {
        const rows = document.querySelectorAll('a[href*="/collection/"]');
        return Array.from(rows).map(row => {
            const href = row.getAttribute("href") || "";
            const slug = href.split("?")[0].split("/").filter(Boolean).pop() || "";
            const rankNode = row.querySelector('[data-testid="rank"]') || row.querySelector("span");
            const nameNode = row.querySelector('[data-testid="name"]') || row.querySelector("div[title]");
            const image = row.querySelector("img");
            const rank = rankNode ? parseInt(rankNode.textContent.replace(/[^0-9]/g, ""), 10) : 0;
            return {
                key: slug,
                slug: slug,
                rank: Number.isNaN(rank) ? 0 : rank,
                name: nameNode ? (nameNode.getAttribute("title") || nameNode.textContent || "").trim() : "",
                thumbnail: image ? image.src : null,
            };
        });
    },
};
"""

SCROLL_TICK_SCRIPT = """
(step) => {
    window.scrollBy(0, step);
    return {
        items: window.__openseaScraper.fetchCollections(),
        scrollTop: document.documentElement.scrollTop,
    };
}
"""


class ScrollState(Enum):
    SCROLLING = "scrolling"
    SETTLED = "settled"
    TIMED_OUT = "timed_out"


class CollectionDict:
    """Rows seen during one collection run, unique by row key."""

    def __init__(self):
        self._items: Dict[str, ListingItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def get(self, key: str) -> Optional[ListingItem]:
        return self._items.get(key)

    def merge(self, rows: Iterable[Dict[str, Any]]) -> int:
        """
        Merge rows read from the page.

        A row seen again replaces the stored one unless that would swap a
        complete entry for a partially rendered one.

        Returns:
            Number of keys that were not seen before.
        """
        added = 0
        for row in rows:
            key = row.get("key") or row.get("slug")
            if not key:
                continue
            try:
                item = ListingItem.from_dict(row)
            except (TypeError, ValueError) as e:
                logger.debug("Skipping malformed row %s: %s", key, e)
                continue

            existing = self._items.get(key)
            if existing is None:
                added += 1
            elif existing.is_valid and not item.is_valid:
                continue
            self._items[key] = item
        return added

    def ranked(self) -> List[ListingItem]:
        """Valid rows ordered by rank."""
        valid = [item for item in self._items.values() if item.is_valid]
        return sorted(valid, key=lambda item: item.rank)


class PaginatedCollector:
    """
    Scroll-and-collect driver for the rankings page.

    Args:
        step_px: Pixels scrolled per tick.
        interval_ms: Delay before each tick.
        max_ticks: Tick ceiling per page; reaching it stops scrolling.
        sleep: Awaitable delay function, replaceable in tests.
        gate: Verification screen wait.

    Example:
        >>> collector = PaginatedCollector()
        >>> items = await collector.collect(page, n_pages=2)
    """

    def __init__(
        self,
        step_px: int = 50,
        interval_ms: int = 5,
        max_ticks: int = 5000,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        gate: Optional[ChallengeGate] = None,
    ):
        self.step_px = step_px
        self.interval_ms = interval_ms
        self.max_ticks = max_ticks
        self.gate = gate or ChallengeGate()
        self._sleep = sleep

    async def collect(
        self,
        page: Page,
        n_pages: int = 1,
        url: Optional[str] = None,
    ) -> List[ListingItem]:
        """
        Collect ranking rows from the first n_pages pages.

        Raises:
            ValueError: If n_pages is below 1.
            ChallengeTimeoutError: If the verification screen never clears.
            NextPageNotFoundError: If a further page cannot be opened.
        """
        if n_pages < 1:
            raise ValueError(f"n_pages must be at least 1, got {n_pages}")

        url = url or rankings_url()
        logger.info("Fetching %d pages (= top %d collections)", n_pages, n_pages * 100)
        logger.info("Opening url: %s", url)
        await page.goto(url)
        await self.gate.await_clearance(page)

        await page.add_script_tag(content=COLLECTOR_SCRIPT)

        collected = CollectionDict()
        await self.scroll_to_bottom(page, collected)

        for page_number in range(2, n_pages + 1):
            await self._open_next_page(page)
            logger.info(
                "Scrolling page %d, collections fetched so far: %d",
                page_number,
                len(collected),
            )
            await self.scroll_to_bottom(page, collected)

        items = collected.ranked()
        logger.info(
            "Done. Total collections fetched: %d (%d valid)", len(collected), len(items)
        )
        return items

    async def scroll_to_bottom(self, page: Page, collected: CollectionDict) -> ScrollState:
        """Scroll tick by tick until the scroll offset stops changing."""
        state = ScrollState.SCROLLING
        scroll_top = -1
        ticks = 0

        while state is ScrollState.SCROLLING:
            if ticks >= self.max_ticks:
                state = ScrollState.TIMED_OUT
                break

            await self._sleep(self.interval_ms / 1000)
            result = await page.evaluate(SCROLL_TICK_SCRIPT, self.step_px)
            ticks += 1

            added = collected.merge(result.get("items") or [])
            current = result.get("scrollTop")
            logger.debug(
                "Tick %d: scrollTop=%s, new rows=%d, total=%d",
                ticks, current, added, len(collected),
            )

            if current == scroll_top:
                state = ScrollState.SETTLED
            else:
                scroll_top = current

        if state is ScrollState.TIMED_OUT:
            logger.warning(
                "Scrolling stopped after %d ticks without reaching the bottom", ticks
            )
        return state

    async def _open_next_page(self, page: Page) -> None:
        try:
            await page.click(NEXT_PAGE_SELECTOR)
        except PlaywrightError as e:
            raise NextPageNotFoundError(
                f"Could not click next page control {NEXT_PAGE_SELECTOR!r}"
            ) from e

        try:
            await page.wait_for_selector(ITEM_IMAGE_SELECTOR)
        except PlaywrightTimeoutError as e:
            raise ScrapeTimeoutError("No collection images appeared on the next page") from e
