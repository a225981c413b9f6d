"""
Scraping Operations.

Each operation opens its own browser session, waits out the
verification screen and runs one extraction.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Union

from config import ScraperConfig, config as default_config
from opensea_scraper.browser import ScrapeMode, open_page
from opensea_scraper.challenge import ChallengeGate
from opensea_scraper.collector import PaginatedCollector
from opensea_scraper.models import ListingItem, PriceRecord
from opensea_scraper.price_extractor import PriceExtractor
from opensea_scraper.urls import collection_url, rankings_url

logger = logging.getLogger(__name__)

Mode = Union[ScrapeMode, str]


def _gate(settings: ScraperConfig) -> ChallengeGate:
    return ChallengeGate(timeout_ms=settings.challenge_timeout_ms)


async def floor_price(
    slug: str,
    mode: Mode = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> Optional[PriceRecord]:
    """Lowest buy-now ETH price of a collection, or None if none is listed."""
    url = collection_url(slug, settings.base_url)
    return await floor_price_by_url(url, mode, settings)


async def floor_price_by_url(
    url: str,
    mode: Mode = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> Optional[PriceRecord]:
    """Like floor_price, for a caller-built listing URL."""
    async with open_page(mode, settings) as page:
        logger.info("Opening url: %s", url)
        await page.goto(url)
        await _gate(settings).await_clearance(page)
        return await PriceExtractor().extract_floor(page)


async def floor_prices(
    slug: str,
    mode: Mode = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> Optional[List[PriceRecord]]:
    """Up to 32 of the lowest listed ETH prices, read from embedded page state."""
    url = collection_url(slug, settings.base_url)
    return await floor_prices_by_url(url, mode, settings)


async def floor_prices_by_url(
    url: str,
    mode: Mode = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> Optional[List[PriceRecord]]:
    async with open_page(mode, settings) as page:
        logger.info("Opening url: %s", url)
        await page.goto(url)
        await _gate(settings).await_clearance(page)
        return await PriceExtractor().extract_floor_distribution(page)


async def rankings(
    n_pages: int = 1,
    mode: Mode = ScrapeMode.HEADLESS,
    settings: ScraperConfig = default_config,
) -> List[ListingItem]:
    """
    Collections from the rankings page, ordered by rank.

    Each page holds 100 collections. A failure to open a further page
    aborts the whole run.
    """
    collector = PaginatedCollector(
        step_px=settings.scroll_step_px,
        interval_ms=settings.scroll_interval_ms,
        max_ticks=settings.max_scroll_ticks,
        gate=_gate(settings),
    )
    async with open_page(mode, settings) as page:
        return await collector.collect(page, n_pages, rankings_url(settings.base_url))


async def floor_price_many(
    slugs: Iterable[str],
    mode: Mode = ScrapeMode.HEADLESS,
    concurrency: int = 3,
    settings: ScraperConfig = default_config,
) -> Dict[str, Optional[PriceRecord]]:
    """
    Floor prices for several collections, each in its own browser session.

    The first failing lookup's exception is re-raised to the caller after
    the remaining lookups are cancelled and their sessions released.

    Raises:
        ValueError: If concurrency is below 1.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    semaphore = asyncio.Semaphore(concurrency)
    slugs = list(slugs)

    async def lookup(slug: str) -> Optional[PriceRecord]:
        async with semaphore:
            return await floor_price(slug, mode, settings)

    tasks = [asyncio.ensure_future(lookup(slug)) for slug in slugs]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.warning(
            "Floor price lookups aborted, cancelled %d pending",
            sum(task.cancelled() for task in tasks),
        )
        raise
    return dict(zip(slugs, results))
