"""
Scraping Example.

Demonstrates the OpenSea scraper operations: floor price from listing
cards, the lowest price distribution, and the top collection rankings.
"""

import asyncio
import logging

from config import config, configure_logging
from opensea_scraper import ScrapeMode, floor_price, floor_price_many, floor_prices, rankings


configure_logging(config)
logger = logging.getLogger(__name__)


async def scrape_example():
    """
    Example: Look up a few collections on OpenSea.

    Demonstrates:
    - Floor price from the cheapest listing cards
    - Up to 32 lowest prices from embedded page state
    - Concurrent lookups in separate sessions
    - Two pages of rankings (top 200 collections)
    """
    mode = ScrapeMode(config.default_mode)

    price = await floor_price("boredapeyachtclub", mode)
    logger.info("Floor price: %s", price.to_dict() if price else "no ETH listing")

    prices = await floor_prices("boredapeyachtclub", mode)
    logger.info("Lowest %d prices: %s", len(prices or []), [p.amount for p in prices or []])

    many = await floor_price_many(["doodles-official", "azuki"], mode, concurrency=2)
    for slug, record in many.items():
        logger.info("  %s: %s", slug, record.amount if record else None)

    top = await rankings(2, mode)
    logger.info("Fetched %d collections", len(top))
    for item in top[:10]:
        logger.info("  #%d %s (%s)", item.rank, item.name, item.slug)


if __name__ == "__main__":
    asyncio.run(scrape_example())
