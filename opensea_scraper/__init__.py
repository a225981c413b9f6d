"""
OpenSea Scraper.

A Playwright-based scraper for OpenSea collection rankings
and floor prices.
"""

from opensea_scraper.browser import Browser, ScrapeMode, open_page
from opensea_scraper.challenge import ChallengeGate
from opensea_scraper.collector import CollectionDict, PaginatedCollector, ScrollState
from opensea_scraper.models import Currency, ListingItem, PriceRecord
from opensea_scraper.price_extractor import PriceExtractor
from opensea_scraper.scraper import (
    floor_price,
    floor_price_by_url,
    floor_price_many,
    floor_prices,
    floor_prices_by_url,
    rankings,
)

__version__ = "1.0.0"

__all__ = [
    "Browser",
    "ScrapeMode",
    "open_page",
    "ChallengeGate",
    "CollectionDict",
    "PaginatedCollector",
    "ScrollState",
    "Currency",
    "ListingItem",
    "PriceRecord",
    "PriceExtractor",
    "floor_price",
    "floor_price_by_url",
    "floor_price_many",
    "floor_prices",
    "floor_prices_by_url",
    "rankings",
]
