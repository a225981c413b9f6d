"""Tests for the scraping operations and URL templates."""

import asyncio
import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

from config import ScraperConfig
from opensea_scraper import scraper
from opensea_scraper.browser import ScrapeMode
from opensea_scraper.exceptions import ChallengeTimeoutError
from opensea_scraper.models import ListingItem, PriceRecord
from opensea_scraper.urls import collection_url, rankings_url

SETTINGS = ScraperConfig(
    base_url="https://opensea.io",
    enable_stealth=False,
    challenge_timeout_ms=1000,
    scroll_interval_ms=0,
)


def fake_page(evaluate_result=None):
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.evaluate = AsyncMock(return_value=evaluate_result)
    return page


def patched_open_page(page, modes):
    @asynccontextmanager
    async def _open_page(mode, settings):
        modes.append(mode)
        yield page

    return patch("opensea_scraper.scraper.open_page", _open_page)


class TestUrls:
    def test_collection_url(self):
        assert collection_url("boredapeyachtclub") == (
            "https://opensea.io/collection/boredapeyachtclub"
            "?search[sortAscending]=true&search[sortBy]=PRICE&search[toggles][0]=BUY_NOW"
        )

    def test_collection_url_custom_base(self):
        assert collection_url("doodles", "http://localhost:8080/").startswith(
            "http://localhost:8080/collection/doodles?"
        )

    def test_empty_slug_rejected(self):
        with pytest.raises(ValueError):
            collection_url("")

    def test_rankings_url(self):
        assert rankings_url() == "https://opensea.io/rankings?sortBy=total_volume"


class TestFloorPrice:
    @pytest.mark.asyncio
    async def test_floor_price_navigates_to_collection(self):
        cards = [
            {"hasMarker": True, "amount": "1,5"},
            {"hasMarker": True, "amount": "0,9"},
            {"hasMarker": True, "amount": "2,0"},
        ]
        page = fake_page(cards)
        modes = []

        with patched_open_page(page, modes):
            record = await scraper.floor_price("cool-cats", settings=SETTINGS)

        assert record == PriceRecord(amount=0.9)
        page.goto.assert_awaited_once_with(collection_url("cool-cats"))
        page.wait_for_selector.assert_awaited_once_with(
            ".cf-browser-verification", state="hidden", timeout=1000
        )
        assert modes == [ScrapeMode.HEADLESS]

    @pytest.mark.asyncio
    async def test_floor_price_by_url_uses_given_url(self):
        page = fake_page([{"hasMarker": False, "amount": "0.1"}])
        url = "https://opensea.io/collection/cool-cats?search[toggles][0]=ON_AUCTION"

        with patched_open_page(page, []):
            record = await scraper.floor_price_by_url(url, "debug", settings=SETTINGS)

        assert record is None
        page.goto.assert_awaited_once_with(url)

    @pytest.mark.asyncio
    async def test_floor_prices_reads_embedded_state(self):
        records = [
            {"__typename": "AssetQuantityType", "quantity": str(q * 10 ** 16), "quantityInEth": "1"}
            for q in range(1, 41)
        ]
        page = fake_page(records)

        with patched_open_page(page, []):
            prices = await scraper.floor_prices("cool-cats", settings=SETTINGS)

        assert len(prices) == 32
        assert prices[-1].amount == 32 * 10 ** 16 / 10 ** 18

    @pytest.mark.asyncio
    async def test_floor_price_many_runs_each_slug(self):
        async def fake_floor_price(slug, mode, settings):
            return PriceRecord(amount=float(len(slug)))

        with patch("opensea_scraper.scraper.floor_price", side_effect=fake_floor_price) as mocked:
            results = await scraper.floor_price_many(["ab", "abcd"], concurrency=1, settings=SETTINGS)

        assert results == {"ab": PriceRecord(amount=2.0), "abcd": PriceRecord(amount=4.0)}
        assert mocked.call_count == 2

    @pytest.mark.asyncio
    async def test_floor_price_many_rejects_zero_concurrency(self):
        with patch("opensea_scraper.scraper.floor_price") as mocked:
            with pytest.raises(ValueError):
                await scraper.floor_price_many(["a"], concurrency=0, settings=SETTINGS)
        mocked.assert_not_called()

    @pytest.mark.asyncio
    async def test_floor_price_many_cancels_pending_on_failure(self):
        cancelled = []

        async def fake_floor_price(slug, mode, settings):
            if slug == "broken":
                raise ChallengeTimeoutError("still verifying")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(slug)
                raise

        with patch("opensea_scraper.scraper.floor_price", side_effect=fake_floor_price):
            with pytest.raises(ChallengeTimeoutError):
                await asyncio.wait_for(
                    scraper.floor_price_many(
                        ["slow-a", "broken", "slow-b"], concurrency=3, settings=SETTINGS
                    ),
                    timeout=5,
                )

        assert sorted(cancelled) == ["slow-a", "slow-b"]


class TestRankings:
    @pytest.mark.asyncio
    async def test_rankings_delegates_to_collector(self):
        page = fake_page()
        expected = [ListingItem(rank=1, name="A", slug="a")]

        with patched_open_page(page, []), patch(
            "opensea_scraper.scraper.PaginatedCollector"
        ) as collector_class:
            collector_class.return_value.collect = AsyncMock(return_value=expected)
            items = await scraper.rankings(3, settings=SETTINGS)

        assert items == expected
        collector_class.return_value.collect.assert_awaited_once_with(
            page, 3, "https://opensea.io/rankings?sortBy=total_volume"
        )
        assert collector_class.call_args.kwargs["interval_ms"] == 0
