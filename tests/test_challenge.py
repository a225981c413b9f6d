"""Tests for the verification screen wait."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from opensea_scraper.challenge import CHALLENGE_SELECTOR, ChallengeGate
from opensea_scraper.exceptions import ChallengeTimeoutError, ScrapeTimeoutError


class TestChallengeGate:
    @pytest.mark.asyncio
    async def test_waits_for_element_to_hide(self):
        page = MagicMock()
        page.wait_for_selector = AsyncMock(return_value=None)

        await ChallengeGate(timeout_ms=1234).await_clearance(page)

        page.wait_for_selector.assert_awaited_once_with(
            CHALLENGE_SELECTOR, state="hidden", timeout=1234
        )

    @pytest.mark.asyncio
    async def test_timeout_propagates(self):
        page = MagicMock()
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 10ms exceeded"))

        with pytest.raises(ChallengeTimeoutError) as exc_info:
            await ChallengeGate(timeout_ms=10).await_clearance(page)

        assert isinstance(exc_info.value, ScrapeTimeoutError)
        assert isinstance(exc_info.value.__cause__, PlaywrightTimeoutError)

    def test_custom_selector(self):
        gate = ChallengeGate(selector="#challenge-running")
        assert gate.selector == "#challenge-running"
