"""
Price Extraction Module.

Reads floor prices from a rendered collection page, either from the
listing cards in the DOM or from the page's embedded record store.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from playwright.async_api import Page

from opensea_scraper.exceptions import MalformedDataError
from opensea_scraper.models import Currency, PriceRecord

logger = logging.getLogger(__name__)

MAX_FLOOR_PRICES = 32

CARD_SELECTOR = ".Asset--anchor .AssetCardFooter--price-amount"
AMOUNT_SELECTOR = ".Price--amount"
CURRENCY_MARKERS = {
    Currency.ETH: ".Price--eth-icon",
}

# Returns one entry per price card, in document order.
READ_CARDS_SCRIPT = """
([cardSelector, amountSelector, markerSelector]) => {
    return Array.from(document.querySelectorAll(cardSelector)).map(card => {
        const amount = card.querySelector(amountSelector);
        return {
            hasMarker: card.querySelector(markerSelector) !== null,
            amount: amount ? amount.textContent : null,
        };
    });
}
"""

# Returns null when the store is missing or not shaped as expected.
READ_RECORDS_SCRIPT = """
() => {
    try {
        return Object.values(window.__wired__.records)
            .filter(o => o && o.__typename === "AssetQuantityType")
            .map(o => ({
                __typename: o.__typename,
                quantity: o.quantity === undefined || o.quantity === null
                    ? null
                    : (Number.isInteger(o.quantity) ? BigInt(o.quantity).toString() : String(o.quantity)),
                quantityInEth: o.quantityInEth === undefined ? null : o.quantityInEth,
            }));
    } catch (err) {
        console.log(err);
        return null;
    }
}
"""


def parse_amount(text: Optional[str]) -> float:
    """
    Parse a displayed price amount.

    Locales that use "," as the decimal point are mapped to ".".

    Raises:
        MalformedDataError: If the text is not a positive finite number.
    """
    if text is None:
        raise MalformedDataError("Missing amount text")

    normalized = ".".join(text.strip().split(","))
    try:
        value = float(normalized)
    except ValueError as e:
        raise MalformedDataError(f"Unparseable amount: {text!r}") from e

    if not math.isfinite(value) or value <= 0:
        raise MalformedDataError(f"Amount is not a positive number: {text!r}")
    return value


def lowest_price(
    cards: Iterable[Dict[str, Any]],
    currency: Currency = Currency.ETH,
) -> Optional[PriceRecord]:
    """
    Reduce card readings to the lowest valid price.

    Card order is not trusted to be price-sorted even though the
    listing URL asks for ascending prices.
    """
    amounts = []
    for card in cards:
        if not card.get("hasMarker"):
            continue
        try:
            amounts.append(parse_amount(card.get("amount")))
        except MalformedDataError as e:
            logger.debug("Skipping card: %s", e)

    if not amounts:
        return None
    return PriceRecord(amount=min(amounts), currency=currency)


def prices_from_records(records: Any) -> Optional[List[PriceRecord]]:
    """Convert embedded quantity records to at most MAX_FLOOR_PRICES prices."""
    if not isinstance(records, list):
        logger.warning("Embedded record store unavailable or malformed")
        return None

    prices: List[PriceRecord] = []
    for record in records:
        if len(prices) >= MAX_FLOOR_PRICES:
            break
        if not isinstance(record, dict):
            continue
        if record.get("__typename") != "AssetQuantityType":
            continue
        if record.get("quantityInEth") is None:
            continue
        try:
            prices.append(PriceRecord.from_wei(record["quantity"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Skipping quantity record: %s", e)

    return prices or None


class PriceExtractor:
    """
    Floor price extraction from a collection listing page.

    The page must already show the listing for the collection and
    have passed the verification screen.

    Example:
        >>> extractor = PriceExtractor()
        >>> record = await extractor.extract_floor(page)
        >>> prices = await extractor.extract_floor_distribution(page)
    """

    async def extract_floor(
        self,
        page: Page,
        currency: Currency = Currency.ETH,
    ) -> Optional[PriceRecord]:
        """Lowest price among the rendered listing cards, or None."""
        cards = await page.evaluate(
            READ_CARDS_SCRIPT,
            [CARD_SELECTOR, AMOUNT_SELECTOR, CURRENCY_MARKERS[currency]],
        )
        record = lowest_price(cards or [], currency)
        logger.info(
            "Read %d price cards, floor price: %s",
            len(cards or []),
            record.amount if record else None,
        )
        return record

    async def extract_floor_distribution(self, page: Page) -> Optional[List[PriceRecord]]:
        """Lowest listed ETH prices from the embedded record store, or None."""
        records = await page.evaluate(READ_RECORDS_SCRIPT)
        prices = prices_from_records(records)
        logger.info("Read %d floor prices from embedded state", len(prices or []))
        return prices
