"""Data models for scraped prices and ranking entries."""

from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional

WEI_PER_ETH = 10 ** 18


class Currency(str, Enum):
    """Currencies a price can be reported in."""
    ETH = "ETH"


@dataclass(frozen=True)
class PriceRecord:
    amount: float
    currency: Currency = Currency.ETH

    @classmethod
    def from_wei(cls, quantity: Any) -> "PriceRecord":
        """
        Build a record from an integer quantity in the smallest on-chain unit.

        Quantities serialised in exponent form ("1e+21") are accepted.

        Raises:
            ValueError: If the quantity is not a finite number.
        """
        try:
            wei = int(Decimal(str(quantity).strip()))
        except (InvalidOperation, OverflowError) as e:
            raise ValueError(f"Invalid quantity: {quantity!r}") from e
        return cls(amount=wei / WEI_PER_ETH, currency=Currency.ETH)

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "currency": self.currency.value}


@dataclass
class ListingItem:
    """One collection row from the rankings page."""

    rank: int
    name: str
    slug: str = ""
    thumbnail: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        # rows that have not finished rendering report rank 0 or no name
        return self.rank != 0 and self.name != ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListingItem":
        return cls(
            rank=int(data.get("rank") or 0),
            name=(data.get("name") or "").strip(),
            slug=data.get("slug") or "",
            thumbnail=data.get("thumbnail"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
