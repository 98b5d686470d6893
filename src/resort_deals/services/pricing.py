"""Pricing and deal-quality helpers shared by the comparison and calendar services."""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from resort_deals.models import Deal

# Placeholder for deals with no price data; keeps them at the end of any ascending sort.
SENTINEL_PRICE = Decimal("999999")

# Nightly rates used when a resort has no eligible deal for the requested stay.
ESTIMATED_NIGHTLY_PRICES: dict[str, Decimal] = {
    "value": Decimal("150"),
    "moderate": Decimal("250"),
    "deluxe": Decimal("450"),
    "villa": Decimal("550"),
    "partner": Decimal("200"),
}

QUALITY_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (30, "excellent"),
    (20, "great"),
    (10, "good"),
)


class Priced(Protocol):
    @property
    def total_price(self) -> Decimal: ...


@dataclass
class PriceSummary[T]:
    """Best/worst/average over a list already sorted by total price."""

    best: T | None
    worst: T | None
    average_price: int | None
    potential_savings: Decimal
    options_analyzed: int


def price_per_night(deal: Deal) -> Decimal:
    """Promotional price, then baseline, then the sentinel."""
    if deal.deal_price is not None:
        return deal.deal_price
    if deal.original_price is not None:
        return deal.original_price
    return SENTINEL_PRICE


def total_price(deal: Deal, nights: int) -> Decimal:
    return price_per_night(deal) * nights


def estimated_nightly_price(resort_type: str) -> Decimal | None:
    return ESTIMATED_NIGHTLY_PRICES.get(resort_type)


def deal_quality(discount_percentage: int | None) -> str:
    """Bucket a discount: excellent >=30, great >=20, good >=10, else standard.

    No discount at all maps to ``none``.
    """
    if not discount_percentage:
        return "none"
    for threshold, label in QUALITY_THRESHOLDS:
        if discount_percentage >= threshold:
            return label
    return "standard"


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize[T: Priced](items: Sequence[T]) -> PriceSummary[T]:
    """Summarize results sorted ascending by total price.

    Degrades to ``None`` fields on an empty list; savings are zero unless
    there are at least two results.
    """
    if not items:
        return PriceSummary(
            best=None,
            worst=None,
            average_price=None,
            potential_savings=Decimal("0"),
            options_analyzed=0,
        )
    best, worst = items[0], items[-1]
    average = sum((item.total_price for item in items), Decimal("0")) / len(items)
    savings = worst.total_price - best.total_price if len(items) >= 2 else Decimal("0")
    return PriceSummary(
        best=best,
        worst=worst,
        average_price=round_half_up(average),
        potential_savings=savings,
        options_analyzed=len(items),
    )
