"""Deal comparison across stay windows and resorts.

Every mode follows the same pipeline: build candidate windows, pick the
cheapest eligible deal for each window, then sort by total price and
summarize. Parameter validation happens while building windows, before any
query runs. Each window or resort is looked up in its own savepoint; a
repository failure there is logged and does not abort the batch.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.config import settings
from resort_deals.exceptions import InvalidParameterError, RepositoryUnavailableError
from resort_deals.logging import get_logger
from resort_deals.models import Deal, Resort
from resort_deals.repositories.deal import find_eligible_deals
from resort_deals.repositories.resort import list_active_resorts
from resort_deals.services.pricing import (
    SENTINEL_PRICE,
    PriceSummary,
    estimated_nightly_price,
    price_per_night,
    summarize,
)
from resort_deals.services.windows import (
    CandidateWindow,
    date_range_windows,
    flexible_windows,
    parse_month,
    weekly_windows,
)

logger = get_logger(__name__)


@dataclass
class ComparisonResult:
    """Cheapest eligible deal for one stay."""

    deal_id: int
    resort: Resort | None
    title: str
    discount_percentage: int | None
    price_per_night: Decimal
    total_price: Decimal
    deal_code: str | None
    source_url: str
    quality_score: Decimal | None


@dataclass
class WindowResult:
    window: CandidateWindow
    best_deal: ComparisonResult

    @property
    def total_price(self) -> Decimal:
        return self.best_deal.total_price


@dataclass
class DateRangeComparison:
    comparisons: list[WindowResult]
    summary: PriceSummary[WindowResult]


@dataclass
class ResortRow:
    """One resort in a resort comparison: its best deal or a category estimate."""

    resort: Resort
    deal: ComparisonResult | None
    estimated_price: Decimal | None
    estimated_total: Decimal | None

    @property
    def sort_price(self) -> Decimal:
        if self.deal is not None:
            return self.deal.total_price
        if self.estimated_total is not None:
            return self.estimated_total
        return SENTINEL_PRICE


@dataclass
class ResortComparison:
    check_in: date
    check_out: date
    comparisons: list[ResortRow]

    @property
    def best_value(self) -> ResortRow | None:
        return self.comparisons[0] if self.comparisons else None

    @property
    def best_deal_percentage(self) -> int:
        best = self.best_value
        if best is None or best.deal is None:
            return 0
        return best.deal.discount_percentage or 0


@dataclass
class FlexibleDateComparison:
    target_dates: WindowResult | None
    best_alternative: WindowResult | None
    all_suggestions: list[WindowResult]

    @property
    def potential_savings(self) -> Decimal:
        if self.target_dates is None or self.best_alternative is None:
            return Decimal("0")
        return self.target_dates.total_price - self.best_alternative.total_price


@dataclass
class WeeklyComparison:
    month: str
    weeks: list[WindowResult]
    summary: PriceSummary[WindowResult]


def select_best_deal(deals: list[Deal], nights: int) -> ComparisonResult | None:
    """Reduce eligible deals to the one with the lowest total price.

    ``deals`` arrive highest discount first; a strict comparison keeps the
    first-seen deal on ties.
    """
    best: ComparisonResult | None = None
    for deal in deals:
        nightly = price_per_night(deal)
        total = nightly * nights
        if best is None or total < best.total_price:
            best = ComparisonResult(
                deal_id=deal.id,
                resort=deal.resort,
                title=deal.title,
                discount_percentage=deal.discount_percentage,
                price_per_night=nightly,
                total_price=total,
                deal_code=deal.deal_code,
                source_url=deal.source_url,
                quality_score=deal.quality_score,
            )
    return best


async def find_best_deal(
    db: AsyncSession,
    window: CandidateWindow,
    resort_types: list[str] | None = None,
    resort_id: int | None = None,
) -> ComparisonResult | None:
    """Cheapest eligible deal for one window, or None when nothing covers it."""
    deals = await find_eligible_deals(
        db,
        window.check_in,
        window.check_out,
        limit=settings.selector_fetch_limit,
        resort_types=resort_types,
        resort_id=resort_id,
    )
    return select_best_deal(deals, window.nights)


async def _price_windows(
    db: AsyncSession, windows: list[CandidateWindow], resort_types: list[str] | None
) -> list[WindowResult]:
    results = []
    for window in windows:
        try:
            async with db.begin_nested():
                best = await find_best_deal(db, window, resort_types)
        except RepositoryUnavailableError as exc:
            logger.warning(
                "window_skipped",
                check_in=window.check_in.isoformat(),
                check_out=window.check_out.isoformat(),
                operation=exc.operation,
            )
            continue
        if best is not None:
            results.append(WindowResult(window=window, best_deal=best))
    results.sort(key=lambda result: result.total_price)
    return results


async def compare_date_ranges(
    db: AsyncSession,
    start: date,
    end: date,
    nights: int = 7,
    resort_types: list[str] | None = None,
) -> DateRangeComparison:
    """Price every possible stay of ``nights`` nights between start and end."""
    windows = date_range_windows(start, end, nights)
    comparisons = await _price_windows(db, windows, resort_types)
    logger.info(
        "date_range_compared",
        windows=len(windows),
        priced=len(comparisons),
    )
    return DateRangeComparison(comparisons=comparisons, summary=summarize(comparisons))


async def compare_resorts(db: AsyncSession, check_in: date, check_out: date) -> ResortComparison:
    """Best deal per active resort for one fixed stay.

    Resorts without an eligible deal, or whose lookup failed, fall back to the
    category estimate so every active resort yields exactly one row.
    """
    if check_out <= check_in:
        raise InvalidParameterError("check_out must be after check_in")
    window = CandidateWindow(check_in, check_out, 0)

    rows = []
    for resort in await list_active_resorts(db):
        deal = None
        try:
            async with db.begin_nested():
                deal = await find_best_deal(db, window, resort_id=resort.id)
        except RepositoryUnavailableError as exc:
            logger.warning("resort_lookup_failed", resort_id=resort.id, operation=exc.operation)
        nightly = None if deal is not None else estimated_nightly_price(resort.resort_type)
        rows.append(
            ResortRow(
                resort=resort,
                deal=deal,
                estimated_price=nightly,
                estimated_total=nightly * window.nights if nightly is not None else None,
            )
        )
    rows.sort(key=lambda row: row.sort_price)
    return ResortComparison(check_in=check_in, check_out=check_out, comparisons=rows)


async def find_flexible_dates(
    db: AsyncSession,
    target: date,
    nights: int = 7,
    flex_days: int = 3,
    resort_types: list[str] | None = None,
) -> FlexibleDateComparison:
    """Compare the target stay against stays shifted up to ``flex_days`` either way."""
    windows = flexible_windows(target, nights, flex_days)
    suggestions = await _price_windows(db, windows, resort_types)
    target_result = next((s for s in suggestions if s.window.offset == 0), None)
    return FlexibleDateComparison(
        target_dates=target_result,
        best_alternative=suggestions[0] if suggestions else None,
        all_suggestions=suggestions,
    )


async def compare_weekly(
    db: AsyncSession, month: str, resort_types: list[str] | None = None
) -> WeeklyComparison:
    """Cheapest deal for each Sunday-to-Saturday week overlapping ``month``."""
    year, month_number = parse_month(month)
    weeks = await _price_windows(db, weekly_windows(year, month_number), resort_types)
    return WeeklyComparison(month=month, weeks=weeks, summary=summarize(weeks))
