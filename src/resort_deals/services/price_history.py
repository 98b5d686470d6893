"""Monthly price history for a resort and room type."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.exceptions import InvalidParameterError, NotFoundError
from resort_deals.logging import get_logger
from resort_deals.models import PriceSnapshot
from resort_deals.repositories.price_history import add_snapshot, list_snapshots
from resort_deals.repositories.resort import get_resort
from resort_deals.services.pricing import round_half_up

logger = get_logger(__name__)


@dataclass
class MonthlyPrice:
    date: date
    price: int
    average: int
    lowest: Decimal
    highest: Decimal


@dataclass
class PriceHistoryStats:
    current: int
    average: int
    lowest: int
    highest: int
    trend: Decimal
    best_month: str
    worst_month: str


@dataclass
class PriceHistory:
    data: list[MonthlyPrice]
    stats: PriceHistoryStats


def _mean(values: list[Decimal]) -> Decimal:
    return sum(values, Decimal("0")) / len(values)


def build_price_history(snapshots: list[PriceSnapshot]) -> PriceHistory:
    """Group snapshots (oldest first) by calendar month and compute trend stats."""
    by_month: dict[date, list[Decimal]] = {}
    for snapshot in snapshots:
        month = snapshot.snapshot_date.date().replace(day=1)
        by_month.setdefault(month, []).append(snapshot.price_per_night)

    all_prices = [price for prices in by_month.values() for price in prices]
    overall = round_half_up(_mean(all_prices)) if all_prices else 0

    data = [
        MonthlyPrice(
            date=month,
            price=round_half_up(_mean(prices)),
            average=overall,
            lowest=min(prices),
            highest=max(prices),
        )
        for month, prices in by_month.items()
    ]

    best = min(data, key=lambda point: point.lowest, default=None)
    worst = max(data, key=lambda point: point.highest, default=None)
    current = data[-1].price if data else 0
    trend = Decimal("0")
    if overall > 0:
        trend = (Decimal(current - overall) / overall * 100).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )

    stats = PriceHistoryStats(
        current=current,
        average=overall,
        lowest=round_half_up(best.lowest) if best else 0,
        highest=round_half_up(worst.highest) if worst else 0,
        trend=trend,
        best_month=best.date.strftime("%B %Y") if best else "",
        worst_month=worst.date.strftime("%B %Y") if worst else "",
    )
    return PriceHistory(data=data, stats=stats)


async def get_price_history(
    db: AsyncSession,
    resort_id: int,
    room_type: str = "standard",
    start_date: date | None = None,
    months: int = 12,
    today: date | None = None,
) -> PriceHistory:
    """Price history since ``start_date``, or the last ``months`` months."""
    if months < 1:
        raise InvalidParameterError("months must be at least 1")
    if start_date is None:
        start_date = (today or date.today()) - relativedelta(months=months)
    since = datetime.combine(start_date, time.min, tzinfo=UTC)
    snapshots = await list_snapshots(db, resort_id, room_type, since)
    return build_price_history(snapshots)


async def record_snapshot(db: AsyncSession, snapshot: PriceSnapshot) -> PriceSnapshot:
    """Store a price observation; total defaults to nightly price times nights."""
    if await get_resort(db, snapshot.resort_id) is None:
        raise NotFoundError("Resort", snapshot.resort_id)
    if snapshot.total_price is None:
        snapshot.total_price = snapshot.price_per_night * snapshot.nights
    if snapshot.snapshot_date is None:
        snapshot.snapshot_date = datetime.now(UTC)
    stored = await add_snapshot(db, snapshot)
    logger.info("price_snapshot_recorded", resort_id=stored.resort_id, room_type=stored.room_type)
    return stored
