"""Per-day deal calendar backed by the calendar cache table.

Reads go to the cache first. Missing or stale days trigger a regeneration of
the whole requested range. When the cache can't be read or refreshed, days are
computed directly from the deals table and returned without being stored.
Each database step runs in its own savepoint, so a failed statement leaves
the request transaction usable for the fallback.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.config import settings
from resort_deals.exceptions import InvalidParameterError, RepositoryUnavailableError
from resort_deals.logging import get_logger
from resort_deals.models import CalendarCacheEntry, Deal
from resort_deals.repositories.calendar import get_cache_entries, replace_cache_entries
from resort_deals.repositories.deal import list_deals_active_on, list_deals_overlapping
from resort_deals.services.pricing import deal_quality

logger = get_logger(__name__)

MAX_CALENDAR_DAYS = 366


@dataclass
class CalendarDay:
    date: date
    deal_count: int = 0
    best_discount_percentage: int | None = None
    best_deal_id: int | None = None
    deal_quality: str = "none"
    deals_by_type: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: CalendarCacheEntry) -> "CalendarDay":
        return cls(
            date=entry.cache_date,
            deal_count=entry.deal_count,
            best_discount_percentage=entry.best_discount_percentage,
            best_deal_id=entry.best_deal_id,
            deal_quality=entry.deal_quality,
            deals_by_type=dict(entry.deals_by_type),
        )

    def to_entry(self, updated_at: datetime) -> CalendarCacheEntry:
        return CalendarCacheEntry(
            cache_date=self.date,
            deal_count=self.deal_count,
            best_discount_percentage=self.best_discount_percentage,
            best_deal_id=self.best_deal_id,
            deal_quality=self.deal_quality,
            deals_by_type=self.deals_by_type,
            last_updated=updated_at,
        )


@dataclass
class CalendarView:
    days: list[CalendarDay]
    source: str  # "cache", "refreshed" or "fallback"


def days_between(start: date, end: date) -> list[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def validate_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidParameterError("end_date must not be before start_date")
    if (end - start).days + 1 > MAX_CALENDAR_DAYS:
        raise InvalidParameterError(f"Calendar ranges are limited to {MAX_CALENDAR_DAYS} days")


def summarize_day(day: date, deals: list[Deal]) -> CalendarDay:
    """Aggregate the deals valid on ``day`` into one calendar cell."""
    discounted = [deal for deal in deals if deal.discount_percentage]
    best = max(discounted, key=lambda deal: deal.discount_percentage or 0, default=None)
    best_discount = best.discount_percentage if best is not None else None
    return CalendarDay(
        date=day,
        deal_count=len(deals),
        best_discount_percentage=best_discount,
        best_deal_id=best.id if best is not None else None,
        deal_quality=deal_quality(best_discount),
        deals_by_type=dict(Counter(deal.deal_type for deal in deals)),
    )


def _covers(deal: Deal, day: date) -> bool:
    if deal.travel_valid_from is None or deal.travel_valid_to is None:
        return False
    return deal.travel_valid_from <= day <= deal.travel_valid_to


def _is_stale(entry: CalendarCacheEntry, now: datetime) -> bool:
    updated = entry.last_updated
    if updated.tzinfo is None:
        updated = updated.replace(tzinfo=UTC)
    return now - updated > timedelta(minutes=settings.calendar_cache_ttl_minutes)


async def refresh_calendar_cache(db: AsyncSession, start: date, end: date) -> list[CalendarDay]:
    """Regenerate every cached day in [start, end] from the deals table.

    One range query feeds all days; existing rows in the range are replaced,
    never patched.
    """
    validate_range(start, end)
    deals = await list_deals_overlapping(db, start, end)
    days = [
        summarize_day(day, [deal for deal in deals if _covers(deal, day)])
        for day in days_between(start, end)
    ]
    now = datetime.now(UTC)
    await replace_cache_entries(db, start, end, [day.to_entry(now) for day in days])
    logger.info(
        "calendar_cache_refreshed",
        start=start.isoformat(),
        end=end.isoformat(),
        days=len(days),
    )
    return days


async def refresh_upcoming_calendar(db: AsyncSession, today: date) -> list[CalendarDay]:
    """Refresh the cache from today through the configured horizon."""
    horizon = today + relativedelta(months=settings.calendar_refresh_months)
    return await refresh_calendar_cache(db, today, horizon)


async def compute_calendar_fallback(db: AsyncSession, start: date, end: date) -> list[CalendarDay]:
    """Compute each day with its own query, without touching the cache.

    A failed query leaves that day empty instead of failing the whole range.
    """
    days = []
    for day in days_between(start, end):
        try:
            async with db.begin_nested():
                deals = await list_deals_active_on(db, day)
        except RepositoryUnavailableError:
            logger.error("calendar_day_failed", date=day.isoformat())
            days.append(CalendarDay(date=day))
            continue
        days.append(summarize_day(day, deals))
    return days


async def get_calendar(db: AsyncSession, start: date, end: date) -> CalendarView:
    """Serve [start, end] from cache, refreshing or falling back as needed."""
    validate_range(start, end)
    expected_days = (end - start).days + 1

    try:
        async with db.begin_nested():
            entries = await get_cache_entries(db, start, end)
    except RepositoryUnavailableError:
        logger.warning("calendar_fallback", reason="cache_read_failed", start=start.isoformat())
        return CalendarView(days=await compute_calendar_fallback(db, start, end), source="fallback")

    now = datetime.now(UTC)
    if len(entries) == expected_days and not any(_is_stale(e, now) for e in entries):
        return CalendarView(days=[CalendarDay.from_entry(e) for e in entries], source="cache")

    logger.info("calendar_cache_miss", cached=len(entries), expected=expected_days)
    try:
        async with db.begin_nested():
            await refresh_calendar_cache(db, start, end)
            entries = await get_cache_entries(db, start, end)
    except RepositoryUnavailableError:
        logger.warning("calendar_fallback", reason="cache_refresh_failed", start=start.isoformat())
        return CalendarView(days=await compute_calendar_fallback(db, start, end), source="fallback")
    return CalendarView(days=[CalendarDay.from_entry(e) for e in entries], source="refreshed")
