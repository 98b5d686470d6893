"""Calendar cache data-access layer."""

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.models import CalendarCacheEntry
from resort_deals.repositories.errors import unavailable_on_error


async def get_cache_entries(db: AsyncSession, start: date, end: date) -> list[CalendarCacheEntry]:
    """Return cached day summaries in [start, end], oldest date first."""
    stmt = (
        select(CalendarCacheEntry)
        .where(CalendarCacheEntry.cache_date >= start, CalendarCacheEntry.cache_date <= end)
        .order_by(CalendarCacheEntry.cache_date)
    )
    with unavailable_on_error("get_cache_entries"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def replace_cache_entries(
    db: AsyncSession, start: date, end: date, entries: list[CalendarCacheEntry]
) -> None:
    """Drop every cached day in [start, end] and store ``entries`` in their place."""
    stmt = delete(CalendarCacheEntry).where(
        CalendarCacheEntry.cache_date >= start, CalendarCacheEntry.cache_date <= end
    )
    with unavailable_on_error("replace_cache_entries"):
        await db.execute(stmt)
        db.add_all(entries)
        await db.flush()
