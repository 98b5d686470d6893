"""Deal calendar endpoints."""

from datetime import date

from fastapi import APIRouter

from resort_deals.dependencies import DB
from resort_deals.exceptions import InvalidParameterError
from resort_deals.schemas.calendar import (
    CalendarRefreshRequest,
    CalendarRefreshResponse,
    CalendarResponse,
)
from resort_deals.services.calendar import (
    get_calendar,
    refresh_calendar_cache,
    refresh_upcoming_calendar,
)
from resort_deals.services.windows import month_bounds, parse_month

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _resolve_range(
    month: str | None, year: int | None, start_date: date | None, end_date: date | None
) -> tuple[date, date]:
    if start_date is not None and end_date is not None:
        return start_date, end_date
    if month is not None:
        return month_bounds(*parse_month(month))
    if year is not None:
        if not 1 <= year <= 9999:
            raise InvalidParameterError(f"Invalid year: {year}")
        return date(year, 1, 1), date(year, 12, 31)
    raise InvalidParameterError("month, year, or start_date and end_date required")


@router.get("", response_model=CalendarResponse)
async def calendar(
    db: DB,
    month: str | None = None,
    year: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> CalendarResponse:
    """Per-day deal counts and best discounts, served from the cache."""
    start, end = _resolve_range(month, year, start_date, end_date)
    view = await get_calendar(db, start, end)
    return CalendarResponse.model_validate(view)


@router.post("/refresh", response_model=CalendarRefreshResponse)
async def refresh(db: DB, payload: CalendarRefreshRequest) -> CalendarRefreshResponse:
    """Regenerate cached days for a range, or for the upcoming months by default."""
    if payload.start_date is not None and payload.end_date is not None:
        days = await refresh_calendar_cache(db, payload.start_date, payload.end_date)
    elif payload.start_date is None and payload.end_date is None:
        days = await refresh_upcoming_calendar(db, date.today())
    else:
        raise InvalidParameterError("start_date and end_date must be given together")
    return CalendarRefreshResponse(
        start_date=days[0].date,
        end_date=days[-1].date,
        days_refreshed=len(days),
    )
