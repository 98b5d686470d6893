"""Deal comparison endpoints."""

from datetime import date

from fastapi import APIRouter, Query

from resort_deals.config import settings
from resort_deals.dependencies import DB, ResortTypes
from resort_deals.schemas.comparison import (
    BestDeal,
    DateRangeResponse,
    DateRangeSummary,
    FlexibleDatesResponse,
    FlexibleSuggestion,
    ResortComparisonResponse,
    ResortComparisonRow,
    WeekComparison,
    WeeklyResponse,
    WindowComparison,
)
from resort_deals.schemas.deal import ResortResponse
from resort_deals.services.comparison import (
    ComparisonResult,
    ResortRow,
    WindowResult,
    compare_date_ranges,
    compare_resorts,
    compare_weekly,
    find_flexible_dates,
)

router = APIRouter(prefix="/compare", tags=["compare"])


def _deal_fields(result: ComparisonResult) -> dict[str, object]:
    return BestDeal.model_validate(result).model_dump()


def _window(result: WindowResult) -> WindowComparison:
    window = result.window
    return WindowComparison(
        check_in=window.check_in,
        check_out=window.check_out,
        nights=window.nights,
        **_deal_fields(result.best_deal),
    )


def _suggestion(result: WindowResult) -> FlexibleSuggestion:
    window = result.window
    return FlexibleSuggestion(
        check_in=window.check_in,
        check_out=window.check_out,
        nights=window.nights,
        days_difference=window.offset,
        **_deal_fields(result.best_deal),
    )


def _week(result: WindowResult) -> WeekComparison:
    window = result.window
    return WeekComparison(
        week_start=window.check_in,
        week_end=window.check_out,
        week_number=window.offset,
        **_deal_fields(result.best_deal),
    )


def _resort_row(row: ResortRow) -> ResortComparisonRow:
    return ResortComparisonRow(
        resort=ResortResponse.model_validate(row.resort),
        deal=BestDeal.model_validate(row.deal) if row.deal is not None else None,
        estimated_price=row.estimated_price,
        estimated_total=row.estimated_total,
    )


@router.get("/date-range", response_model=DateRangeResponse)
async def date_range(
    db: DB,
    resort_types: ResortTypes,
    start_date: date,
    end_date: date,
    nights: int = Query(settings.default_nights, ge=1),
) -> DateRangeResponse:
    """Cheapest deal for every stay of ``nights`` nights inside the range."""
    result = await compare_date_ranges(db, start_date, end_date, nights, resort_types)
    summary = result.summary
    return DateRangeResponse(
        comparisons=[_window(item) for item in result.comparisons],
        summary=DateRangeSummary(
            best_deal=_window(summary.best) if summary.best else None,
            worst_deal=_window(summary.worst) if summary.worst else None,
            average_price=summary.average_price,
            potential_savings=summary.potential_savings,
            options_analyzed=summary.options_analyzed,
        ),
    )


@router.get("/resorts", response_model=ResortComparisonResponse)
async def resorts(db: DB, check_in: date, check_out: date) -> ResortComparisonResponse:
    """Every active resort for one stay, cheapest first."""
    result = await compare_resorts(db, check_in, check_out)
    rows = [_resort_row(row) for row in result.comparisons]
    return ResortComparisonResponse(
        check_in=result.check_in,
        check_out=result.check_out,
        comparisons=rows,
        best_value=rows[0] if rows else None,
        best_deal_percentage=result.best_deal_percentage,
    )


@router.get("/flexible-dates", response_model=FlexibleDatesResponse)
async def flexible_dates(
    db: DB,
    resort_types: ResortTypes,
    target_date: date,
    nights: int = Query(settings.default_nights, ge=1),
    flex_days: int = Query(settings.default_flex_days, ge=0),
) -> FlexibleDatesResponse:
    """Compare the target stay with nearby start dates."""
    result = await find_flexible_dates(db, target_date, nights, flex_days, resort_types)
    return FlexibleDatesResponse(
        target_dates=_suggestion(result.target_dates) if result.target_dates else None,
        best_alternative=_suggestion(result.best_alternative) if result.best_alternative else None,
        all_suggestions=[_suggestion(item) for item in result.all_suggestions],
        potential_savings=result.potential_savings,
    )


@router.get("/weekly", response_model=WeeklyResponse)
async def weekly(
    db: DB,
    resort_types: ResortTypes,
    month: str = Query(..., description="YYYY-MM"),
) -> WeeklyResponse:
    """Cheapest deal for each week overlapping the month.

    ``week_number`` counts Sunday-to-Saturday weeks in order from 1, starting
    with the week that contains the 1st. It is not the ISO week number. Weeks
    with no eligible deal are left out, so the numbers can have gaps.
    """
    result = await compare_weekly(db, month, resort_types)
    summary = result.summary
    return WeeklyResponse(
        month=result.month,
        weeks=[_week(item) for item in result.weeks],
        cheapest_week=_week(summary.best) if summary.best else None,
        most_expensive_week=_week(summary.worst) if summary.worst else None,
        average_price=summary.average_price,
    )
