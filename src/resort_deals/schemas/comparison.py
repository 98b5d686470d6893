"""Comparison endpoint schemas.

Window results are flattened: the stay dates sit next to the best deal's
fields, so a client can render one row per window without nesting.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from resort_deals.schemas.deal import ResortResponse


class BestDeal(BaseModel):
    """Cheapest eligible deal for one stay."""

    model_config = {"from_attributes": True}

    deal_id: int
    resort: ResortResponse | None
    title: str
    discount_percentage: int | None
    price_per_night: Decimal
    total_price: Decimal
    deal_code: str | None
    source_url: str
    quality_score: Decimal | None


class WindowComparison(BestDeal):
    check_in: date
    check_out: date
    nights: int


class FlexibleSuggestion(WindowComparison):
    days_difference: int


class WeekComparison(BestDeal):
    week_start: date
    week_end: date
    week_number: int


class DateRangeSummary(BaseModel):
    best_deal: WindowComparison | None
    worst_deal: WindowComparison | None
    average_price: int | None
    potential_savings: Decimal
    options_analyzed: int


class DateRangeResponse(BaseModel):
    comparisons: list[WindowComparison]
    summary: DateRangeSummary


class ResortComparisonRow(BaseModel):
    resort: ResortResponse
    deal: BestDeal | None
    estimated_price: Decimal | None
    estimated_total: Decimal | None


class ResortComparisonResponse(BaseModel):
    check_in: date
    check_out: date
    comparisons: list[ResortComparisonRow]
    best_value: ResortComparisonRow | None
    best_deal_percentage: int


class FlexibleDatesResponse(BaseModel):
    target_dates: FlexibleSuggestion | None
    best_alternative: FlexibleSuggestion | None
    all_suggestions: list[FlexibleSuggestion]
    potential_savings: Decimal


class WeeklyResponse(BaseModel):
    month: str
    weeks: list[WeekComparison]
    cheapest_week: WeekComparison | None
    most_expensive_week: WeekComparison | None
    average_price: int | None
