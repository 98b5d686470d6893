"""Calendar endpoint schemas."""

from datetime import date

from pydantic import BaseModel


class CalendarDayResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: date
    deal_count: int
    best_discount_percentage: int | None
    best_deal_id: int | None
    deal_quality: str
    deals_by_type: dict[str, int]


class CalendarResponse(BaseModel):
    model_config = {"from_attributes": True}

    source: str
    days: list[CalendarDayResponse]


class CalendarRefreshRequest(BaseModel):
    """Range to regenerate. Omit both dates to refresh the upcoming months."""

    start_date: date | None = None
    end_date: date | None = None


class CalendarRefreshResponse(BaseModel):
    start_date: date
    end_date: date
    days_refreshed: int
