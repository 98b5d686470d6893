"""Price history schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class MonthlyPriceResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: date
    price: int
    average: int
    lowest: Decimal
    highest: Decimal


class PriceHistoryStatsResponse(BaseModel):
    model_config = {"from_attributes": True}

    current: int
    average: int
    lowest: int
    highest: int
    trend: Decimal
    best_month: str
    worst_month: str


class PriceHistoryResponse(BaseModel):
    model_config = {"from_attributes": True}

    data: list[MonthlyPriceResponse]
    stats: PriceHistoryStatsResponse


class PriceSnapshotCreate(BaseModel):
    resort_id: int
    room_type: str = Field(default="standard", max_length=50)
    check_in_date: date
    nights: int = Field(default=1, ge=1)
    price_per_night: Decimal = Field(gt=0)
    total_price: Decimal | None = Field(default=None, gt=0)
    source: str | None = Field(default=None, max_length=100)
    deal_id: int | None = None
    snapshot_date: datetime | None = None


class PriceSnapshotResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    resort_id: int
    deal_id: int | None
    room_type: str
    check_in_date: date
    nights: int
    price_per_night: Decimal
    total_price: Decimal
    source: str | None
    snapshot_date: datetime
