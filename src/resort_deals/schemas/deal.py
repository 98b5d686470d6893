"""Deal and resort schemas for the /deals endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from resort_deals.schemas.pagination import PaginatedResponse

DealType = Literal[
    "room_discount",
    "free_dining",
    "room_upgrade",
    "package_discount",
    "free_nights",
    "passholder_exclusive",
    "other",
]


class ResortResponse(BaseModel):
    """Resort summary nested inside deal and comparison responses."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    resort_type: str
    official_disney: bool
    location: str | None


class DealResponse(BaseModel):
    """Single deal with its nested resort."""

    model_config = {"from_attributes": True}

    id: int
    resort_id: int | None
    title: str
    deal_type: str
    discount_percentage: int | None
    original_price: Decimal | None
    deal_price: Decimal | None
    valid_from: date
    valid_to: date
    booking_deadline: date | None
    travel_valid_from: date | None
    travel_valid_to: date | None
    deal_code: str | None
    source_url: str
    is_active: bool
    priority: int
    quality_score: Decimal | None
    created_at: datetime
    updated_at: datetime
    resort: ResortResponse | None


DealListResponse = PaginatedResponse[DealResponse]


class DealCreate(BaseModel):
    """Manually entered deal."""

    title: str = Field(min_length=1, max_length=200)
    source_url: str = Field(min_length=1, max_length=500)
    valid_from: date
    valid_to: date
    resort_id: int | None = None
    deal_type: DealType = "other"
    discount_percentage: int | None = Field(default=None, ge=0, le=100)
    original_price: Decimal | None = Field(default=None, gt=0)
    deal_price: Decimal | None = Field(default=None, gt=0)
    booking_deadline: date | None = None
    travel_valid_from: date | None = None
    travel_valid_to: date | None = None
    deal_code: str | None = Field(default=None, max_length=50)
    priority: int = 0
    quality_score: Decimal | None = None

    @model_validator(mode="after")
    def check_date_order(self) -> "DealCreate":
        if self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be before valid_from")
        if (
            self.travel_valid_from is not None
            and self.travel_valid_to is not None
            and self.travel_valid_to < self.travel_valid_from
        ):
            raise ValueError("travel_valid_to must not be before travel_valid_from")
        return self
