"""Preference record schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel


class PreferenceResponse(BaseModel):
    model_config = {"from_attributes": True}

    owner_id: str
    version: int
    preferred_resort_types: list[str]
    preferred_deal_types: list[str]
    max_budget_per_night: Decimal | None
    min_acceptable_discount: int | None
    deals_viewed: int
    deals_saved: int
    deals_booked: int
    updated_at: datetime


class PreferenceLearnRequest(BaseModel):
    preference_type: Literal["resort_type", "deal_type", "budget", "discount_threshold"]
    value: str
    expected_version: int | None = None


class DealActionRequest(BaseModel):
    action: Literal["viewed", "saved", "booked"]
    expected_version: int | None = None
