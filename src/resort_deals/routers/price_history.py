"""Price history endpoints."""

from datetime import date

from fastapi import APIRouter, Query

from resort_deals.dependencies import DB
from resort_deals.models import PriceSnapshot
from resort_deals.schemas.price_history import (
    PriceHistoryResponse,
    PriceSnapshotCreate,
    PriceSnapshotResponse,
)
from resort_deals.services.price_history import get_price_history, record_snapshot

router = APIRouter(prefix="/price-history", tags=["price-history"])


@router.get("", response_model=PriceHistoryResponse)
async def price_history(
    db: DB,
    resort_id: int,
    room_type: str = "standard",
    start_date: date | None = None,
    months: int = Query(12, ge=1, le=120),
) -> PriceHistoryResponse:
    """Monthly average, low and high nightly prices with overall stats."""
    history = await get_price_history(db, resort_id, room_type, start_date, months)
    return PriceHistoryResponse.model_validate(history)


@router.post("", response_model=PriceSnapshotResponse, status_code=201)
async def add_price_snapshot(db: DB, payload: PriceSnapshotCreate) -> PriceSnapshotResponse:
    """Record one observed price."""
    snapshot = await record_snapshot(db, PriceSnapshot(**payload.model_dump()))
    return PriceSnapshotResponse.model_validate(snapshot)
