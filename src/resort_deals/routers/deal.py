"""Deal endpoints."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Query

from resort_deals.dependencies import DB, ResortTypes, split_csv
from resort_deals.models import Deal
from resort_deals.repositories.deal import DealFilters
from resort_deals.schemas.deal import DealCreate, DealListResponse, DealResponse
from resort_deals.services.deal import create_deal, get_deals

router = APIRouter(tags=["deals"])


@router.get("/deals", response_model=DealListResponse, status_code=200)
async def list_deals(
    db: DB,
    resort_types: ResortTypes,
    start_date: date | None = None,
    end_date: date | None = None,
    deal_types: str | None = Query(None, description="Comma-separated deal types"),
    min_discount: int | None = Query(None, ge=0, le=100),
    max_price: Decimal | None = Query(None, gt=0),
    passholder_only: bool = False,
    include_partner_hotels: bool = True,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> DealListResponse:
    """List active deals, highest priority first, with their resorts."""
    filters = DealFilters(
        start_date=start_date,
        end_date=end_date,
        resort_types=resort_types,
        deal_types=split_csv(deal_types),
        min_discount=min_discount,
        max_price=max_price,
        passholder_only=passholder_only,
        include_partner_hotels=include_partner_hotels,
    )
    result = await get_deals(db, filters, skip, limit)
    return DealListResponse.model_validate(result)


@router.post("/deals", response_model=DealResponse, status_code=201)
async def add_deal(db: DB, payload: DealCreate) -> DealResponse:
    """Create a deal by hand."""
    deal = await create_deal(db, Deal(**payload.model_dump()))
    return DealResponse.model_validate(deal)
