"""Deal data-access layer.

Pure query functions with no business logic and no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from resort_deals.models import Deal, Resort
from resort_deals.repositories.errors import unavailable_on_error


@dataclass
class DealFilters:
    """Optional filters for the deal listing."""

    start_date: date | None = None
    end_date: date | None = None
    resort_types: list[str] = field(default_factory=list)
    deal_types: list[str] = field(default_factory=list)
    min_discount: int | None = None
    max_price: Decimal | None = None
    passholder_only: bool = False
    include_partner_hotels: bool = True


def _apply_filters[S: Select](stmt: S, filters: DealFilters) -> S:
    stmt = stmt.where(Deal.is_active.is_(True))
    if filters.start_date and filters.end_date:
        # Travel window overlaps the requested range
        stmt = stmt.where(
            Deal.travel_valid_from <= filters.end_date,
            Deal.travel_valid_to >= filters.start_date,
        )
    if filters.resort_types or not filters.include_partner_hotels:
        stmt = stmt.join(Deal.resort)
        if filters.resort_types:
            stmt = stmt.where(Resort.resort_type.in_(filters.resort_types))
        if not filters.include_partner_hotels:
            stmt = stmt.where(Resort.official_disney.is_(True))
    if filters.deal_types:
        stmt = stmt.where(Deal.deal_type.in_(filters.deal_types))
    if filters.min_discount is not None:
        stmt = stmt.where(Deal.discount_percentage >= filters.min_discount)
    if filters.max_price is not None:
        stmt = stmt.where(Deal.deal_price <= filters.max_price)
    if filters.passholder_only:
        stmt = stmt.where(Deal.deal_type == "passholder_exclusive")
    return stmt


async def list_deals(
    db: AsyncSession, filters: DealFilters, skip: int, limit: int
) -> list[Deal]:
    """Return a page of active deals, highest priority and discount first."""
    stmt = (
        _apply_filters(select(Deal), filters)
        .options(selectinload(Deal.resort))
        .order_by(
            Deal.priority.desc(),
            Deal.discount_percentage.desc().nulls_last(),
            Deal.id,
        )
        .offset(skip)
        .limit(limit)
    )
    with unavailable_on_error("list_deals"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_deals(db: AsyncSession, filters: DealFilters) -> int:
    """Return the number of deals matching the filters."""
    stmt = _apply_filters(select(func.count(Deal.id)), filters)
    with unavailable_on_error("count_deals"):
        result = await db.execute(stmt)
    return result.scalar_one()


async def find_eligible_deals(
    db: AsyncSession,
    check_in: date,
    check_out: date,
    *,
    limit: int,
    resort_types: list[str] | None = None,
    resort_id: int | None = None,
) -> list[Deal]:
    """Return active deals whose travel window covers the whole stay.

    Ordered by discount descending and capped at ``limit``. The cap means a
    cheaper deal with a smaller discount can be missed when more than
    ``limit`` deals cover the same stay.
    """
    stmt = (
        select(Deal)
        .options(selectinload(Deal.resort))
        .where(
            Deal.is_active.is_(True),
            Deal.travel_valid_from <= check_in,
            Deal.travel_valid_to >= check_out,
        )
    )
    if resort_types:
        stmt = stmt.join(Deal.resort).where(Resort.resort_type.in_(resort_types))
    if resort_id is not None:
        stmt = stmt.where(Deal.resort_id == resort_id)
    stmt = stmt.order_by(Deal.discount_percentage.desc().nulls_last(), Deal.id).limit(limit)

    with unavailable_on_error("find_eligible_deals"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_deals_active_on(db: AsyncSession, day: date) -> list[Deal]:
    """Return active deals whose travel window includes ``day``."""
    stmt = select(Deal).where(
        Deal.is_active.is_(True),
        Deal.travel_valid_from <= day,
        Deal.travel_valid_to >= day,
    )
    with unavailable_on_error("list_deals_active_on"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_deals_overlapping(db: AsyncSession, start: date, end: date) -> list[Deal]:
    """Return active deals whose travel window touches any day in [start, end]."""
    stmt = select(Deal).where(
        Deal.is_active.is_(True),
        Deal.travel_valid_from <= end,
        Deal.travel_valid_to >= start,
    )
    with unavailable_on_error("list_deals_overlapping"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def add_deal(db: AsyncSession, deal: Deal) -> Deal:
    """Persist a new deal and load its resort for serialization."""
    db.add(deal)
    with unavailable_on_error("add_deal"):
        await db.flush()
        await db.refresh(deal, attribute_names=["resort"])
    return deal
