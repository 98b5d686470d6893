"""Deal listing and manual deal entry."""

from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.exceptions import InvalidParameterError, NotFoundError
from resort_deals.logging import get_logger
from resort_deals.models import Deal
from resort_deals.repositories.deal import DealFilters, add_deal, count_deals, list_deals
from resort_deals.repositories.resort import get_resort
from resort_deals.schemas.pagination import Paginated

logger = get_logger(__name__)


async def get_deals(
    db: AsyncSession, filters: DealFilters, skip: int, limit: int
) -> Paginated[Deal]:
    """Fetch one page of filtered deals plus the total match count."""
    if (filters.start_date is None) != (filters.end_date is None):
        raise InvalidParameterError("start_date and end_date must be given together")
    if filters.start_date and filters.end_date and filters.end_date < filters.start_date:
        raise InvalidParameterError("end_date must not be before start_date")

    deals = await list_deals(db, filters, skip, limit)
    total = await count_deals(db, filters)
    return Paginated(items=deals, total=total, skip=skip, limit=limit)


async def create_deal(db: AsyncSession, deal: Deal) -> Deal:
    """Store a manually entered deal after checking its resort exists."""
    if deal.resort_id is not None and await get_resort(db, deal.resort_id) is None:
        raise NotFoundError("Resort", deal.resort_id)
    created = await add_deal(db, deal)
    logger.info("deal_created", deal_id=created.id, resort_id=created.resort_id)
    return created
