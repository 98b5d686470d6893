"""Resort data-access layer."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.models import Resort
from resort_deals.repositories.errors import unavailable_on_error


async def list_active_resorts(db: AsyncSession) -> list[Resort]:
    """Return active resorts grouped by resort type."""
    stmt = select(Resort).where(Resort.is_active.is_(True)).order_by(Resort.resort_type, Resort.id)
    with unavailable_on_error("list_active_resorts"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_resort(db: AsyncSession, resort_id: int) -> Resort | None:
    with unavailable_on_error("get_resort"):
        return await db.get(Resort, resort_id)
