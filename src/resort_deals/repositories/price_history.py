"""Price snapshot data-access layer."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.models import PriceSnapshot
from resort_deals.repositories.errors import unavailable_on_error


async def list_snapshots(
    db: AsyncSession, resort_id: int, room_type: str, since: datetime
) -> list[PriceSnapshot]:
    """Return snapshots for one resort and room type taken at or after ``since``."""
    stmt = (
        select(PriceSnapshot)
        .where(
            PriceSnapshot.resort_id == resort_id,
            PriceSnapshot.room_type == room_type,
            PriceSnapshot.snapshot_date >= since,
        )
        .order_by(PriceSnapshot.snapshot_date, PriceSnapshot.id)
    )
    with unavailable_on_error("list_snapshots"):
        result = await db.execute(stmt)
    return list(result.scalars().all())


async def add_snapshot(db: AsyncSession, snapshot: PriceSnapshot) -> PriceSnapshot:
    db.add(snapshot)
    with unavailable_on_error("add_snapshot"):
        await db.flush()
    return snapshot
