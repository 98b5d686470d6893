"""Preference record data-access layer."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.models import PreferenceRecord
from resort_deals.repositories.errors import unavailable_on_error


async def get_preference_record(db: AsyncSession, owner_id: str) -> PreferenceRecord | None:
    stmt = select(PreferenceRecord).where(PreferenceRecord.owner_id == owner_id)
    with unavailable_on_error("get_preference_record"):
        result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def save_preference_record(db: AsyncSession, record: PreferenceRecord) -> PreferenceRecord:
    db.add(record)
    with unavailable_on_error("save_preference_record"):
        await db.flush()
    return record
