"""Versioned booking preferences, one record per owner.

Records change only through ``learn_preference`` and ``record_deal_action``.
Both return a frozen snapshot of the record as it stood after the change, and
every change increments ``version``. Callers can pass the version they last
saw; a mismatch raises ConflictError instead of silently overwriting a
concurrent change.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.exceptions import ConflictError, InvalidParameterError
from resort_deals.logging import get_logger
from resort_deals.models import DEAL_TYPES, RESORT_TYPES, PreferenceRecord
from resort_deals.repositories.preference import get_preference_record, save_preference_record

logger = get_logger(__name__)

PreferenceType = Literal["resort_type", "deal_type", "budget", "discount_threshold"]
DealAction = Literal["viewed", "saved", "booked"]


@dataclass
class PreferenceUpdate:
    preference_type: PreferenceType
    value: str


@dataclass(frozen=True)
class Preferences:
    """One version of an owner's preferences, detached from the session."""

    owner_id: str
    version: int
    preferred_resort_types: tuple[str, ...]
    preferred_deal_types: tuple[str, ...]
    max_budget_per_night: Decimal | None
    min_acceptable_discount: int | None
    deals_viewed: int
    deals_saved: int
    deals_booked: int
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PreferenceRecord) -> "Preferences":
        return cls(
            owner_id=record.owner_id,
            version=record.version,
            preferred_resort_types=tuple(record.preferred_resort_types),
            preferred_deal_types=tuple(record.preferred_deal_types),
            max_budget_per_night=record.max_budget_per_night,
            min_acceptable_discount=record.min_acceptable_discount,
            deals_viewed=record.deals_viewed,
            deals_saved=record.deals_saved,
            deals_booked=record.deals_booked,
            updated_at=record.updated_at,
        )


async def _load_or_create(db: AsyncSession, owner_id: str) -> PreferenceRecord:
    record = await get_preference_record(db, owner_id)
    if record is None:
        record = await save_preference_record(db, PreferenceRecord(owner_id=owner_id))
        logger.info("preference_record_created", owner_id=owner_id)
    return record


async def get_preferences(db: AsyncSession, owner_id: str) -> Preferences:
    """Return the owner's preferences, creating an empty record on first access."""
    return Preferences.from_record(await _load_or_create(db, owner_id))


def _check_version(record: PreferenceRecord, expected_version: int | None) -> None:
    if expected_version is not None and expected_version != record.version:
        raise ConflictError(
            f"Preferences for {record.owner_id} are at version {record.version}, "
            f"not {expected_version}"
        )


def _appended(values: list[str], value: str) -> list[str]:
    return values if value in values else [*values, value]


def _parse_budget(value: str) -> Decimal:
    try:
        budget = Decimal(value)
    except InvalidOperation as exc:
        raise InvalidParameterError(f"Invalid budget: {value}") from exc
    if not budget.is_finite():
        raise InvalidParameterError(f"Invalid budget: {value}")
    if budget <= 0:
        raise InvalidParameterError("budget must be positive")
    return budget


def _apply(record: PreferenceRecord, update: PreferenceUpdate) -> None:
    value = update.value
    match update.preference_type:
        case "resort_type":
            if value not in RESORT_TYPES:
                raise InvalidParameterError(f"Unknown resort type: {value}")
            record.preferred_resort_types = _appended(record.preferred_resort_types, value)
        case "deal_type":
            if value not in DEAL_TYPES:
                raise InvalidParameterError(f"Unknown deal type: {value}")
            record.preferred_deal_types = _appended(record.preferred_deal_types, value)
        case "budget":
            record.max_budget_per_night = _parse_budget(value)
        case "discount_threshold":
            if not value.isdigit() or int(value) > 100:
                raise InvalidParameterError(f"Invalid discount threshold: {value}")
            record.min_acceptable_discount = int(value)


async def learn_preference(
    db: AsyncSession,
    owner_id: str,
    update: PreferenceUpdate,
    expected_version: int | None = None,
) -> Preferences:
    """Apply one learned preference and return the new version."""
    record = await _load_or_create(db, owner_id)
    _check_version(record, expected_version)
    _apply(record, update)
    record.version += 1
    record.updated_at = datetime.now(UTC)
    saved = await save_preference_record(db, record)
    logger.info(
        "preference_updated",
        owner_id=owner_id,
        preference_type=update.preference_type,
        version=saved.version,
    )
    return Preferences.from_record(saved)


async def record_deal_action(
    db: AsyncSession,
    owner_id: str,
    action: DealAction,
    expected_version: int | None = None,
) -> Preferences:
    """Count a viewed/saved/booked action and return the new version."""
    record = await _load_or_create(db, owner_id)
    _check_version(record, expected_version)
    match action:
        case "viewed":
            record.deals_viewed += 1
        case "saved":
            record.deals_saved += 1
        case "booked":
            record.deals_booked += 1
    record.version += 1
    record.updated_at = datetime.now(UTC)
    saved = await save_preference_record(db, record)
    logger.info("deal_action_recorded", owner_id=owner_id, action=action, version=saved.version)
    return Preferences.from_record(saved)
