"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resort_deals.db.session import Base

RESORT_TYPES = ("value", "moderate", "deluxe", "villa", "partner")

DEAL_TYPES = (
    "room_discount",
    "free_dining",
    "room_upgrade",
    "package_discount",
    "free_nights",
    "passholder_exclusive",
    "other",
)

DEAL_QUALITIES = ("excellent", "great", "good", "standard", "none")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Resort(Base):
    __tablename__ = "resorts"
    __table_args__ = (
        CheckConstraint(
            "resort_type IN ('value', 'moderate', 'deluxe', 'villa', 'partner')",
            name="resort_type_valid",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150), unique=True)
    resort_type: Mapped[str] = mapped_column(String(20), index=True)
    official_disney: Mapped[bool] = mapped_column(default=True)
    location: Mapped[str | None] = mapped_column(String(150))
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    deals: Mapped[list["Deal"]] = relationship(back_populates="resort")


class Deal(Base):
    __tablename__ = "deals"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="discount_percentage_range",
        ),
        CheckConstraint("deal_price > 0", name="deal_price_positive"),
        CheckConstraint("original_price > 0", name="original_price_positive"),
        CheckConstraint("valid_from <= valid_to", name="valid_from_before_valid_to"),
        CheckConstraint(
            "travel_valid_from <= travel_valid_to",
            name="travel_valid_from_before_travel_valid_to",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    resort_id: Mapped[int | None] = mapped_column(ForeignKey("resorts.id"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    deal_type: Mapped[str] = mapped_column(String(30), default="other")
    discount_percentage: Mapped[int | None]
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    deal_price: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    valid_from: Mapped[date]
    valid_to: Mapped[date]
    booking_deadline: Mapped[date | None]
    travel_valid_from: Mapped[date | None] = mapped_column(index=True)
    travel_valid_to: Mapped[date | None] = mapped_column(index=True)
    deal_code: Mapped[str | None] = mapped_column(String(50))
    source_url: Mapped[str] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(default=True, index=True)
    priority: Mapped[int] = mapped_column(default=0)
    quality_score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    resort: Mapped[Optional["Resort"]] = relationship(back_populates="deals")


class CalendarCacheEntry(Base):
    """Per-day summary of active deals, regenerated wholesale by the refresh job."""

    __tablename__ = "deal_calendar_cache"

    cache_date: Mapped[date] = mapped_column(primary_key=True)
    deal_count: Mapped[int] = mapped_column(default=0)
    best_discount_percentage: Mapped[int | None]
    best_deal_id: Mapped[int | None]
    deal_quality: Mapped[str] = mapped_column(String(20), default="none")
    deals_by_type: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class PriceSnapshot(Base):
    __tablename__ = "price_snapshots"
    __table_args__ = (
        CheckConstraint("price_per_night > 0", name="price_per_night_positive"),
        CheckConstraint("nights >= 1", name="nights_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    resort_id: Mapped[int] = mapped_column(ForeignKey("resorts.id"), index=True)
    deal_id: Mapped[int | None] = mapped_column(ForeignKey("deals.id"))
    room_type: Mapped[str] = mapped_column(String(50), default="standard")
    check_in_date: Mapped[date]
    nights: Mapped[int] = mapped_column(default=1)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(8, 2))
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    source: Mapped[str | None] = mapped_column(String(100))
    snapshot_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class PreferenceRecord(Base):
    """Learned booking preferences for one owner.

    Every change goes through services.preference and bumps ``version``.
    """

    __tablename__ = "preference_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(100), unique=True)
    version: Mapped[int] = mapped_column(default=1)
    preferred_resort_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    preferred_deal_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    max_budget_per_night: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    min_acceptable_discount: Mapped[int | None]
    deals_viewed: Mapped[int] = mapped_column(default=0)
    deals_saved: Mapped[int] = mapped_column(default=0)
    deals_booked: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
