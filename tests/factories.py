"""Factory functions for creating model instances in tests."""

from datetime import UTC, date, datetime
from decimal import Decimal

from resort_deals.models import CalendarCacheEntry, Deal, PriceSnapshot, Resort


def make_resort(
    *,
    name: str = "Pop Century",
    resort_type: str = "value",
    official_disney: bool = True,
    location: str | None = "Walt Disney World",
    is_active: bool = True,
) -> Resort:
    return Resort(
        name=name,
        resort_type=resort_type,
        official_disney=official_disney,
        location=location,
        is_active=is_active,
    )


def make_deal(
    *,
    resort_id: int | None,
    title: str = "Save on rooms",
    deal_type: str = "room_discount",
    discount_percentage: int | None = 20,
    deal_price: Decimal | None = Decimal("200.00"),
    original_price: Decimal | None = Decimal("250.00"),
    valid_from: date = date(2025, 1, 1),
    valid_to: date = date(2025, 6, 30),
    travel_valid_from: date | None = date(2025, 3, 1),
    travel_valid_to: date | None = date(2025, 3, 31),
    deal_code: str | None = None,
    source_url: str = "https://disneyworld.disney.go.com/special-offers/",
    is_active: bool = True,
    priority: int = 0,
    quality_score: Decimal | None = None,
) -> Deal:
    return Deal(
        resort_id=resort_id,
        title=title,
        deal_type=deal_type,
        discount_percentage=discount_percentage,
        deal_price=deal_price,
        original_price=original_price,
        valid_from=valid_from,
        valid_to=valid_to,
        travel_valid_from=travel_valid_from,
        travel_valid_to=travel_valid_to,
        deal_code=deal_code,
        source_url=source_url,
        is_active=is_active,
        priority=priority,
        quality_score=quality_score,
    )


def make_cache_entry(
    *,
    cache_date: date,
    deal_count: int = 0,
    best_discount_percentage: int | None = None,
    deal_quality: str = "none",
    last_updated: datetime | None = None,
) -> CalendarCacheEntry:
    return CalendarCacheEntry(
        cache_date=cache_date,
        deal_count=deal_count,
        best_discount_percentage=best_discount_percentage,
        deal_quality=deal_quality,
        deals_by_type={},
        last_updated=last_updated or datetime.now(UTC),
    )


def make_snapshot(
    *,
    resort_id: int,
    price_per_night: Decimal,
    snapshot_date: datetime,
    room_type: str = "standard",
    nights: int = 1,
) -> PriceSnapshot:
    return PriceSnapshot(
        resort_id=resort_id,
        room_type=room_type,
        check_in_date=snapshot_date.date(),
        nights=nights,
        price_per_night=price_per_night,
        total_price=price_per_night * nights,
        snapshot_date=snapshot_date,
    )
