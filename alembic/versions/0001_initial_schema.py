"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:  # type: ignore[type-arg]
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "resorts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("resort_type", sa.String(length=20), nullable=False),
        sa.Column("official_disney", sa.Boolean(), nullable=False),
        sa.Column("location", sa.String(length=150), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "resort_type IN ('value', 'moderate', 'deluxe', 'villa', 'partner')",
            name=op.f("ck_resorts_resort_type_valid"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_resorts")),
        sa.UniqueConstraint("name", name=op.f("uq_resorts_name")),
    )
    op.create_index(op.f("ix_resorts_resort_type"), "resorts", ["resort_type"])

    op.create_table(
        "deals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("resort_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("deal_type", sa.String(length=30), nullable=False),
        sa.Column("discount_percentage", sa.Integer(), nullable=True),
        sa.Column("original_price", sa.Numeric(8, 2), nullable=True),
        sa.Column("deal_price", sa.Numeric(8, 2), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=False),
        sa.Column("valid_to", sa.Date(), nullable=False),
        sa.Column("booking_deadline", sa.Date(), nullable=True),
        sa.Column("travel_valid_from", sa.Date(), nullable=True),
        sa.Column("travel_valid_to", sa.Date(), nullable=True),
        sa.Column("deal_code", sa.String(length=50), nullable=True),
        sa.Column("source_url", sa.String(length=500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("quality_score", sa.Numeric(5, 2), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name=op.f("ck_deals_discount_percentage_range"),
        ),
        sa.CheckConstraint("deal_price > 0", name=op.f("ck_deals_deal_price_positive")),
        sa.CheckConstraint("original_price > 0", name=op.f("ck_deals_original_price_positive")),
        sa.CheckConstraint(
            "valid_from <= valid_to", name=op.f("ck_deals_valid_from_before_valid_to")
        ),
        sa.CheckConstraint(
            "travel_valid_from <= travel_valid_to",
            name=op.f("ck_deals_travel_valid_from_before_travel_valid_to"),
        ),
        sa.ForeignKeyConstraint(
            ["resort_id"], ["resorts.id"], name=op.f("fk_deals_resort_id_resorts")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_deals")),
    )
    op.create_index(op.f("ix_deals_resort_id"), "deals", ["resort_id"])
    op.create_index(op.f("ix_deals_is_active"), "deals", ["is_active"])
    op.create_index(op.f("ix_deals_travel_valid_from"), "deals", ["travel_valid_from"])
    op.create_index(op.f("ix_deals_travel_valid_to"), "deals", ["travel_valid_to"])

    op.create_table(
        "deal_calendar_cache",
        sa.Column("cache_date", sa.Date(), nullable=False),
        sa.Column("deal_count", sa.Integer(), nullable=False),
        sa.Column("best_discount_percentage", sa.Integer(), nullable=True),
        sa.Column("best_deal_id", sa.Integer(), nullable=True),
        sa.Column("deal_quality", sa.String(length=20), nullable=False),
        sa.Column("deals_by_type", sa.JSON(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("cache_date", name=op.f("pk_deal_calendar_cache")),
    )

    op.create_table(
        "price_snapshots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("resort_id", sa.Integer(), nullable=False),
        sa.Column("deal_id", sa.Integer(), nullable=True),
        sa.Column("room_type", sa.String(length=50), nullable=False),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("nights", sa.Integer(), nullable=False),
        sa.Column("price_per_night", sa.Numeric(8, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("source", sa.String(length=100), nullable=True),
        sa.Column("snapshot_date", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "price_per_night > 0", name=op.f("ck_price_snapshots_price_per_night_positive")
        ),
        sa.CheckConstraint("nights >= 1", name=op.f("ck_price_snapshots_nights_positive")),
        sa.ForeignKeyConstraint(
            ["resort_id"], ["resorts.id"], name=op.f("fk_price_snapshots_resort_id_resorts")
        ),
        sa.ForeignKeyConstraint(
            ["deal_id"], ["deals.id"], name=op.f("fk_price_snapshots_deal_id_deals")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_price_snapshots")),
    )
    op.create_index(op.f("ix_price_snapshots_resort_id"), "price_snapshots", ["resort_id"])
    op.create_index(op.f("ix_price_snapshots_snapshot_date"), "price_snapshots", ["snapshot_date"])

    op.create_table(
        "preference_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("preferred_resort_types", sa.JSON(), nullable=False),
        sa.Column("preferred_deal_types", sa.JSON(), nullable=False),
        sa.Column("max_budget_per_night", sa.Numeric(8, 2), nullable=True),
        sa.Column("min_acceptable_discount", sa.Integer(), nullable=True),
        sa.Column("deals_viewed", sa.Integer(), nullable=False),
        sa.Column("deals_saved", sa.Integer(), nullable=False),
        sa.Column("deals_booked", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_preference_records")),
        sa.UniqueConstraint("owner_id", name=op.f("uq_preference_records_owner_id")),
    )


def downgrade() -> None:
    op.drop_table("preference_records")
    op.drop_index(op.f("ix_price_snapshots_snapshot_date"), table_name="price_snapshots")
    op.drop_index(op.f("ix_price_snapshots_resort_id"), table_name="price_snapshots")
    op.drop_table("price_snapshots")
    op.drop_table("deal_calendar_cache")
    op.drop_index(op.f("ix_deals_travel_valid_to"), table_name="deals")
    op.drop_index(op.f("ix_deals_travel_valid_from"), table_name="deals")
    op.drop_index(op.f("ix_deals_is_active"), table_name="deals")
    op.drop_index(op.f("ix_deals_resort_id"), table_name="deals")
    op.drop_table("deals")
    op.drop_index(op.f("ix_resorts_resort_type"), table_name="resorts")
    op.drop_table("resorts")
