from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.config import settings
from resort_deals.exceptions import InvalidParameterError
from resort_deals.models import Deal
from resort_deals.repositories import deal as deal_repository
from resort_deals.repositories.errors import unavailable_on_error
from resort_deals.services import comparison
from resort_deals.services.comparison import (
    compare_date_ranges,
    compare_resorts,
    compare_weekly,
    find_best_deal,
    find_flexible_dates,
    select_best_deal,
)
from resort_deals.services.windows import CandidateWindow
from tests.factories import make_deal, make_resort
from tests.seeds import Seed


def _window(check_in: date, check_out: date) -> CandidateWindow:
    return CandidateWindow(check_in, check_out, 0)


def _require_sqlite(db: AsyncSession) -> None:
    if db.bind.dialect.name != "sqlite":
        pytest.skip("relies on SQLite reporting a missing table as OperationalError")


async def _run_failing_statement(db: AsyncSession) -> None:
    with unavailable_on_error("find_eligible_deals"):
        await db.execute(text("SELECT * FROM no_such_table"))


# ---------------------------------------------------------------------------
# 1. Best-deal selection
# ---------------------------------------------------------------------------
def test_lowest_total_wins_over_bigger_discount() -> None:
    bigger_discount = make_deal(resort_id=None, discount_percentage=20, deal_price=Decimal("200"))
    cheaper = make_deal(resort_id=None, discount_percentage=10, deal_price=Decimal("180"))

    best = select_best_deal([bigger_discount, cheaper], nights=5)

    assert best is not None
    assert best.discount_percentage == 10
    assert best.price_per_night == Decimal("180")
    assert best.total_price == Decimal("900")


def test_tie_keeps_first_deal() -> None:
    first = make_deal(resort_id=None, title="First", deal_price=Decimal("150"))
    second = make_deal(resort_id=None, title="Second", deal_price=Decimal("150"))

    best = select_best_deal([first, second], nights=3)

    assert best is not None
    assert best.title == "First"


def test_no_deals_is_none() -> None:
    assert select_best_deal([], nights=3) is None


def test_unpriced_deal_only_wins_when_alone() -> None:
    unpriced = make_deal(resort_id=None, title="Unpriced", deal_price=None, original_price=None)
    priced = make_deal(resort_id=None, title="Priced", deal_price=Decimal("400"))

    mixed = select_best_deal([unpriced, priced], nights=2)
    alone = select_best_deal([unpriced], nights=2)

    assert mixed is not None
    assert mixed.title == "Priced"
    assert alone is not None
    assert alone.title == "Unpriced"


# ---------------------------------------------------------------------------
# 2. Eligibility
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_find_best_deal_picks_cheapest_eligible(seeded: Seed) -> None:
    best = await find_best_deal(seeded.db, _window(date(2025, 3, 1), date(2025, 3, 6)))

    assert best is not None
    assert best.deal_id == seeded.deals["caribbean"].id
    assert best.total_price == Decimal("900")
    assert best.resort is not None
    assert best.resort.name == "Caribbean Beach"


@pytest.mark.asyncio
async def test_inactive_deal_is_never_selected(seeded: Seed) -> None:
    # The inactive 50/night deal would otherwise be cheapest
    best = await find_best_deal(seeded.db, _window(date(2025, 3, 1), date(2025, 3, 6)))

    assert best is not None
    assert best.deal_id != seeded.deals["expired"].id


@pytest.mark.asyncio
async def test_stay_ending_on_travel_end_is_eligible(seeded: Seed) -> None:
    best = await find_best_deal(seeded.db, _window(date(2025, 3, 26), date(2025, 3, 31)))

    assert best is not None
    assert best.deal_id == seeded.deals["caribbean"].id


@pytest.mark.asyncio
async def test_stay_past_travel_window_has_no_deal(seeded: Seed) -> None:
    best = await find_best_deal(seeded.db, _window(date(2025, 3, 27), date(2025, 4, 1)))

    assert best is None


@pytest.mark.asyncio
async def test_resort_type_filter(seeded: Seed) -> None:
    best = await find_best_deal(
        seeded.db, _window(date(2025, 3, 1), date(2025, 3, 6)), resort_types=["value"]
    )

    assert best is not None
    assert best.deal_id == seeded.deals["pop"].id
    assert best.total_price == Decimal("1000")


@pytest.mark.asyncio
async def test_original_price_used_without_deal_price(seeded: Seed) -> None:
    best = await find_best_deal(seeded.db, _window(date(2025, 4, 5), date(2025, 4, 7)))

    assert best is not None
    assert best.deal_id == seeded.deals["swan"].id
    assert best.price_per_night == Decimal("220")
    assert best.total_price == Decimal("440")


@pytest.mark.asyncio
async def test_fetch_limit_can_hide_cheaper_smaller_discount(
    db: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    resort = make_resort()
    db.add(resort)
    await db.flush()
    db.add_all(
        [
            make_deal(resort_id=resort.id, discount_percentage=pct, deal_price=Decimal("200"))
            for pct in range(20, 30)
        ]
    )
    cheap = make_deal(
        resort_id=resort.id,
        title="Smallest discount",
        discount_percentage=5,
        deal_price=Decimal("100"),
    )
    db.add(cheap)
    await db.flush()
    window = _window(date(2025, 3, 2), date(2025, 3, 5))

    # Only the ten biggest discounts are fetched
    best = await find_best_deal(db, window)
    assert best is not None
    assert best.deal_id != cheap.id
    assert best.total_price == Decimal("600")

    monkeypatch.setattr(settings, "selector_fetch_limit", 11)
    best = await find_best_deal(db, window)
    assert best is not None
    assert best.deal_id == cheap.id
    assert best.total_price == Decimal("300")


# ---------------------------------------------------------------------------
# 3. Date-range mode
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_compare_date_ranges(seeded: Seed) -> None:
    result = await compare_date_ranges(seeded.db, date(2025, 3, 1), date(2025, 3, 8), nights=5)

    assert len(result.comparisons) == 3
    assert [item.window.check_in for item in result.comparisons] == [
        date(2025, 3, 1),
        date(2025, 3, 2),
        date(2025, 3, 3),
    ]
    assert all(item.total_price == Decimal("900") for item in result.comparisons)
    assert result.summary.average_price == 900
    assert result.summary.potential_savings == 0
    assert result.summary.options_analyzed == 3


@pytest.mark.asyncio
async def test_compare_date_ranges_sorted_by_total(db: AsyncSession) -> None:
    resort = make_resort()
    db.add(resort)
    await db.flush()
    db.add_all(
        [
            make_deal(
                resort_id=resort.id,
                deal_price=Decimal("300"),
                travel_valid_from=date(2025, 3, 1),
                travel_valid_to=date(2025, 3, 31),
            ),
            make_deal(
                resort_id=resort.id,
                deal_price=Decimal("100"),
                travel_valid_from=date(2025, 3, 5),
                travel_valid_to=date(2025, 3, 31),
            ),
        ]
    )
    await db.flush()

    result = await compare_date_ranges(db, date(2025, 3, 1), date(2025, 3, 9), nights=3)

    totals = [item.total_price for item in result.comparisons]
    assert totals == sorted(totals)
    assert result.summary.best is not None
    assert result.summary.best.total_price == Decimal("300")
    assert result.summary.worst is not None
    assert result.summary.worst.total_price == Decimal("900")
    assert result.summary.potential_savings == Decimal("600")


@pytest.mark.asyncio
async def test_compare_date_ranges_with_no_deals(db: AsyncSession) -> None:
    result = await compare_date_ranges(db, date(2025, 3, 1), date(2025, 3, 9), nights=3)

    assert result.comparisons == []
    assert result.summary.best is None
    assert result.summary.average_price is None
    assert result.summary.options_analyzed == 0


@pytest.mark.asyncio
async def test_failing_window_is_skipped(seeded: Seed, monkeypatch: pytest.MonkeyPatch) -> None:
    _require_sqlite(seeded.db)
    original = deal_repository.find_eligible_deals

    async def flaky(
        db: AsyncSession, check_in: date, check_out: date, **kwargs: object
    ) -> list[Deal]:
        if check_in == date(2025, 3, 2):
            await _run_failing_statement(db)
        return await original(db, check_in, check_out, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(comparison, "find_eligible_deals", flaky)

    result = await compare_date_ranges(seeded.db, date(2025, 3, 1), date(2025, 3, 8), nights=5)

    assert [item.window.check_in for item in result.comparisons] == [
        date(2025, 3, 1),
        date(2025, 3, 3),
    ]
    assert result.summary.options_analyzed == 2


@pytest.mark.asyncio
async def test_invalid_range_fails_before_querying(
    db: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def unreachable(*args: object, **kwargs: object) -> list[Deal]:
        raise AssertionError("repository should not be called")

    monkeypatch.setattr(comparison, "find_eligible_deals", unreachable)

    with pytest.raises(InvalidParameterError):
        await compare_date_ranges(db, date(2025, 3, 1), date(2025, 3, 3), nights=7)


# ---------------------------------------------------------------------------
# 4. Resort mode
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_compare_resorts_one_row_per_active_resort(seeded: Seed) -> None:
    result = await compare_resorts(seeded.db, date(2025, 3, 12), date(2025, 3, 15))

    names = [row.resort.name for row in result.comparisons]
    assert len(names) == 5
    assert "Closed Lodge" not in names
    assert names[0] == "Caribbean Beach"
    assert names[-1] == "Saratoga Springs"
    assert result.best_deal_percentage == 10


@pytest.mark.asyncio
async def test_compare_resorts_estimates_resorts_without_deals(seeded: Seed) -> None:
    result = await compare_resorts(seeded.db, date(2025, 3, 12), date(2025, 3, 15))
    rows = {row.resort.name: row for row in result.comparisons}

    saratoga = rows["Saratoga Springs"]
    assert saratoga.deal is None
    assert saratoga.estimated_price == Decimal("550")
    assert saratoga.estimated_total == Decimal("1650")

    # Swan's deal only covers April
    swan = rows["Walt Disney World Swan"]
    assert swan.deal is None
    assert swan.estimated_total == Decimal("600")

    floridian = rows["Grand Floridian"]
    assert floridian.deal is not None
    assert floridian.deal.total_price == Decimal("1500")
    assert floridian.estimated_price is None


@pytest.mark.asyncio
async def test_compare_resorts_failed_lookup_gets_estimate(
    seeded: Seed, monkeypatch: pytest.MonkeyPatch
) -> None:
    _require_sqlite(seeded.db)
    original = deal_repository.find_eligible_deals
    floridian_id = seeded.resorts["floridian"].id

    async def flaky(
        db: AsyncSession, check_in: date, check_out: date, **kwargs: object
    ) -> list[Deal]:
        if kwargs.get("resort_id") == floridian_id:
            await _run_failing_statement(db)
        return await original(db, check_in, check_out, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(comparison, "find_eligible_deals", flaky)

    result = await compare_resorts(seeded.db, date(2025, 3, 12), date(2025, 3, 15))
    rows = {row.resort.name: row for row in result.comparisons}

    assert len(rows) == 5
    assert rows["Grand Floridian"].deal is None
    assert rows["Grand Floridian"].estimated_total == Decimal("1350")


@pytest.mark.asyncio
async def test_compare_resorts_rejects_reversed_dates(db: AsyncSession) -> None:
    with pytest.raises(InvalidParameterError):
        await compare_resorts(db, date(2025, 3, 15), date(2025, 3, 15))


# ---------------------------------------------------------------------------
# 5. Flexible and weekly modes
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_find_flexible_dates(db: AsyncSession) -> None:
    resort = make_resort()
    db.add(resort)
    await db.flush()
    db.add_all(
        [
            make_deal(
                resort_id=resort.id,
                title="Early March",
                deal_price=Decimal("100"),
                travel_valid_from=date(2025, 3, 1),
                travel_valid_to=date(2025, 3, 10),
            ),
            make_deal(
                resort_id=resort.id,
                title="All March",
                deal_price=Decimal("300"),
                travel_valid_from=date(2025, 3, 1),
                travel_valid_to=date(2025, 3, 31),
            ),
        ]
    )
    await db.flush()

    result = await find_flexible_dates(db, date(2025, 3, 8), nights=3, flex_days=3)

    assert len(result.all_suggestions) == 7
    assert result.target_dates is not None
    assert result.target_dates.window.offset == 0
    assert result.target_dates.total_price == Decimal("900")
    assert result.best_alternative is not None
    assert result.best_alternative.total_price == Decimal("300")
    assert result.best_alternative.window.offset < 0
    assert result.potential_savings == Decimal("600")


@pytest.mark.asyncio
async def test_find_flexible_dates_without_target_deal(seeded: Seed) -> None:
    # Mar 29 + 3 nights runs past every March deal; Mar 27 and 28 still fit
    result = await find_flexible_dates(seeded.db, date(2025, 3, 29), nights=3, flex_days=2)

    assert result.target_dates is None
    assert [item.window.offset for item in result.all_suggestions] == [-2, -1]
    assert result.best_alternative is not None
    assert result.potential_savings == 0


@pytest.mark.asyncio
async def test_compare_weekly(seeded: Seed) -> None:
    result = await compare_weekly(seeded.db, "2025-03")

    # Feb 23 and Mar 30 weeks fall outside every travel window
    assert [item.window.offset for item in result.weeks] == [2, 3, 4, 5]
    assert all(item.total_price == Decimal("1080") for item in result.weeks)
    assert result.summary.average_price == 1080


@pytest.mark.asyncio
async def test_compare_weekly_rejects_bad_month(db: AsyncSession) -> None:
    with pytest.raises(InvalidParameterError):
        await compare_weekly(db, "2025-13")
