"""Candidate stay windows for the comparison modes.

Each generator validates its inputs before producing anything, so callers can
reject a request without touching the database.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta

from resort_deals.config import settings
from resort_deals.exceptions import InvalidParameterError

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class CandidateWindow:
    """A check-in/check-out pair to price.

    ``offset`` is the day offset from the range start (date-range mode), from
    the target date (flexible mode), or the 1-based week number (weekly mode).
    """

    check_in: date
    check_out: date
    offset: int

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


def _check_window_count(count: int) -> None:
    if count > settings.max_comparison_windows:
        raise InvalidParameterError(
            f"Request would compare {count} date windows; "
            f"the maximum is {settings.max_comparison_windows}"
        )


def _check_nights(nights: int) -> None:
    if nights < 1:
        raise InvalidParameterError("nights must be at least 1")


def date_range_windows(start: date, end: date, nights: int = 7) -> list[CandidateWindow]:
    """Every stay of ``nights`` nights that fits between ``start`` and ``end``."""
    _check_nights(nights)
    total_days = (end - start).days
    if total_days < nights:
        raise InvalidParameterError("Date range too short for requested nights")
    _check_window_count(total_days - nights + 1)

    windows = []
    for offset in range(total_days - nights + 1):
        check_in = start + timedelta(days=offset)
        windows.append(CandidateWindow(check_in, check_in + timedelta(days=nights), offset))
    return windows


def flexible_windows(target: date, nights: int = 7, flex_days: int = 3) -> list[CandidateWindow]:
    """Stays starting up to ``flex_days`` before or after ``target``."""
    _check_nights(nights)
    if flex_days < 0:
        raise InvalidParameterError("flex_days must not be negative")
    _check_window_count(2 * flex_days + 1)

    windows = []
    for offset in range(-flex_days, flex_days + 1):
        check_in = target + timedelta(days=offset)
        windows.append(CandidateWindow(check_in, check_in + timedelta(days=nights), offset))
    return windows


def parse_month(value: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month)."""
    match = MONTH_PATTERN.match(value)
    if match is None:
        raise InvalidParameterError("month must use the YYYY-MM format")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidParameterError(f"Invalid month: {value}")
    return year, month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_windows(year: int, month: int) -> list[CandidateWindow]:
    """One Sunday-to-Saturday window per week overlapping the month.

    Weeks are not clipped, so the first and last windows can start or end in
    the neighbouring months.
    """
    first_day, last_day = month_bounds(year, month)
    windows = []
    week_start = start_of_week(first_day)
    week_number = 1
    while week_start <= last_day:
        windows.append(CandidateWindow(week_start, week_start + timedelta(days=6), week_number))
        week_start += timedelta(days=7)
        week_number += 1
    return windows
