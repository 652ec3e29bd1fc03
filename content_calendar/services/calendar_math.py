"""Pure calendar calculations for the month and year grids.

Months are zero-indexed (0 = January) and weekdays are Sunday-first
(0 = Sunday), matching the column order of the rendered grid.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

GRID_SIZE = 42  # 6 rows * 7 days, constant height across months

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
SHORT_MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEKDAY_LABELS = ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]
WEEKDAY_INITIALS = ["S", "M", "T", "W", "T", "F", "S"]

_DATE_KEY_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


class DateKeyError(ValueError):
    """Raised when a string is not a valid YYYY-MM-DD date key."""


@dataclass(frozen=True)
class DayCell:
    """One entry of the month grid."""

    date: date
    is_current_month: bool
    is_today: bool

    @property
    def key(self) -> str:
        return to_date_key(self.date)


def make_date(year: int, month: int, day: int) -> date:
    """Build a date, carrying out-of-range months and days into neighbours.

    ``make_date(2024, -1, 1)`` is 2023-12-01 and ``make_date(2024, 2, 0)`` is
    the last day of February 2024.
    """
    carry_year, month_index = divmod(month, 12)
    first = date(year + carry_year, month_index + 1, 1)
    return first + timedelta(days=day - 1)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month, via day 0 of the following month."""
    return make_date(year, month + 1, 0).day


def first_weekday_of_month(year: int, month: int) -> int:
    """Sunday-first weekday index of the 1st of the month."""
    return (make_date(year, month, 1).weekday() + 1) % 7


def is_same_day(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month and a.day == b.day


def is_today(value: date, today: Optional[date] = None) -> bool:
    return is_same_day(value, today or date.today())


def build_month_grid(year: int, month: int, today: Optional[date] = None) -> list[DayCell]:
    """Return the 42 day cells displayed for a month.

    The grid starts on the Sunday on or before the 1st, so leading cells are
    trailing days of the previous month and the remainder is filled with
    the next month's first days.
    """
    today = today or date.today()
    first = make_date(year, month, 1)
    target = (first.year, first.month)
    start = first - timedelta(days=first_weekday_of_month(year, month))

    cells: list[DayCell] = []
    for offset in range(GRID_SIZE):
        current = start + timedelta(days=offset)
        cells.append(
            DayCell(
                date=current,
                is_current_month=(current.year, current.month) == target,
                is_today=is_same_day(current, today),
            )
        )
    return cells


def to_date_key(value: date) -> str:
    """Canonical zero-padded ``YYYY-MM-DD`` key."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def from_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key; inverse of :func:`to_date_key`."""
    match = _DATE_KEY_RE.fullmatch(key) if isinstance(key, str) else None
    if match is None:
        raise DateKeyError(f"Malformed date key: {key!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise DateKeyError(f"Invalid calendar date: {key!r}") from exc


def month_name(month: int) -> str:
    _check_month(month)
    return MONTH_NAMES[month]


def short_month_name(month: int) -> str:
    _check_month(month)
    return SHORT_MONTH_NAMES[month]


def _check_month(month: int) -> None:
    if not 0 <= month < 12:
        raise ValueError(f"Month index must be within 0..11, got {month}")


def year_bounds(year: int) -> tuple[str, str]:
    """Inclusive first and last date keys of a year."""
    return f"{year:04d}-01-01", f"{year:04d}-12-31"


def year_options(current_year: int, span: int = 10) -> list[int]:
    """Years offered by the header picker, ``span`` either side."""
    return list(range(current_year - span, current_year + span + 1))


def format_display_date(value: date) -> str:
    """Long form used as the day sheet title, e.g. "Friday, March 15, 2024"."""
    weekday = WEEKDAY_NAMES[(value.weekday() + 1) % 7]
    return f"{weekday}, {MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"
