"""Calendar date validation for the order_date field.

Two layouts are supported, chosen once per deployment in orders.toml:

    DD-MM-YYYY   15-08-2024   (default)
    YYYY-MM-DD   2024-08-15

Day and month may be written with one or two digits, the year with exactly
four. The year must fall inside an inclusive configurable range.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DMY = "DD-MM-YYYY"
YMD = "YYYY-MM-DD"

DEFAULT_MIN_YEAR = 1999
DEFAULT_MAX_YEAR = 2025

_PATTERNS = {
    DMY: re.compile(r"(?P<day>\d{1,2})-(?P<month>\d{1,2})-(?P<year>\d{4})"),
    YMD: re.compile(r"(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"),
}

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


@dataclass(frozen=True)
class DateValidator:
    """Checks date strings against one layout and a year range."""

    fmt: str = DMY
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR

    def __post_init__(self) -> None:
        if self.fmt not in _PATTERNS:
            msg = f"unsupported date format {self.fmt!r} (expected one of {', '.join(_PATTERNS)})"
            raise ValueError(msg)
        if self.min_year > self.max_year:
            msg = f"min_year {self.min_year} is after max_year {self.max_year}"
            raise ValueError(msg)

    def is_valid(self, value: str) -> bool:
        """True if ``value`` is a real calendar date inside the year range."""
        m = _PATTERNS[self.fmt].fullmatch(value.strip())
        if m is None:
            return False
        day, month, year = int(m["day"]), int(m["month"]), int(m["year"])
        if not self.min_year <= year <= self.max_year:
            return False
        if not 1 <= month <= 12:
            return False
        return 1 <= day <= days_in_month(year, month)

    @property
    def hint(self) -> str:
        return f"{self.fmt}, years {self.min_year}-{self.max_year}"
