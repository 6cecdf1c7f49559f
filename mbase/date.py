"""Dates in the Gregorian calendar, stored as Julian Day Numbers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

DAYS_PER_WEEK = 7


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _cmod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _cdiv(a, b)


class YearMonthDay(NamedTuple):
    year: int
    month: int
    day: int


def get_julian_day_number(year: int, month: int, day: int) -> int:
    """Return the Julian Day Number of a Gregorian date."""
    a = _cdiv(14 - month, 12)
    y = year + 4800 - a
    m = month + 12 * a - 3
    return (
        day
        + _cdiv(153 * m + 2, 5)
        + y * 365
        + _cdiv(y, 4)
        - _cdiv(y, 100)
        + _cdiv(y, 400)
        - 32045
    )


def get_year_month_day(julian_day_number: int) -> YearMonthDay:
    """Return the Gregorian date of a Julian Day Number."""
    a = julian_day_number + 32044
    b = _cdiv(4 * a + 3, 146097)
    c = a - _cdiv(b * 146097, 4)
    d = _cdiv(4 * c + 3, 1461)
    e = c - _cdiv(1461 * d, 4)
    m = _cdiv(5 * e + 2, 153)
    day = e - _cdiv(153 * m + 2, 5) + 1
    month = m + 3 - 12 * _cdiv(m, 10)
    year = b * 100 + d - 4800 + _cdiv(m, 10)
    return YearMonthDay(year, month, day)


JULIAN_DAY_OF_1970_01_01 = get_julian_day_number(1970, 1, 1)


@dataclass(frozen=True, order=True)
class Date:
    """An immutable date; a Julian Day Number of zero or less is invalid."""

    julian_day_number: int = 0

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> Date:
        return cls(get_julian_day_number(year, month, day))

    def valid(self) -> bool:
        return self.julian_day_number > 0

    def to_iso_string(self) -> str:
        """Format as ``yyyy-mm-dd``."""
        ymd = self.year_month_day()
        return f"{ymd.year:4d}-{ymd.month:02d}-{ymd.day:02d}"

    def year_month_day(self) -> YearMonthDay:
        return get_year_month_day(self.julian_day_number)

    def year(self) -> int:
        return self.year_month_day().year

    def month(self) -> int:
        return self.year_month_day().month

    def day(self) -> int:
        return self.year_month_day().day

    def week_day(self) -> int:
        """Day of the week, 0 for Sunday through 6 for Saturday."""
        return _cmod(self.julian_day_number + 1, DAYS_PER_WEEK)

    def __str__(self) -> str:
        return self.to_iso_string()