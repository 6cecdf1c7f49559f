import datetime

import pytest

from mbase.date import (
    JULIAN_DAY_OF_1970_01_01,
    Date,
    YearMonthDay,
    get_julian_day_number,
    get_year_month_day,
)


def _days(start, count):
    first = datetime.date(*start)
    return [first + datetime.timedelta(days=i) for i in range(count)]


def test_epoch_julian_day():
    jdn = get_julian_day_number(1970, 1, 1)
    assert jdn == 2440588
    assert JULIAN_DAY_OF_1970_01_01 == jdn
    assert get_year_month_day(2440588) == YearMonthDay(1970, 1, 1)


def test_default_date_is_invalid():
    assert not Date().valid()
    assert Date.from_ymd(2000, 1, 1).valid()


@pytest.mark.parametrize("start", [(1900, 1, 1), (1999, 12, 1), (2000, 2, 1), (2100, 2, 1), (2499, 11, 1)])
def test_round_trip_through_julian_day(start):
    for d in _days(start, 120):
        jdn = get_julian_day_number(d.year, d.month, d.day)
        assert get_year_month_day(jdn) == YearMonthDay(d.year, d.month, d.day)


def test_consecutive_days_have_consecutive_numbers():
    days = _days((1900, 1, 1), 365 * 4 + 10)
    numbers = [get_julian_day_number(d.year, d.month, d.day) for d in days]
    assert all(b - a == 1 for a, b in zip(numbers, numbers[1:]))


def test_julian_day_differences_match_ordinals():
    a = datetime.date(1970, 1, 1)
    b = datetime.date(2024, 2, 29)
    assert (
        Date.from_ymd(b.year, b.month, b.day).julian_day_number - JULIAN_DAY_OF_1970_01_01
        == b.toordinal() - a.toordinal()
    )


def test_week_day_matches_calendar():
    for d in _days((2023, 12, 20), 30):
        date = Date.from_ymd(d.year, d.month, d.day)
        assert date.week_day() == d.isoweekday() % 7


def test_accessors_and_iso_string():
    for d in _days((2016, 2, 25), 10):
        date = Date.from_ymd(d.year, d.month, d.day)
        assert (date.year(), date.month(), date.day()) == (d.year, d.month, d.day)
        assert date.to_iso_string() == d.isoformat()
        assert str(date) == d.isoformat()


def test_constructing_from_julian_day_number():
    date = Date.from_ymd(2012, 7, 4)
    assert Date(date.julian_day_number) == date


def test_ordering():
    earlier = Date.from_ymd(2012, 7, 4)
    later = Date.from_ymd(2012, 7, 5)
    assert earlier < later
    assert sorted([later, earlier]) == [earlier, later]