"""
Jalali calendar conversion tests.
"""

from datetime import date, datetime, time

import jdatetime
import pytest

from inventory_backend.app.utils.calendar import (
    add_jalali_months,
    days_in_jalali_month,
    jalali_month_bounds,
    jalali_to_utc,
    normalize_digits,
    parse_jalali_date,
    utc_to_jalali,
)


def test_nowruz_conversion():
    assert jalali_to_utc("1403/01/01") == datetime(2024, 3, 20)
    assert jalali_to_utc("1403-01-01", end_of_day=True) == datetime.combine(date(2024, 3, 20), time.max)


def test_utc_to_jalali_accepts_dates_and_datetimes():
    assert utc_to_jalali(datetime(2024, 3, 20, 23, 59)) == "1403/01/01"
    assert utc_to_jalali(date(2024, 3, 19)) == "1402/12/29"
    assert utc_to_jalali(None) is None


def test_persian_digits():
    assert normalize_digits("۱۴۰۳/۰۱/۰۱") == "1403/01/01"
    assert jalali_to_utc("۱۴۰۳/۰۱/۰۱") == datetime(2024, 3, 20)


@pytest.mark.parametrize("value", [None, "", "1403/01", "1403/13/01", "1402/12/30", "abc/de/fg"])
def test_invalid_dates(value):
    assert parse_jalali_date(value) is None
    assert jalali_to_utc(value) is None


def test_month_lengths():
    assert days_in_jalali_month(1403, 1) == 31
    assert days_in_jalali_month(1403, 7) == 30
    assert days_in_jalali_month(1403, 12) == 30
    assert days_in_jalali_month(1402, 12) == 29


def test_add_months_rolls_over_year():
    assert add_jalali_months(jdatetime.date(1402, 11, 30), 2) == jdatetime.date(1403, 1, 30)
    assert add_jalali_months(jdatetime.date(1402, 10, 30), 2) == jdatetime.date(1402, 12, 29)


def test_month_bounds():
    start, end = jalali_month_bounds(jdatetime.date(1403, 1, 15))
    assert start == datetime(2024, 3, 20)
    assert end == datetime.combine(date(2024, 4, 19), time.max)
