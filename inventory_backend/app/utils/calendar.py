"""
Jalali (Solar Hijri) calendar helpers.

The API speaks ``YYYY/MM/DD`` Jalali dates; storage and services work with
naive UTC ``datetime``/``date`` values. Conversion happens only here.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

import jdatetime

_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")


def normalize_digits(value: str) -> str:
    """Translate Persian and Arabic-Indic digits to ASCII."""
    return value.translate(_DIGITS)


def parse_jalali_date(date_string: Optional[str]) -> Optional[jdatetime.date]:
    """
    Parse ``YYYY/MM/DD`` (``-`` also accepted) into a Jalali date.

    Returns None for empty or malformed input.
    """
    if not date_string:
        return None
    parts = normalize_digits(date_string.strip()).replace("-", "/").split("/")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return jdatetime.date(year, month, day)
    except ValueError:
        return None


def jalali_to_utc(date_string: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Convert a Jalali calendar date to a UTC timestamp.

    Args:
        date_string: Jalali ``YYYY/MM/DD``
        end_of_day: return the last representable instant of that day
            instead of midnight (inclusive range upper bound)

    Returns:
        Naive UTC datetime, or None if the input is not a valid Jalali date
    """
    jalali = parse_jalali_date(date_string)
    if jalali is None:
        return None
    gregorian = jalali.togregorian()
    return datetime.combine(gregorian, time.max if end_of_day else time.min)


def utc_to_jalali(value: Union[datetime, date, None]) -> Optional[str]:
    """Format a stored date/datetime as a Jalali ``YYYY/MM/DD`` string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return jdatetime.date.fromgregorian(date=value).strftime("%Y/%m/%d")


def jalali_to_date(date_string: Optional[str]) -> Optional[date]:
    jalali = parse_jalali_date(date_string)
    return jalali.togregorian() if jalali else None


def jalali_today() -> jdatetime.date:
    return jdatetime.date.fromgregorian(date=datetime.utcnow().date())


def days_in_jalali_month(year: int, month: int) -> int:
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if jdatetime.date(year, 12, 1).isleap() else 29


def add_jalali_months(start: jdatetime.date, months: int) -> jdatetime.date:
    """Shift a Jalali date by whole months, clamping the day to the month length."""
    index = start.year * 12 + (start.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return jdatetime.date(year, month, min(start.day, days_in_jalali_month(year, month)))


def jalali_month_bounds(today: Optional[jdatetime.date] = None) -> Tuple[datetime, datetime]:
    """UTC range ``[first day 00:00, last day 23:59:59.999999]`` of the Jalali month containing ``today``."""
    today = today or jalali_today()
    first = jdatetime.date(today.year, today.month, 1)
    last = jdatetime.date(today.year, today.month, days_in_jalali_month(today.year, today.month))
    return (
        datetime.combine(first.togregorian(), time.min),
        datetime.combine(last.togregorian(), time.max),
    )


def jalali_year_bounds(year: int) -> Tuple[datetime, datetime]:
    first = jdatetime.date(year, 1, 1).togregorian()
    last = jdatetime.date(year, 12, days_in_jalali_month(year, 12)).togregorian()
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def previous_days(count: int, until: Optional[date] = None):
    """The last ``count`` Gregorian days ending at ``until`` (today by default), oldest first."""
    until = until or datetime.utcnow().date()
    return [until - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
