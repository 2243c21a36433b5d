"""
Request parsing helpers shared by the v1 endpoints.

Jalali dates are converted here, at the API edge; services only ever see
``datetime``/``date`` values.
"""

from datetime import date, datetime
from typing import Optional, Tuple

from inventory_backend.app.core.exceptions import InvalidDateError
from inventory_backend.app.utils.calendar import jalali_to_date, jalali_to_utc


def jalali_datetime(value: Optional[str], end_of_day: bool = False, required: bool = True) -> Optional[datetime]:
    """Parse a Jalali date string; empty optional values yield None."""
    if not value:
        if required:
            raise InvalidDateError(value)
        return None
    parsed = jalali_to_utc(value, end_of_day=end_of_day)
    if parsed is None:
        raise InvalidDateError(value)
    return parsed


def jalali_day(value: Optional[str], required: bool = True) -> Optional[date]:
    if not value:
        if required:
            raise InvalidDateError(value)
        return None
    parsed = jalali_to_date(value)
    if parsed is None:
        raise InvalidDateError(value)
    return parsed


def jalali_range(from_date: str, to_date: str) -> Tuple[datetime, datetime]:
    """Inclusive UTC range covering both Jalali days completely."""
    return jalali_datetime(from_date), jalali_datetime(to_date, end_of_day=True)
