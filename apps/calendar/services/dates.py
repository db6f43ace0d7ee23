"""
Date normalization for meal scheduling.

Every date-accepting service runs its input through ``to_meal_date``
and every "now" through ``meal_now`` so that weekday, month and cutoff
checks happen in ``settings.MEAL_TIME_ZONE``, never in the server's
local time.
"""

import calendar
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Iterator, Optional, Tuple
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidDateError, InvalidDateRangeError

MAX_RANGE_DAYS = 31


@lru_cache(maxsize=None)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def meal_timezone() -> ZoneInfo:
    """Return the fixed zone all meal dates are evaluated in."""
    return _zone(getattr(settings, 'MEAL_TIME_ZONE', 'Asia/Dhaka'))


def meal_now(now: Optional[datetime] = None) -> datetime:
    """
    Return ``now`` (default: current time) as an aware datetime in the meal zone.

    Naive datetimes are read as wall-clock time in the meal zone.
    """
    if now is None:
        now = timezone.now()
    if not isinstance(now, datetime):
        raise InvalidDateError(f"Expected a datetime for 'now', got {type(now).__name__}")
    if timezone.is_naive(now):
        return now.replace(tzinfo=meal_timezone())
    return now.astimezone(meal_timezone())


def meal_today(now: Optional[datetime] = None) -> date:
    return meal_now(now).date()


def to_meal_date(value) -> date:
    """
    Normalize ``value`` to a calendar date in the meal zone.

    Accepts a ``date``, an aware or naive ``datetime`` (time of day is
    dropped after conversion to the meal zone) or an ISO-8601 string.

    Raises:
        InvalidDateError: If the value is empty, malformed or of another type
    """
    if isinstance(value, datetime):
        return meal_now(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_date(text)
            if parsed is not None:
                return parsed
            parsed_dt = parse_datetime(text)
        except ValueError:
            raise InvalidDateError(f"Invalid date: {value!r}")
        if parsed_dt is not None:
            return meal_now(parsed_dt).date()
        raise InvalidDateError(f"Invalid date: {value!r}")
    raise InvalidDateError(f"Invalid date: {value!r}")


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Return the first and last calendar day of a month."""
    if not 1 <= int(month) <= 12:
        raise InvalidDateError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def validate_range(start, end, *, max_days: int = MAX_RANGE_DAYS) -> Tuple[date, date]:
    """
    Normalize and validate an inclusive date window.

    Raises:
        InvalidDateError: If either bound is not a date
        InvalidDateRangeError: If start is after end or the window exceeds max_days
    """
    start_date = to_meal_date(start)
    end_date = to_meal_date(end)
    if start_date > end_date:
        raise InvalidDateRangeError("Start date must be on or before end date")
    if max_days and (end_date - start_date).days + 1 > max_days:
        raise InvalidDateRangeError(f"Date range cannot exceed {max_days} days")
    return start_date, end_date
