"""
Calendar/policy evaluator.

Pure functions: given a date, a list of holidays and a ``MealPolicy``,
decide whether a meal is off by default and why. Every date argument is
normalized into the meal time zone first, so weekday and Saturday
ordinal checks never depend on the host's local time.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from .dates import iter_days, to_meal_date
from .policy import MealPolicy

FRIDAY = 4
SATURDAY = 5


@dataclass(frozen=True)
class DefaultOffResult:
    """Outcome of the system-default check for one date."""

    is_off: bool
    source: Optional[str] = None
    reason: Optional[str] = None
    reason_bn: Optional[str] = None
    holiday: object = None


NOT_OFF = DefaultOffResult(is_off=False)

FRIDAY_OFF = DefaultOffResult(
    is_off=True,
    source='system_friday',
    reason='Friday - System default OFF',
    reason_bn='শুক্রবার - সিস্টেম ডিফল্ট অফ',
)
SATURDAY_OFF = DefaultOffResult(
    is_off=True,
    source='system_saturday',
    reason='Saturday - System default OFF',
    reason_bn='শনিবার - সিস্টেম ডিফল্ট অফ',
)
ODD_SATURDAY_OFF = DefaultOffResult(
    is_off=True,
    source='system_odd_saturday',
    reason='Odd Saturday - System default OFF',
    reason_bn='বিজোড় শনিবার - সিস্টেম ডিফল্ট অফ',
)
EVEN_SATURDAY_OFF = DefaultOffResult(
    is_off=True,
    source='system_even_saturday',
    reason='Even Saturday - System default OFF',
    reason_bn='জোড় শনিবার - সিস্টেম ডিফল্ট অফ',
)


def is_friday(value) -> bool:
    return to_meal_date(value).weekday() == FRIDAY


def is_saturday(value) -> bool:
    return to_meal_date(value).weekday() == SATURDAY


def saturday_ordinal(value) -> Optional[int]:
    """
    Return which Saturday of its month ``value`` is (1-5), or None.

    The ordinal is month-relative: ``ceil(day_of_month / 7)``.
    """
    day = to_meal_date(value)
    if day.weekday() != SATURDAY:
        return None
    return math.ceil(day.day / 7)


def is_odd_saturday(value) -> bool:
    ordinal = saturday_ordinal(value)
    return ordinal is not None and ordinal % 2 == 1


def is_even_saturday(value) -> bool:
    ordinal = saturday_ordinal(value)
    return ordinal is not None and ordinal % 2 == 0


def _holiday_date(holiday) -> date:
    return to_meal_date(holiday.date)


def get_applicable_holiday(value, holidays: Iterable, policy: MealPolicy):
    """
    Return the first holiday on the same calendar day whose type the policy turns off.

    Inactive holidays are skipped. When several holidays share a date the
    first one in iteration order wins.
    """
    day = to_meal_date(value)
    for holiday in holidays:
        if not getattr(holiday, 'is_active', True):
            continue
        if _holiday_date(holiday) != day:
            continue
        if policy.holidays.applies_to(getattr(holiday, 'type', None)):
            return holiday
    return None


def is_default_meal_off(value, holidays: Iterable = (), policy: Optional[MealPolicy] = None) -> DefaultOffResult:
    """
    Evaluate the system default for a date.

    Checks in order, first match wins:
    Friday, all Saturdays, odd Saturday, even Saturday, holiday.

    Args:
        value: Date-like value (date, datetime or ISO string)
        holidays: Holiday-like objects with ``date``, ``type``, ``name``, ``name_bn``
        policy: Meal policy; documented defaults when omitted

    Returns:
        DefaultOffResult
    """
    policy = policy or MealPolicy()
    weekend = policy.weekend
    day = to_meal_date(value)

    if is_friday(day) and weekend.friday_off:
        return FRIDAY_OFF

    if is_saturday(day):
        if weekend.saturday_off:
            return SATURDAY_OFF
        if is_odd_saturday(day) and weekend.odd_saturday_off:
            return ODD_SATURDAY_OFF
        if is_even_saturday(day) and weekend.even_saturday_off:
            return EVEN_SATURDAY_OFF

    holiday = get_applicable_holiday(day, holidays, policy)
    if holiday is not None:
        name = holiday.name or 'Holiday'
        name_bn = getattr(holiday, 'name_bn', '') or 'ছুটির দিন'
        return DefaultOffResult(
            is_off=True,
            source='system_holiday',
            reason=f'{name} - System default OFF',
            reason_bn=f'{name_bn} - সিস্টেম ডিফল্ট অফ',
            holiday=holiday,
        )

    return NOT_OFF


def filter_applicable_holidays(holidays: Iterable, policy: MealPolicy) -> List:
    """Keep active holidays whose type the policy turns off."""
    return [
        h for h in holidays
        if getattr(h, 'is_active', True) and policy.holidays.applies_to(getattr(h, 'type', None))
    ]


def list_off_days(start, days: int, holidays: Iterable, policy: MealPolicy) -> List[dict]:
    """
    List default-off days in the ``days`` long window starting at ``start``.

    Returns:
        List of dicts with ``date``, ``source``, ``reason``, ``reason_bn``
    """
    start_date = to_meal_date(start)
    end_date = start_date + timedelta(days=max(days, 1) - 1)
    holidays = list(holidays)

    off_days = []
    for day in iter_days(start_date, end_date):
        result = is_default_meal_off(day, holidays, policy)
        if result.is_off:
            off_days.append({
                'date': day,
                'source': result.source,
                'reason': result.reason,
                'reason_bn': result.reason_bn,
            })
    return off_days
