"""Holiday CRUD and policy-filtered holiday queries."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from django.db import transaction

from apps.accounts.models import UserRole
from apps.calendar.models import Holiday, HolidayType

from .calendar_policy import filter_applicable_holidays, list_off_days
from .dates import meal_today, to_meal_date
from .exceptions import (
    DuplicateHolidayError,
    HolidayNotFoundError,
    InsufficientPermissionsError,
    InvalidHolidayTypeError,
)
from .policy import MealPolicy

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 30


def _require_admin(actor):
    if not UserRole.coerce(actor.role).is_admin:
        raise InsufficientPermissionsError("Only admins can manage holidays")


def _validate_type(holiday_type: str) -> str:
    if holiday_type not in HolidayType.values:
        raise InvalidHolidayTypeError(f"Unknown holiday type: {holiday_type!r}")
    return holiday_type


def find_holidays(start, end) -> List[Holiday]:
    """Active holidays in ``[start, end]`` ordered by date, then creation order."""
    start_date = to_meal_date(start)
    end_date = to_meal_date(end)
    return list(
        Holiday.objects.filter(is_active=True, date__gte=start_date, date__lte=end_date).order_by('date', 'id')
    )


def get_applicable_holidays(start, end, policy: MealPolicy) -> List[Holiday]:
    """Active holidays in the window whose type the policy turns off."""
    return filter_applicable_holidays(find_holidays(start, end), policy)


def get_upcoming_off_days(
    policy: MealPolicy,
    *,
    start=None,
    days: int = UPCOMING_DAYS,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Default-off days (weekend policy and holidays) in the next ``days`` days.

    Args:
        policy: Meal policy to evaluate with
        start: First day of the window (default: today in the meal zone)
        days: Window length
        now: Reference time when ``start`` is omitted
    """
    start_date = to_meal_date(start) if start is not None else meal_today(now)
    days = max(int(days), 1)
    end_date = start_date + timedelta(days=days - 1)
    return list_off_days(start_date, days, find_holidays(start_date, end_date), policy)


def list_holidays(*, year: Optional[int] = None, include_inactive: bool = False):
    queryset = Holiday.objects.all().order_by('date', 'id')
    if year is not None:
        queryset = queryset.filter(date__year=year)
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    return queryset


@transaction.atomic
def create_holiday(
    *,
    actor,
    date,
    name: str,
    name_bn: str = '',
    type: str = HolidayType.GOVERNMENT,
) -> Holiday:
    """
    Add a holiday (admin only).

    Raises:
        InsufficientPermissionsError: If actor is below admin
        InvalidDateError: If the date is invalid
        InvalidHolidayTypeError: If the type is unknown
        DuplicateHolidayError: If a holiday with the same date and name exists
    """
    _require_admin(actor)
    day = to_meal_date(date)
    _validate_type(type)

    if Holiday.objects.filter(date=day, name__iexact=name.strip()).exists():
        raise DuplicateHolidayError(f"Holiday '{name}' on {day} already exists")

    holiday = Holiday.objects.create(
        date=day,
        name=name.strip(),
        name_bn=name_bn.strip(),
        type=type,
        added_by=actor,
    )
    logger.info("Holiday %s created by %s", holiday, actor.email)
    return holiday


@transaction.atomic
def update_holiday(*, actor, holiday_id: int, **changes) -> Holiday:
    """
    Edit date, names, type or active flag of a holiday (admin only).

    Raises:
        InsufficientPermissionsError, HolidayNotFoundError,
        InvalidDateError, InvalidHolidayTypeError, DuplicateHolidayError
    """
    _require_admin(actor)
    try:
        holiday = Holiday.objects.select_for_update().get(pk=holiday_id)
    except Holiday.DoesNotExist:
        raise HolidayNotFoundError(f"Holiday with ID {holiday_id} not found")

    if 'date' in changes:
        holiday.date = to_meal_date(changes['date'])
    if 'name' in changes:
        holiday.name = changes['name'].strip()
    if 'name_bn' in changes:
        holiday.name_bn = changes['name_bn'].strip()
    if 'type' in changes:
        holiday.type = _validate_type(changes['type'])
    if 'is_active' in changes:
        holiday.is_active = bool(changes['is_active'])

    duplicate = Holiday.objects.filter(date=holiday.date, name__iexact=holiday.name).exclude(pk=holiday.pk)
    if duplicate.exists():
        raise DuplicateHolidayError(f"Holiday '{holiday.name}' on {holiday.date} already exists")

    holiday.save()
    logger.info("Holiday %s updated by %s", holiday, actor.email)
    return holiday


@transaction.atomic
def delete_holiday(*, actor, holiday_id: int) -> None:
    _require_admin(actor)
    deleted, _ = Holiday.objects.filter(pk=holiday_id).delete()
    if not deleted:
        raise HolidayNotFoundError(f"Holiday with ID {holiday_id} not found")
    logger.info("Holiday %s deleted by %s", holiday_id, actor.email)

