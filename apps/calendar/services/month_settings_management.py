"""Month settings service: create, edit and finalize month windows."""

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import UserRole
from apps.calendar.models import MonthSettings

from .dates import month_bounds, validate_range
from .exceptions import (
    InsufficientPermissionsError,
    InvalidDateError,
    MonthFinalizedError,
    MonthSettingsNotFoundError,
)

logger = logging.getLogger(__name__)


def _require_manager(actor):
    if not UserRole.coerce(actor.role).is_manager:
        raise InsufficientPermissionsError("Only managers or higher roles can manage month settings")


@transaction.atomic
def save_month_settings(
    *,
    actor,
    year: int,
    month: int,
    start_date=None,
    end_date=None,
    notes: str = '',
) -> MonthSettings:
    """
    Create or update the settings of one month.

    The window defaults to the calendar month and may not exceed 31 days.

    Raises:
        InsufficientPermissionsError: If actor is below manager
        InvalidDateError: If month is out of range or a bound is malformed
        InvalidDateRangeError: If start > end or the window is too long
        MonthFinalizedError: If the month is already finalized
    """
    _require_manager(actor)

    if not 1 <= int(month) <= 12:
        raise InvalidDateError(f"Invalid month: {month!r}")

    default_start, default_end = month_bounds(year, month)
    start, end = validate_range(start_date or default_start, end_date or default_end)

    settings_row = MonthSettings.objects.select_for_update().filter(year=year, month=month).first()

    if settings_row is None:
        settings_row = MonthSettings.objects.create(
            year=year,
            month=month,
            start_date=start,
            end_date=end,
            notes=notes,
            created_by=actor,
            modified_by=actor,
        )
        logger.info("Month settings %s created by %s", settings_row, actor.email)
        return settings_row

    if settings_row.is_finalized:
        raise MonthFinalizedError(f"Month {settings_row} is finalized and cannot be edited")

    settings_row.start_date = start
    settings_row.end_date = end
    settings_row.notes = notes
    settings_row.modified_by = actor
    settings_row.save()

    logger.info("Month settings %s updated by %s", settings_row, actor.email)
    return settings_row


@transaction.atomic
def finalize_month(*, actor, settings_id: int) -> MonthSettings:
    """
    Lock a month so that users and managers can no longer change its meals.

    Raises:
        InsufficientPermissionsError: If actor is below manager
        MonthSettingsNotFoundError: If the settings row does not exist
        MonthFinalizedError: If the month is already finalized
    """
    _require_manager(actor)

    try:
        settings_row = MonthSettings.objects.select_for_update().get(pk=settings_id)
    except MonthSettings.DoesNotExist:
        raise MonthSettingsNotFoundError(f"Month settings with ID {settings_id} not found")

    if settings_row.is_finalized:
        raise MonthFinalizedError(f"Month {settings_row} is already finalized")

    settings_row.is_finalized = True
    settings_row.finalized_at = timezone.now()
    settings_row.modified_by = actor
    settings_row.save(update_fields=['is_finalized', 'finalized_at', 'modified_by', 'updated_at'])

    logger.info("Month %s finalized by %s", settings_row, actor.email)
    return settings_row


def list_month_settings(*, year: Optional[int] = None):
    queryset = MonthSettings.objects.all()
    if year is not None:
        queryset = queryset.filter(year=year)
    return queryset
