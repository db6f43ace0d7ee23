"""
Meal service: gate-checked mutations and resolved meal reads.

Every write consults the toggle gate first; every read goes through the
resolver so callers never see raw ``Meal`` rows as the effective status.
"""

import logging
from datetime import datetime
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.calendar.services import (
    MEAL_TYPES,
    build_month_window,
    is_default_meal_off,
    iter_days,
    to_meal_date,
    validate_range,
)
from apps.meals.models import Meal

from .exceptions import (
    InsufficientPermissionsError,
    InvalidMealCountError,
    NoToggleableDatesError,
    ToggleNotAllowedError,
    UserNotFoundError,
)
from .override_query import validate_meal_type
from .providers import default_provider
from .status_resolution import get_effective_meal_status
from .toggle_permission import get_meal_toggle_permission

logger = logging.getLogger(__name__)

MAX_COUNT = 10


def _resolve_target(actor, user_id) -> User:
    """Return the user whose meals ``actor`` acts on; users may only act on themselves."""
    if user_id is None or str(user_id) == str(actor.pk):
        return actor
    if not UserRole.coerce(actor.role).is_manager:
        raise InsufficientPermissionsError("You can only access your own meals")
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise UserNotFoundError(f"User with ID {user_id} not found")


def _expand_meal_types(meal_type: str) -> List[str]:
    if meal_type == 'both':
        return list(MEAL_TYPES)
    return [validate_meal_type(meal_type)]


def _require_permission(actor, day, meal_type, policy, provider, now):
    permission = get_meal_toggle_permission(
        user=actor, day=day, meal_type=meal_type, policy=policy, provider=provider, now=now,
    )
    if not permission.can_toggle:
        logger.info(
            "Meal change denied for %s on %s %s: %s", actor.email, day, meal_type, permission.source,
        )
        raise ToggleNotAllowedError(permission.reason, source=permission.source, reason_bn=permission.reason_bn)
    return permission


def _save_manual(
    target, actor, day, meal_type, *, is_on: bool, count: Optional[int] = None, notes: Optional[str] = None,
) -> Meal:
    """Upsert the manual record. Without an explicit count, ON keeps the previous count (at least one)."""
    meal, _ = Meal.objects.select_for_update().get_or_create(
        user=target,
        date=day,
        meal_type=meal_type,
        defaults={'is_on': is_on, 'count': 0},
    )
    if count is None:
        count = (meal.count or 1) if is_on else 0
    meal.is_on = is_on
    meal.count = count
    meal.is_manually_set = True
    meal.modified_by = actor
    if notes is not None:
        meal.notes = notes
    meal.save()
    return meal


# =============================================================================
# MUTATIONS
# =============================================================================

@transaction.atomic
def toggle_meal(
    *,
    actor,
    day,
    meal_type: str,
    is_on: Optional[bool] = None,
    user_id=None,
    notes: Optional[str] = None,
    provider=None,
    now: Optional[datetime] = None,
) -> Meal:
    """
    Set a meal ON or OFF as a manual toggle.

    When ``is_on`` is omitted the current effective status is flipped.
    A meal turned on keeps its previous count (at least one); a meal
    turned off counts zero.

    Raises:
        InsufficientPermissionsError: If a user targets someone else
        ToggleNotAllowedError: If the gate denies the change
        InvalidMealTypeError: If meal_type is not lunch or dinner
    """
    day = to_meal_date(day)
    validate_meal_type(meal_type)
    provider = provider or default_provider
    target = _resolve_target(actor, user_id)
    policy = provider.get_policy()

    _require_permission(actor, day, meal_type, policy, provider, now)

    if is_on is None:
        current = get_effective_meal_status(day, target.pk, meal_type, policy=policy, provider=provider, now=now)
        is_on = not current.is_on

    meal = _save_manual(target, actor, day, meal_type, is_on=is_on, notes=notes)

    logger.info(
        "Meal %s %s for %s set %s by %s",
        day, meal_type, target.email, 'ON' if is_on else 'OFF', actor.email,
    )
    return meal


@transaction.atomic
def bulk_toggle_meals(
    *,
    actor,
    start_date,
    end_date,
    meal_type: str,
    is_on: bool,
    user_id=None,
    provider=None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Set every meal in ``[start_date, end_date]`` ON or OFF.

    ``meal_type`` may be 'both'. Days the gate denies are skipped and
    reported rather than failing the whole request.

    Returns:
        {'updated': [{'date', 'meal_type'}], 'skipped': [{'date', 'meal_type', 'source', 'reason'}]}

    Raises:
        InvalidDateRangeError: If start > end or the window exceeds 31 days
        NoToggleableDatesError: If every day was denied
    """
    start, end = validate_range(start_date, end_date)
    meal_types = _expand_meal_types(meal_type)
    provider = provider or default_provider
    target = _resolve_target(actor, user_id)
    policy = provider.get_policy()

    updated = []
    skipped = []
    for day in iter_days(start, end):
        for current_type in meal_types:
            permission = get_meal_toggle_permission(
                user=actor, day=day, meal_type=current_type, policy=policy, provider=provider, now=now,
            )
            if not permission.can_toggle:
                skipped.append({
                    'date': day,
                    'meal_type': current_type,
                    'source': permission.source,
                    'reason': permission.reason,
                })
                continue

            _save_manual(target, actor, day, current_type, is_on=is_on)
            updated.append({'date': day, 'meal_type': current_type})

    if not updated:
        raise NoToggleableDatesError("None of the selected dates can be changed", skipped=skipped)

    logger.info(
        "Bulk toggle %s..%s %s for %s by %s: %d updated, %d skipped",
        start, end, meal_type, target.email, actor.email, len(updated), len(skipped),
    )
    return {'updated': updated, 'skipped': skipped}


@transaction.atomic
def update_meal_count(
    *,
    actor,
    user_id,
    day,
    meal_type: str,
    count: int,
    provider=None,
    now: Optional[datetime] = None,
) -> Meal:
    """
    Set the number of meals (guests included) for one user and date.

    A count of zero turns the meal off.

    Raises:
        InsufficientPermissionsError: If actor is below manager
        ToggleNotAllowedError: If the gate denies the change
        InvalidMealCountError: If count is outside 0..10
    """
    if not UserRole.coerce(actor.role).is_manager:
        raise InsufficientPermissionsError("Only managers or higher roles can change meal counts")

    day = to_meal_date(day)
    validate_meal_type(meal_type)
    if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= MAX_COUNT:
        raise InvalidMealCountError(f"Meal count must be between 0 and {MAX_COUNT}")

    provider = provider or default_provider
    target = _resolve_target(actor, user_id)
    _require_permission(actor, day, meal_type, provider.get_policy(), provider, now)

    meal = _save_manual(target, actor, day, meal_type, is_on=count > 0, count=count)

    logger.info("Meal count %s %s for %s set to %d by %s", day, meal_type, target.email, count, actor.email)
    return meal


@transaction.atomic
def reset_to_default(
    *,
    actor,
    user_id,
    start_date,
    end_date,
    meal_type: Optional[str] = None,
) -> int:
    """
    Remove manual meal records so the system default applies again.

    Raises:
        InsufficientPermissionsError: If actor is below admin
        InvalidDateRangeError: If start > end or the window exceeds 31 days

    Returns:
        Number of records removed
    """
    if not UserRole.coerce(actor.role).is_admin:
        raise InsufficientPermissionsError("Only admins can reset meals to default")

    start, end = validate_range(start_date, end_date)
    target = _resolve_target(actor, user_id)

    queryset = Meal.objects.filter(user=target, date__gte=start, date__lte=end)
    if meal_type:
        queryset = queryset.filter(meal_type__in=_expand_meal_types(meal_type))

    deleted, _ = queryset.delete()

    logger.info("Reset %d meals of %s (%s..%s) by %s", deleted, target.email, start, end, actor.email)
    return deleted


# =============================================================================
# QUERIES
# =============================================================================

def get_meal_calendar(
    *,
    viewer,
    start_date,
    end_date,
    user_id=None,
    provider=None,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Effective status of both meals for every day in a window.

    Each day carries whether the system default is OFF and why, plus
    whether ``viewer`` may edit each meal.

    Raises:
        InsufficientPermissionsError: If a user views someone else
        InvalidDateRangeError: If start > end or the window exceeds 31 days
    """
    start, end = validate_range(start_date, end_date)
    provider = provider or default_provider
    target = _resolve_target(viewer, user_id)
    policy = provider.get_policy()
    holidays = provider.find_holidays(start, end)

    days = []
    for day in iter_days(start, end):
        default_off = is_default_meal_off(day, holidays, policy)
        entry = {
            'date': day,
            'is_default_off': default_off.is_off,
            'default_off_reason': default_off.reason,
            'default_off_reason_bn': default_off.reason_bn,
        }
        for meal_type in MEAL_TYPES:
            status = get_effective_meal_status(
                day, target.pk, meal_type, policy=policy, holidays=holidays, provider=provider, now=now,
            )
            permission = get_meal_toggle_permission(
                user=viewer, day=day, meal_type=meal_type, policy=policy, provider=provider, now=now,
            )
            meal = status.as_dict()
            meal['can_edit'] = permission.can_toggle
            meal['edit_restriction'] = None if permission.can_toggle else permission.reason
            entry[meal_type] = meal
        days.append(entry)
    return days


def get_meal_summary(
    *,
    viewer,
    year: int,
    month: int,
    user_id=None,
    provider=None,
    now: Optional[datetime] = None,
) -> dict:
    """
    ON days and meal counts over a month window.

    Raises:
        InsufficientPermissionsError: If a user views someone else
    """
    provider = provider or default_provider
    window = build_month_window(year, month, provider.find_month_settings(year, month))
    target = _resolve_target(viewer, user_id)
    policy = provider.get_policy()
    holidays = provider.find_holidays(window.start_date, window.end_date)

    summary = {'year': year, 'month': month, 'start_date': window.start_date, 'end_date': window.end_date}
    total = 0
    for meal_type in MEAL_TYPES:
        on_days = 0
        meals = 0
        for day in iter_days(window.start_date, window.end_date):
            status = get_effective_meal_status(
                day, target.pk, meal_type, policy=policy, holidays=holidays, provider=provider, now=now,
            )
            if status.is_on:
                on_days += 1
                meals += status.count
        summary[f'{meal_type}_days'] = on_days
        summary[f'{meal_type}_count'] = meals
        total += meals
    summary['total_meals'] = total
    return summary


def get_meal_status(
    *,
    viewer,
    day,
    meal_type: str,
    user_id=None,
    provider=None,
    now: Optional[datetime] = None,
):
    """
    Effective status of one meal; users may only look at their own.

    Raises:
        InsufficientPermissionsError: If a user views someone else
    """
    target = _resolve_target(viewer, user_id)
    return get_effective_meal_status(day, target.pk, meal_type, provider=provider, now=now)


def get_daily_meals(
    *,
    viewer,
    day,
    meal_type: str,
    provider=None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Effective status of one meal for every active user on a date.

    Used by managers to see who eats on a given day and how many meals
    the kitchen should prepare.

    Raises:
        InsufficientPermissionsError: If viewer is below manager
        InvalidMealTypeError: If meal_type is not lunch or dinner
    """
    if not UserRole.coerce(viewer.role).is_manager:
        raise InsufficientPermissionsError("Only managers or higher roles can view the daily meal list")

    day = to_meal_date(day)
    validate_meal_type(meal_type)
    provider = provider or default_provider
    policy = provider.get_policy()
    holidays = provider.find_holidays(day, day)
    default_off = is_default_meal_off(day, holidays, policy)

    meals = []
    for user in User.objects.filter(is_active=True).order_by('name', 'email'):
        status = get_effective_meal_status(
            day, user.pk, meal_type, policy=policy, holidays=holidays, provider=provider, now=now,
        )
        meals.append({
            'user': user,
            'is_on': status.is_on,
            'count': status.count,
            'source': status.source,
            'is_manually_set': status.meal_id is not None,
        })

    return {
        'date': day,
        'meal_type': meal_type,
        'is_default_off': default_off.is_off,
        'is_holiday': bool(holidays),
        'holiday_name': holidays[0].name if holidays else None,
        'holiday_name_bn': holidays[0].name_bn if holidays else None,
        'total_meals_on': sum(1 for meal in meals if meal['is_on']),
        'total_meal_count': sum(meal['count'] for meal in meals),
        'meals': meals,
    }
