"""
Override service: authorization predicates and CRUD for rule overrides.

Priority and creator role are fixed when an override is created; updates
may only touch the action, reasons, activity and expiry.
"""

import logging
from datetime import datetime
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from apps.accounts.models import User, UserRole
from apps.calendar.services import to_meal_date
from apps.meals.models import (
    DateType,
    OverrideAction,
    OverrideMealType,
    Priority,
    RecurringPattern,
    RuleOverride,
    TargetType,
)

from .exceptions import (
    InsufficientPermissionsError,
    InvalidMealTypeError,
    InvalidOverrideError,
    OverrideNotFoundError,
    UserNotFoundError,
)
from .override_query import get_applicable_overrides

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('action', 'reason', 'reason_bn', 'is_active', 'expires_at')


# =============================================================================
# AUTHORIZATION
# =============================================================================

def can_create_override(role, target_type: str) -> bool:
    """
    Managers may target single users; global and all-user overrides need
    an admin.
    """
    role = UserRole.coerce(role)
    if target_type in (TargetType.GLOBAL, TargetType.ALL_USERS):
        return role.is_admin
    if target_type == TargetType.USER:
        return role.is_manager
    return False


def can_modify_override(override: RuleOverride, user_id, role) -> bool:
    """Admins may modify any override; managers only their own."""
    role = UserRole.coerce(role)
    if role.is_admin:
        return True
    if role.is_manager:
        return override.created_by_id is not None and str(override.created_by_id) == str(user_id)
    return False


def _get_override(override_id: int, *, lock: bool = False) -> RuleOverride:
    queryset = RuleOverride.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=override_id)
    except RuleOverride.DoesNotExist:
        raise OverrideNotFoundError(f"Override with ID {override_id} not found")


def _require_modify(override: RuleOverride, actor):
    if not can_modify_override(override, actor.pk, actor.role):
        raise InsufficientPermissionsError("You do not have permission to modify this override")


def _validate_choice(value, choices, label: str):
    if value not in choices:
        raise InvalidOverrideError(f"Invalid {label}: {value!r}")
    return value


def _validate_recurring_days(pattern: str, days) -> List[int]:
    days = list(days or [])
    if pattern == RecurringPattern.DAILY:
        return days
    if not days:
        raise InvalidOverrideError("Recurring overrides need at least one day")

    low, high = (0, 6) if pattern == RecurringPattern.WEEKLY else (1, 31)
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or not low <= day <= high:
            raise InvalidOverrideError(f"Invalid {pattern} recurring day: {day!r}")
    return sorted(set(days))


# =============================================================================
# MUTATIONS
# =============================================================================

@transaction.atomic
def create_override(
    *,
    actor,
    target_type: str,
    date_type: str,
    start_date,
    meal_type: str,
    action: str,
    target_user_id=None,
    end_date=None,
    recurring_pattern: str = '',
    recurring_days=None,
    reason: str = '',
    reason_bn: str = '',
    expires_at: Optional[datetime] = None,
) -> RuleOverride:
    """
    Create an override with the priority of the actor's role.

    Raises:
        InsufficientPermissionsError: If the actor may not target target_type
        InvalidOverrideError: If the target, date type or pattern is inconsistent
        InvalidMealTypeError: If meal_type is not lunch, dinner or both
        UserNotFoundError: If target_user_id does not exist
    """
    _validate_choice(target_type, TargetType.values, 'target type')
    if not can_create_override(actor.role, target_type):
        raise InsufficientPermissionsError(f"Your role cannot create '{target_type}' overrides")

    _validate_choice(date_type, DateType.values, 'date type')
    _validate_choice(action, OverrideAction.values, 'action')
    if meal_type not in OverrideMealType.values:
        raise InvalidMealTypeError(f"Invalid meal type: {meal_type!r}")

    start = to_meal_date(start_date)
    end = to_meal_date(end_date) if end_date else None

    target_user = None
    if target_type == TargetType.USER:
        if not target_user_id:
            raise InvalidOverrideError("A user override needs a target user")
        try:
            target_user = User.objects.get(pk=target_user_id)
        except (User.DoesNotExist, ValidationError, ValueError):
            raise UserNotFoundError(f"User with ID {target_user_id} not found")

    if date_type == DateType.SINGLE:
        end = None
    elif date_type == DateType.RANGE and end is None:
        raise InvalidOverrideError("A range override needs an end date")

    if end is not None and end < start:
        raise InvalidOverrideError("End date must not be before start date")

    pattern = ''
    days = []
    if date_type == DateType.RECURRING:
        if not recurring_pattern:
            raise InvalidOverrideError("A recurring override needs a pattern")
        pattern = _validate_choice(recurring_pattern, RecurringPattern.values, 'recurring pattern')
        days = _validate_recurring_days(pattern, recurring_days)

    role = UserRole.coerce(actor.role)
    override = RuleOverride.objects.create(
        target_type=target_type,
        target_user=target_user,
        date_type=date_type,
        start_date=start,
        end_date=end,
        recurring_pattern=pattern,
        recurring_days=days,
        meal_type=meal_type,
        action=action,
        priority=Priority.for_role(role),
        created_by_role=role.value,
        created_by=actor,
        reason=reason,
        reason_bn=reason_bn,
        expires_at=expires_at,
    )

    logger.info(
        "Override %s created by %s: %s %s for %s",
        override.pk, actor.email, action, meal_type, target_user or target_type,
    )
    return override


@transaction.atomic
def update_override(*, actor, override_id: int, **changes) -> RuleOverride:
    """
    Update an override's action, reasons, activity or expiry.

    Raises:
        OverrideNotFoundError: If the override does not exist
        InsufficientPermissionsError: If actor may not modify it
        InvalidOverrideError: If a field is not updatable or the action is invalid
    """
    override = _get_override(override_id, lock=True)
    _require_modify(override, actor)

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidOverrideError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    if 'action' in changes:
        _validate_choice(changes['action'], OverrideAction.values, 'action')

    for field, value in changes.items():
        if field in ('reason', 'reason_bn') and value is None:
            value = ''
        setattr(override, field, value)
    override.save()

    logger.info("Override %s updated by %s: %s", override.pk, actor.email, ', '.join(sorted(changes)))
    return override


@transaction.atomic
def delete_override(*, actor, override_id: int) -> None:
    """
    Raises:
        OverrideNotFoundError: If the override does not exist
        InsufficientPermissionsError: If actor may not modify it
    """
    override = _get_override(override_id, lock=True)
    _require_modify(override, actor)
    override.delete()
    logger.info("Override %s deleted by %s", override_id, actor.email)


@transaction.atomic
def toggle_override_active(*, actor, override_id: int) -> RuleOverride:
    override = _get_override(override_id, lock=True)
    _require_modify(override, actor)

    override.is_active = not override.is_active
    override.save(update_fields=['is_active', 'updated_at'])

    logger.info(
        "Override %s %s by %s",
        override.pk, 'activated' if override.is_active else 'deactivated', actor.email,
    )
    return override


# =============================================================================
# QUERIES
# =============================================================================

def list_overrides(
    *,
    actor,
    meal_type: Optional[str] = None,
    target_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    start=None,
    end=None,
):
    """
    List overrides for managers and above.

    Single and range overrides are matched against ``[start, end]`` by
    overlap; recurring overrides are always included.

    Raises:
        InsufficientPermissionsError: If actor is below manager
    """
    if not UserRole.coerce(actor.role).is_manager:
        raise InsufficientPermissionsError("Only managers or higher roles can list overrides")

    queryset = RuleOverride.objects.select_related('target_user', 'created_by')

    if meal_type:
        queryset = queryset.filter(meal_type=meal_type)
    if target_type:
        queryset = queryset.filter(target_type=target_type)
    if is_active is not None:
        queryset = queryset.filter(is_active=is_active)

    if start or end:
        window = Q()
        if end:
            window &= Q(start_date__lte=to_meal_date(end))
        if start:
            start_date = to_meal_date(start)
            window &= (
                Q(end_date__gte=start_date)
                | Q(date_type=DateType.SINGLE, start_date__gte=start_date)
            )
        queryset = queryset.filter(window | Q(date_type=DateType.RECURRING))

    return queryset


def check_overrides(
    *,
    actor,
    day,
    meal_type: str,
    user_id=None,
    provider=None,
    now: Optional[datetime] = None,
) -> List[RuleOverride]:
    """
    Overrides applying to a user's meal on one date.

    Users may only check themselves; managers may pass any ``user_id``.

    Raises:
        InsufficientPermissionsError: If a user checks someone else
        InvalidDateError: If day is malformed
        InvalidMealTypeError: If meal_type is not lunch or dinner
    """
    if user_id is None or str(user_id) == str(actor.pk):
        user_id = actor.pk
    elif not UserRole.coerce(actor.role).is_manager:
        raise InsufficientPermissionsError("You can only check your own overrides")

    return get_applicable_overrides(day, user_id, meal_type, provider=provider, now=now)
