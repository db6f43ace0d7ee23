"""
Applicable-override lookup.

The provider returns candidates (active, unexpired, matching meal type
and target). This module applies the date pattern and fixes the order
the resolver depends on.
"""

from datetime import datetime
from typing import List, Optional

from apps.calendar.services import MEAL_TYPES, meal_now, to_meal_date
from apps.meals.models import RuleOverride

from .exceptions import InvalidMealTypeError
from .providers import default_provider

# Sorts below any real timestamp
EPOCH = datetime.min


def validate_meal_type(meal_type: str) -> str:
    if meal_type not in MEAL_TYPES:
        raise InvalidMealTypeError(f"Invalid meal type: {meal_type!r}. Expected 'lunch' or 'dinner'")
    return meal_type


def override_sort_key(override: RuleOverride):
    """Priority, then creation time, then id; callers sort descending."""
    created_at = override.created_at
    if created_at is None:
        created_at = EPOCH
    elif created_at.tzinfo is not None:
        created_at = created_at.replace(tzinfo=None) - created_at.utcoffset()
    return (override.priority, created_at, override.pk or 0)


def order_overrides(overrides) -> List[RuleOverride]:
    return sorted(overrides, key=override_sort_key, reverse=True)


def is_override_applicable(override: RuleOverride, day, user_id, meal_type: str, now: datetime) -> bool:
    if not override.is_active or override.is_expired(now):
        return False
    if not override.covers_meal_type(meal_type):
        return False
    if override.target_type == 'user' and str(override.target_user_id) != str(user_id):
        return False
    return override.applies_to_date(day)


def get_applicable_overrides(
    day,
    user_id,
    meal_type: str,
    *,
    provider=None,
    now: Optional[datetime] = None,
) -> List[RuleOverride]:
    """
    Overrides that apply to ``user_id`` on ``day`` for ``meal_type``.

    Ordered by priority, then most recently created, then highest id, so
    the first entry is always the one that wins among equals.

    Raises:
        InvalidDateError: If day is malformed
        InvalidMealTypeError: If meal_type is not lunch or dinner
    """
    day = to_meal_date(day)
    validate_meal_type(meal_type)
    now = meal_now(now)

    provider = provider or default_provider
    candidates = provider.find_overrides(user_id, meal_type, now)
    return order_overrides(
        override for override in candidates
        if is_override_applicable(override, day, user_id, meal_type, now)
    )
