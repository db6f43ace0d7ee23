"""
Effective meal status resolution.

Layers, each replacing the result only when its priority is strictly
higher than the current one:

1. System default (weekend policy, holidays, default meal status)
2. The user's manual toggle
3. The first applicable override above the current priority
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from apps.calendar.services import MealPolicy, is_default_meal_off, to_meal_date
from apps.meals.models import OverrideAction, Priority

from .override_query import get_applicable_overrides, validate_meal_type
from .providers import default_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveStatus:
    date: date
    meal_type: str
    is_on: bool
    count: int
    source: str
    priority: int
    reason: str
    reason_bn: str
    override_id: Optional[int] = None
    meal_id: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            'date': self.date,
            'meal_type': self.meal_type,
            'is_on': self.is_on,
            'count': self.count,
            'source': self.source,
            'priority': self.priority,
            'reason': self.reason,
            'reason_bn': self.reason_bn,
            'override_id': self.override_id,
            'meal_id': self.meal_id,
        }


def system_default_status(day: date, meal_type: str, holidays: Iterable, policy: MealPolicy) -> EffectiveStatus:
    """Priority-1 floor: weekend/holiday OFF, otherwise the default meal status."""
    default_off = is_default_meal_off(day, holidays, policy)
    if default_off.is_off:
        return EffectiveStatus(
            date=day,
            meal_type=meal_type,
            is_on=False,
            count=0,
            source=default_off.source,
            priority=Priority.SYSTEM,
            reason=default_off.reason,
            reason_bn=default_off.reason_bn,
        )

    is_on = policy.default_meal_status.for_meal(meal_type)
    return EffectiveStatus(
        date=day,
        meal_type=meal_type,
        is_on=is_on,
        count=1 if is_on else 0,
        source='system_default',
        priority=Priority.SYSTEM,
        reason='Default: meal ON' if is_on else 'Default: meal OFF',
        reason_bn='ডিফল্ট: মিল অন' if is_on else 'ডিফল্ট: মিল অফ',
    )


def manual_status(meal, current: EffectiveStatus) -> EffectiveStatus:
    return EffectiveStatus(
        date=current.date,
        meal_type=current.meal_type,
        is_on=meal.is_on,
        count=meal.count if meal.is_on else 0,
        source='user_manual',
        priority=Priority.USER,
        reason='Manual setting by user',
        reason_bn='ইউজারের ম্যানুয়াল সেটিং',
        meal_id=meal.pk,
    )


def override_status(override, current: EffectiveStatus) -> EffectiveStatus:
    """
    Apply an override on top of ``current``.

    force_on keeps the current count when the meal was already on,
    otherwise one meal; force_off always counts zero.
    """
    role = override.created_by_role
    if override.action == OverrideAction.FORCE_ON:
        is_on = True
        count = current.count if current.is_on and current.count > 0 else 1
    else:
        is_on = False
        count = 0

    return EffectiveStatus(
        date=current.date,
        meal_type=current.meal_type,
        is_on=is_on,
        count=count,
        source=f'override_{role}',
        priority=override.priority,
        reason=override.reason or f'Override by {role}',
        reason_bn=override.reason_bn or f'{role} ওভাররাইড',
        override_id=override.pk,
        meal_id=current.meal_id,
    )


def get_effective_meal_status(
    day,
    user_id,
    meal_type: str,
    *,
    policy: Optional[MealPolicy] = None,
    holidays: Optional[Iterable] = None,
    provider=None,
    now: Optional[datetime] = None,
) -> EffectiveStatus:
    """
    Resolve the ON/OFF status and count of one user's meal on one date.

    Args:
        day: Date-like value, normalized to the meal zone
        user_id: User whose meal is resolved
        meal_type: 'lunch' or 'dinner'
        policy: Meal policy; loaded from the provider when omitted
        holidays: Holidays to evaluate against; fetched for the day when omitted
        provider: Data provider; the ORM-backed one when omitted
        now: Reference time for override expiry

    Returns:
        EffectiveStatus

    Raises:
        InvalidDateError: If day is malformed
        InvalidMealTypeError: If meal_type is not lunch or dinner
    """
    day = to_meal_date(day)
    validate_meal_type(meal_type)
    provider = provider or default_provider

    if policy is None:
        policy = provider.get_policy()
    if holidays is None:
        holidays = provider.find_holidays(day, day)

    status = system_default_status(day, meal_type, holidays, policy)

    meal = provider.find_manual_meal(user_id, day, meal_type)
    if meal is not None and Priority.USER > status.priority:
        status = manual_status(meal, status)

    overrides = get_applicable_overrides(day, user_id, meal_type, provider=provider, now=now)
    for override in overrides:
        if override.priority > status.priority:
            status = override_status(override, status)
            break

    logger.debug(
        "Resolved %s %s for user %s: %s (%s)",
        day, meal_type, user_id, 'ON' if status.is_on else 'OFF', status.source,
    )
    return status
