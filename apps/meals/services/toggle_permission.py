"""
Permission and cutoff gate for meal changes.

A denial is a normal result, never an exception. Decision order:

1. Superadmin: always allowed
2. Finalized month: denied unless admin
3. User: no past dates; today only before the meal's cutoff hour
4. Manager: only dates inside the current month window
5. Admin: allowed
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apps.accounts.models import UserRole
from apps.calendar.services import MealPolicy, build_month_window, meal_now, to_meal_date

from .override_query import validate_meal_type
from .providers import default_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TogglePermission:
    can_toggle: bool
    source: str
    reason: str
    reason_bn: str

    def as_dict(self) -> dict:
        return {
            'can_toggle': self.can_toggle,
            'source': self.source,
            'reason': self.reason,
            'reason_bn': self.reason_bn,
        }


def _allow(source: str, reason: str, reason_bn: str) -> TogglePermission:
    return TogglePermission(can_toggle=True, source=source, reason=reason, reason_bn=reason_bn)


def _deny(source: str, reason: str, reason_bn: str) -> TogglePermission:
    return TogglePermission(can_toggle=False, source=source, reason=reason, reason_bn=reason_bn)


def get_meal_toggle_permission(
    *,
    user,
    day,
    meal_type: str,
    policy: Optional[MealPolicy] = None,
    provider=None,
    now: Optional[datetime] = None,
) -> TogglePermission:
    """
    Decide whether ``user`` may change a meal on ``day``.

    Args:
        user: Acting user; only its ``role`` is read
        day: Date-like value, normalized to the meal zone
        meal_type: 'lunch' or 'dinner'
        policy: Meal policy for cutoff hours; loaded when omitted
        provider: Data provider; the ORM-backed one when omitted
        now: Current time; "today" and the hour are taken in the meal zone

    Raises:
        InvalidDateError: If day or now is malformed
        InvalidMealTypeError: If meal_type is not lunch or dinner
        ValueError: If the user's role is unknown
    """
    day = to_meal_date(day)
    validate_meal_type(meal_type)
    role = UserRole.coerce(user.role)
    provider = provider or default_provider
    local_now = meal_now(now)
    today = local_now.date()

    permission = _decide(role, day, meal_type, policy, provider, local_now, today)
    logger.debug(
        "Toggle %s %s by %s: %s (%s)",
        day, meal_type, role.value, 'allowed' if permission.can_toggle else 'denied', permission.source,
    )
    return permission


def _decide(role, day, meal_type, policy, provider, local_now, today) -> TogglePermission:
    if role.is_superadmin:
        return _allow('superadmin_override', 'Superadmin can change any date', 'সুপারঅ্যাডমিন যেকোনো তারিখ পরিবর্তন করতে পারবেন')

    if not role.is_admin:
        month_settings = provider.find_month_settings(day.year, day.month)
        if month_settings is not None and month_settings.is_finalized:
            return _deny('month_finalized', 'This month has been finalized', 'এই মাস ফাইনালাইজ হয়ে গেছে')

    if not role.is_manager:
        if day < today:
            return _deny('past_date', 'Past dates cannot be changed', 'অতীতের তারিখ পরিবর্তন করা যাবে না')

        if day == today:
            if policy is None:
                policy = provider.get_policy()
            cutoff = policy.cutoff_times.for_meal(meal_type)
            if local_now.hour >= cutoff:
                meal_bn = 'দুপুরের' if meal_type == 'lunch' else 'রাতের'
                return _deny(
                    'cutoff_passed',
                    f'{meal_type.capitalize()} cutoff time ({cutoff}:00) has passed',
                    f'{meal_bn} খাবারের কাটঅফ টাইম ({cutoff}:00) পার হয়ে গেছে',
                )

        return _allow('user_future', 'You can change this meal', 'আপনি এই মিল পরিবর্তন করতে পারবেন')

    if not role.is_admin:
        window = build_month_window(
            today.year, today.month, provider.find_month_settings(today.year, today.month)
        )
        if not window.contains(day):
            return _deny(
                'not_current_month',
                'Managers can only change dates in the current month',
                'ম্যানেজার শুধু বর্তমান মাসের তারিখ পরিবর্তন করতে পারবেন',
            )
        return _allow('manager_access', 'Manager can change current month', 'ম্যানেজার বর্তমান মাস পরিবর্তন করতে পারবেন')

    return _allow('admin_access', 'Admin can change any non-locked date', 'অ্যাডমিন পরিবর্তন করতে পারবেন')
