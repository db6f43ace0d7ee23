"""
Data access for the resolver and the toggle gate.

The core functions never query the ORM themselves; they read through a
provider. ``MealDataProvider`` is the ORM-backed one used everywhere
outside tests. Any object with the same methods can stand in for it.
"""

from datetime import date, datetime
from typing import List, Optional

from django.db.models import Q

from apps.calendar.models import GlobalSettings, MonthSettings
from apps.calendar.services import MealPolicy, find_holidays
from apps.meals.models import Meal, RuleOverride, TargetType


class MealDataProvider:
    """ORM-backed provider. Every call reads fresh data."""

    def get_policy(self) -> MealPolicy:
        return GlobalSettings.load().to_policy()

    def find_holidays(self, start: date, end: date) -> List:
        """Active holidays in ``[start, end]``, ordered by date then creation."""
        return find_holidays(start, end)

    def find_manual_meal(self, user_id, day: date, meal_type: str) -> Optional[Meal]:
        return Meal.objects.filter(
            user_id=user_id,
            date=day,
            meal_type=meal_type,
            is_manually_set=True,
        ).first()

    def find_overrides(self, user_id, meal_type: str, now: datetime) -> List[RuleOverride]:
        """
        Candidate overrides: active, unexpired, covering the meal type and
        targeting everyone or this user. Date patterns are not checked here.
        """
        return list(
            RuleOverride.objects.filter(
                is_active=True,
                meal_type__in=[meal_type, 'both'],
            ).filter(
                Q(target_type__in=[TargetType.GLOBAL, TargetType.ALL_USERS])
                | Q(target_type=TargetType.USER, target_user_id=user_id)
            ).filter(
                Q(expires_at__isnull=True) | Q(expires_at__gt=now)
            ).order_by('-priority', '-created_at', '-id')
        )

    def find_month_settings(self, year: int, month: int) -> Optional[MonthSettings]:
        return MonthSettings.objects.filter(year=year, month=month).first()


default_provider = MealDataProvider()
