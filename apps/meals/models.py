# ==========================================
# apps/meals/models.py
# ==========================================

from django.db import models

from apps.accounts.models import UserRole


class MealType(models.TextChoices):
    LUNCH = 'lunch', 'Lunch'
    DINNER = 'dinner', 'Dinner'


class OverrideMealType(models.TextChoices):
    LUNCH = 'lunch', 'Lunch'
    DINNER = 'dinner', 'Dinner'
    BOTH = 'both', 'Both'


class TargetType(models.TextChoices):
    USER = 'user', 'Specific user'
    ALL_USERS = 'all_users', 'All users'
    GLOBAL = 'global', 'Global'


class DateType(models.TextChoices):
    SINGLE = 'single', 'Single date'
    RANGE = 'range', 'Date range'
    RECURRING = 'recurring', 'Recurring'


class RecurringPattern(models.TextChoices):
    DAILY = 'daily', 'Daily'
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'


class OverrideAction(models.TextChoices):
    FORCE_ON = 'force_on', 'Force ON'
    FORCE_OFF = 'force_off', 'Force OFF'


class Priority(models.IntegerChoices):
    """Strength of a meal status source; higher wins."""

    SYSTEM = 1, 'System default'
    USER = 2, 'User manual'
    MANAGER = 3, 'Manager override'
    ADMIN = 4, 'Admin override'

    @classmethod
    def for_role(cls, role) -> 'Priority':
        role = UserRole.coerce(role)
        if role.is_admin:
            return cls.ADMIN
        if role.is_manager:
            return cls.MANAGER
        return cls.USER


class Meal(models.Model):
    """
    Manual meal status of one user for one date and meal type.

    No row means the system default applies.
    """

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='meals')
    date = models.DateField()
    meal_type = models.CharField(max_length=10, choices=MealType.choices, default=MealType.LUNCH)
    is_on = models.BooleanField(default=True)
    count = models.PositiveSmallIntegerField(default=1)
    is_manually_set = models.BooleanField(default=False)
    modified_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    notes = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meals'
        ordering = ['date', 'meal_type']
        constraints = [
            models.UniqueConstraint(fields=['user', 'date', 'meal_type'], name='unique_meal_per_user_date_type'),
        ]
        indexes = [
            models.Index(fields=['date', 'meal_type'], name='meals_date_type_idx'),
        ]

    def __str__(self):
        state = 'ON' if self.is_on else 'OFF'
        return f"{self.user} {self.date} {self.meal_type} {state}"


class RuleOverride(models.Model):
    """
    Manager/admin rule forcing meals ON or OFF.

    Priority comes from the creator's role at creation time and never
    changes afterwards.
    """

    target_type = models.CharField(max_length=20, choices=TargetType.choices)
    target_user = models.ForeignKey(
        'accounts.User', on_delete=models.CASCADE, null=True, blank=True, related_name='meal_overrides'
    )
    date_type = models.CharField(max_length=20, choices=DateType.choices)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    recurring_pattern = models.CharField(max_length=20, choices=RecurringPattern.choices, blank=True)
    recurring_days = models.JSONField(default=list, blank=True)
    meal_type = models.CharField(max_length=10, choices=OverrideMealType.choices)
    action = models.CharField(max_length=20, choices=OverrideAction.choices)
    priority = models.PositiveSmallIntegerField(choices=Priority.choices, editable=False)
    created_by_role = models.CharField(max_length=20, choices=UserRole.choices)
    created_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='created_overrides'
    )
    reason = models.CharField(max_length=500, blank=True)
    reason_bn = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rule_overrides'
        ordering = ['-priority', '-created_at', '-id']
        indexes = [
            models.Index(fields=['start_date', 'end_date'], name='overrides_window_idx'),
            models.Index(fields=['target_type', 'target_user'], name='overrides_target_idx'),
            models.Index(fields=['meal_type', 'is_active'], name='overrides_meal_active_idx'),
            models.Index(fields=['-priority', '-created_at'], name='overrides_order_idx'),
        ]

    def __str__(self):
        return f"{self.get_action_display()} {self.meal_type} ({self.date_type} from {self.start_date})"

    def is_expired(self, now) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def covers_meal_type(self, meal_type: str) -> bool:
        return self.meal_type in (meal_type, OverrideMealType.BOTH)

    def applies_to_date(self, day) -> bool:
        """
        Date pattern check only; activity and expiry are checked separately.

        Recurring overrides start at ``start_date`` and, when set, stop
        after ``end_date``. Weekly days use Monday=0 .. Sunday=6, monthly
        days are days of the month.
        """
        if self.date_type == DateType.SINGLE:
            return day == self.start_date
        if self.date_type == DateType.RANGE:
            return self.end_date is not None and self.start_date <= day <= self.end_date
        if self.date_type == DateType.RECURRING:
            if day < self.start_date:
                return False
            if self.end_date is not None and day > self.end_date:
                return False
            days = self.recurring_days or []
            if self.recurring_pattern == RecurringPattern.DAILY:
                return True
            if self.recurring_pattern == RecurringPattern.WEEKLY:
                return day.weekday() in days
            if self.recurring_pattern == RecurringPattern.MONTHLY:
                return day.day in days
        return False
