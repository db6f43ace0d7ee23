# ==========================================
# apps/calendar/models.py
# ==========================================

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class HolidayType(models.TextChoices):
    GOVERNMENT = 'government', 'Government'
    OPTIONAL = 'optional', 'Optional'
    RELIGIOUS = 'religious', 'Religious'


class Holiday(models.Model):
    """Public holiday; matched against meal dates by calendar day only."""

    date = models.DateField(db_index=True)
    name = models.CharField(max_length=200)
    name_bn = models.CharField(max_length=200, blank=True)
    type = models.CharField(max_length=20, choices=HolidayType.choices, default=HolidayType.GOVERNMENT)
    is_active = models.BooleanField(default=True)
    added_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='added_holidays'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'holidays'
        ordering = ['date', 'id']
        indexes = [
            models.Index(fields=['date', 'is_active'], name='holidays_date_active_idx'),
            models.Index(fields=['type'], name='holidays_type_idx'),
        ]

    def __str__(self):
        return f"{self.date} - {self.name}"

    @property
    def display_name(self):
        return self.name_bn or self.name


class GlobalSettings(models.Model):
    """
    System-wide meal policy (single row, pk=1).

    Always read through ``GlobalSettings.load()`` and convert to an
    immutable ``MealPolicy`` with ``to_policy()`` before handing it to
    the evaluator, resolver or gate.
    """

    SINGLETON_PK = 1

    # Weekend policy
    friday_off = models.BooleanField(default=True)
    saturday_off = models.BooleanField(default=False)
    odd_saturday_off = models.BooleanField(default=True)
    even_saturday_off = models.BooleanField(default=False)

    # Holiday policy
    government_holiday_off = models.BooleanField(default=True)
    optional_holiday_off = models.BooleanField(default=False)
    religious_holiday_off = models.BooleanField(default=True)

    # Cutoff hours (24h, meal zone)
    lunch_cutoff_hour = models.PositiveSmallIntegerField(default=10, validators=[MaxValueValidator(23)])
    dinner_cutoff_hour = models.PositiveSmallIntegerField(default=16, validators=[MaxValueValidator(23)])

    # Default meal status when no policy turns the day off
    lunch_default_on = models.BooleanField(default=True)
    dinner_default_on = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    class Meta:
        db_table = 'global_settings'
        verbose_name = 'Global settings'
        verbose_name_plural = 'Global settings'

    def __str__(self):
        return 'Global meal settings'

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError('Global settings cannot be deleted')

    @classmethod
    def load(cls):
        """Return the settings row, creating it with defaults on first read."""
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    def to_policy(self):
        from .services.policy import MealPolicy

        return MealPolicy.from_dict({
            'weekend_policy': {
                'friday_off': self.friday_off,
                'saturday_off': self.saturday_off,
                'odd_saturday_off': self.odd_saturday_off,
                'even_saturday_off': self.even_saturday_off,
            },
            'holiday_policy': {
                'government_holiday_off': self.government_holiday_off,
                'optional_holiday_off': self.optional_holiday_off,
                'religious_holiday_off': self.religious_holiday_off,
            },
            'cutoff_times': {
                'lunch': self.lunch_cutoff_hour,
                'dinner': self.dinner_cutoff_hour,
            },
            'default_meal_status': {
                'lunch': self.lunch_default_on,
                'dinner': self.dinner_default_on,
            },
        })


class MonthSettings(models.Model):
    """Billing window and finalization state for one month."""

    MAX_WINDOW_DAYS = 31

    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    start_date = models.DateField()
    end_date = models.DateField()
    is_finalized = models.BooleanField(default=False)
    finalized_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='created_month_settings'
    )
    modified_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'month_settings'
        unique_together = [['year', 'month']]
        ordering = ['-year', '-month']
        indexes = [
            models.Index(fields=['is_finalized'], name='month_settings_final_idx'),
            models.Index(fields=['start_date', 'end_date'], name='month_settings_window_idx'),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d}"

    def clean(self):
        if self.start_date and self.end_date:
            if self.start_date > self.end_date:
                raise ValidationError('Start date must be on or before end date')
            if (self.end_date - self.start_date).days + 1 > self.MAX_WINDOW_DAYS:
                raise ValidationError(f'Month window cannot exceed {self.MAX_WINDOW_DAYS} days')

    def contains(self, day) -> bool:
        return self.start_date <= day <= self.end_date
