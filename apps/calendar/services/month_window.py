"""
Month window lookups.

A month's window comes from its ``MonthSettings`` row when one exists
and falls back to the calendar month otherwise.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from apps.calendar.models import MonthSettings

from .dates import meal_today, month_bounds, to_meal_date


@dataclass(frozen=True)
class MonthWindow:
    year: int
    month: int
    start_date: date
    end_date: date
    is_finalized: bool = False
    is_custom: bool = False
    settings_id: Optional[int] = None

    def contains(self, value) -> bool:
        return self.start_date <= to_meal_date(value) <= self.end_date

    def as_dict(self) -> dict:
        return {
            'year': self.year,
            'month': self.month,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'is_finalized': self.is_finalized,
            'is_custom': self.is_custom,
            'settings_id': self.settings_id,
        }


def find_month_settings(year: int, month: int) -> Optional[MonthSettings]:
    return MonthSettings.objects.filter(year=year, month=month).first()


def build_month_window(year: int, month: int, month_settings=None) -> MonthWindow:
    """Build the window for a month from its settings row, if any."""
    if month_settings is not None:
        return MonthWindow(
            year=year,
            month=month,
            start_date=to_meal_date(month_settings.start_date),
            end_date=to_meal_date(month_settings.end_date),
            is_finalized=bool(month_settings.is_finalized),
            is_custom=True,
            settings_id=getattr(month_settings, 'pk', None),
        )
    start_date, end_date = month_bounds(year, month)
    return MonthWindow(year=year, month=month, start_date=start_date, end_date=end_date)


def get_month_window(year: int, month: int) -> MonthWindow:
    return build_month_window(year, month, find_month_settings(year, month))


def current_month_window(now: Optional[datetime] = None) -> MonthWindow:
    """Window of the month containing today in the meal zone."""
    today = meal_today(now)
    return get_month_window(today.year, today.month)


def is_month_finalized(value) -> bool:
    """Whether the month ``value`` falls in (by its own year and month) is finalized."""
    day = to_meal_date(value)
    return MonthSettings.objects.filter(year=day.year, month=day.month, is_finalized=True).exists()


def is_within_current_month(value, now: Optional[datetime] = None) -> bool:
    return current_month_window(now).contains(value)
