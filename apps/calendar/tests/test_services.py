"""
Service layer tests for the calendar app.

Tests cover:
- Month window lookups and finalization
- Holiday CRUD and policy filtering
- Global settings singleton and updates
- Holiday seeding command
"""

import pytest
from datetime import date, datetime, timezone as dt_timezone
from django.core.management import call_command

from apps.calendar.models import GlobalSettings, Holiday, HolidayType, MonthSettings
from apps.calendar.services import (
    MealPolicy,
    get_month_window,
    current_month_window,
    is_month_finalized,
    is_within_current_month,
    get_applicable_holidays,
    get_upcoming_off_days,
    create_holiday,
    update_holiday,
    delete_holiday,
    save_month_settings,
    finalize_month,
    load_policy,
    update_global_settings,
)
from apps.calendar.services.exceptions import (
    DuplicateHolidayError,
    HolidayNotFoundError,
    InsufficientPermissionsError,
    InvalidDateRangeError,
    InvalidHolidayTypeError,
    InvalidSettingsError,
    MonthFinalizedError,
    MonthSettingsNotFoundError,
)

# Wednesday 2026-02-11, 09:00 in Dhaka
FEB_NOW = datetime(2026, 2, 11, 3, 0, tzinfo=dt_timezone.utc)


# =============================================================================
# Month Window Tests
# =============================================================================

@pytest.mark.django_db
class TestMonthWindow:
    """Tests for month_window.py service functions."""

    def test_calendar_fallback(self):
        window = get_month_window(2026, 2)
        assert window.start_date == date(2026, 2, 1)
        assert window.end_date == date(2026, 2, 28)
        assert window.is_custom is False
        assert window.is_finalized is False

    def test_custom_window(self, february_settings):
        window = get_month_window(2026, 2)
        assert window.start_date == date(2026, 2, 3)
        assert window.end_date == date(2026, 3, 2)
        assert window.is_custom is True
        assert window.settings_id == february_settings.pk

    def test_within_current_month_uses_custom_window(self, february_settings):
        assert is_within_current_month(date(2026, 3, 1), now=FEB_NOW) is True
        assert is_within_current_month(date(2026, 2, 2), now=FEB_NOW) is False
        assert is_within_current_month(date(2026, 3, 3), now=FEB_NOW) is False

    def test_within_current_month_calendar_fallback(self):
        assert is_within_current_month(date(2026, 2, 1), now=FEB_NOW) is True
        assert is_within_current_month(date(2026, 3, 1), now=FEB_NOW) is False

    def test_current_month_window_uses_meal_timezone(self):
        # 2026-01-31 20:00 UTC is already February in Dhaka
        window = current_month_window(datetime(2026, 1, 31, 20, 0, tzinfo=dt_timezone.utc))
        assert (window.year, window.month) == (2026, 2)

    def test_finalized_lookup_uses_date_own_month(self, february_settings):
        february_settings.is_finalized = True
        february_settings.save()
        assert is_month_finalized(date(2026, 2, 15)) is True
        # Inside February's custom window but belongs to March
        assert is_month_finalized(date(2026, 3, 1)) is False


# =============================================================================
# Month Settings Management Tests
# =============================================================================

@pytest.mark.django_db
class TestMonthSettingsManagement:
    """Tests for month_settings_management.py service functions."""

    def test_save_defaults_to_calendar_month(self, manager):
        row = save_month_settings(actor=manager, year=2026, month=4, notes='April')
        assert row.start_date == date(2026, 4, 1)
        assert row.end_date == date(2026, 4, 30)
        assert row.notes == 'April'
        assert row.created_by == manager

    def test_save_updates_existing(self, manager, february_settings):
        row = save_month_settings(
            actor=manager, year=2026, month=2,
            start_date=date(2026, 2, 1), end_date=date(2026, 2, 28), notes='fixed',
        )
        assert row.pk == february_settings.pk
        assert row.start_date == date(2026, 2, 1)
        assert MonthSettings.objects.count() == 1

    def test_window_longer_than_31_days_rejected(self, manager):
        with pytest.raises(InvalidDateRangeError):
            save_month_settings(
                actor=manager, year=2026, month=1,
                start_date=date(2026, 1, 1), end_date=date(2026, 2, 1),
            )

    def test_user_cannot_save(self, member):
        with pytest.raises(InsufficientPermissionsError):
            save_month_settings(actor=member, year=2026, month=1)

    def test_finalize(self, manager, february_settings):
        row = finalize_month(actor=manager, settings_id=february_settings.pk)
        assert row.is_finalized is True
        assert row.finalized_at is not None

    def test_finalized_month_cannot_be_edited(self, manager, february_settings):
        finalize_month(actor=manager, settings_id=february_settings.pk)
        with pytest.raises(MonthFinalizedError):
            save_month_settings(actor=manager, year=2026, month=2)
        with pytest.raises(MonthFinalizedError):
            finalize_month(actor=manager, settings_id=february_settings.pk)

    def test_finalize_missing(self, manager):
        with pytest.raises(MonthSettingsNotFoundError):
            finalize_month(actor=manager, settings_id=999)


# =============================================================================
# Holiday Management Tests
# =============================================================================

@pytest.mark.django_db
class TestHolidayManagement:
    """Tests for holiday_management.py service functions."""

    def test_create_holiday(self, admin):
        holiday = create_holiday(actor=admin, date='2026-12-16', name='Victory Day', name_bn='বিজয় দিবস')
        assert holiday.date == date(2026, 12, 16)
        assert holiday.type == HolidayType.GOVERNMENT
        assert holiday.added_by == admin

    def test_duplicate_date_and_name_rejected(self, admin, victory_day):
        with pytest.raises(DuplicateHolidayError):
            create_holiday(actor=admin, date=date(2026, 12, 16), name='victory day')

    def test_same_date_different_name_allowed(self, admin, victory_day):
        create_holiday(actor=admin, date=date(2026, 12, 16), name='Another Day', type=HolidayType.OPTIONAL)
        assert Holiday.objects.filter(date=date(2026, 12, 16)).count() == 2

    def test_manager_cannot_create(self, manager):
        with pytest.raises(InsufficientPermissionsError):
            create_holiday(actor=manager, date=date(2026, 12, 16), name='Victory Day')

    def test_invalid_type(self, admin):
        with pytest.raises(InvalidHolidayTypeError):
            create_holiday(actor=admin, date=date(2026, 12, 16), name='X', type='bank')

    def test_update_and_delete(self, admin, victory_day):
        updated = update_holiday(actor=admin, holiday_id=victory_day.pk, is_active=False)
        assert updated.is_active is False
        delete_holiday(actor=admin, holiday_id=victory_day.pk)
        with pytest.raises(HolidayNotFoundError):
            delete_holiday(actor=admin, holiday_id=victory_day.pk)

    def test_applicable_holidays_follow_policy(self, victory_day):
        Holiday.objects.create(date=date(2026, 12, 20), name='Optional', type=HolidayType.OPTIONAL)
        holidays = get_applicable_holidays(date(2026, 12, 1), date(2026, 12, 31), MealPolicy())
        assert holidays == [victory_day]

    def test_upcoming_off_days(self, victory_day):
        off_days = get_upcoming_off_days(MealPolicy(), start=date(2026, 12, 14), days=7)
        # Mon 14 .. Sun 20: Victory Day (Wed 16), Friday 18, Saturday 19 is the 3rd Saturday
        assert [d['date'] for d in off_days] == [date(2026, 12, 16), date(2026, 12, 18), date(2026, 12, 19)]

    def test_upcoming_off_days_defaults_to_today(self):
        off_days = get_upcoming_off_days(MealPolicy(), now=datetime(2026, 1, 26, 3, 0, tzinfo=dt_timezone.utc))
        assert off_days[0]['date'] == date(2026, 1, 30)
        assert all(d['date'] <= date(2026, 2, 24) for d in off_days)


# =============================================================================
# Global Settings Tests
# =============================================================================

@pytest.mark.django_db
class TestGlobalSettings:
    """Tests for the settings singleton."""

    def test_load_creates_single_row(self):
        first = GlobalSettings.load()
        second = GlobalSettings.load()
        assert first.pk == second.pk == GlobalSettings.SINGLETON_PK
        assert GlobalSettings.objects.count() == 1

    def test_default_row_matches_default_policy(self):
        assert load_policy() == MealPolicy()

    def test_update_by_admin(self, admin):
        update_global_settings(actor=admin, friday_off=False, lunch_cutoff_hour=11)
        policy = load_policy()
        assert policy.weekend.friday_off is False
        assert policy.cutoff_times.lunch == 11

    def test_update_requires_admin(self, manager):
        with pytest.raises(InsufficientPermissionsError):
            update_global_settings(actor=manager, friday_off=False)

    def test_unknown_field_rejected(self, admin):
        with pytest.raises(InvalidSettingsError):
            update_global_settings(actor=admin, breakfast_off=True)

    def test_cutoff_out_of_range_rejected(self, admin):
        with pytest.raises(InvalidSettingsError):
            update_global_settings(actor=admin, dinner_cutoff_hour=24)

    def test_rates_are_not_settings(self, admin):
        with pytest.raises(InvalidSettingsError):
            update_global_settings(actor=admin, default_lunch_rate=60)


# =============================================================================
# Seed Command Tests
# =============================================================================

@pytest.mark.django_db
class TestSeedHolidays:
    """Tests for the seed_holidays management command."""

    def test_seed_is_idempotent(self):
        call_command('seed_holidays', '--year', '2026')
        count = Holiday.objects.count()
        call_command('seed_holidays', '--year', '2026')
        assert Holiday.objects.count() == count == 26

    def test_seed_keeps_both_holidays_on_shared_date(self):
        call_command('seed_holidays')
        names = set(Holiday.objects.filter(date=date(2026, 5, 1)).values_list('name', flat=True))
        assert names == {'May Day', 'Buddha Purnima'}
