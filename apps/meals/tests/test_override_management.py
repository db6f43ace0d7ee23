"""
Service layer tests for overrides.

Tests cover:
- Create/modify authorization predicates
- Override creation and validation
- Updates, deletion and activation toggling
- Listing and applicability checks
"""

import pytest
from datetime import date
from types import SimpleNamespace

from apps.meals.models import RuleOverride
from apps.meals.services import (
    can_create_override,
    can_modify_override,
    create_override,
    update_override,
    delete_override,
    toggle_override_active,
    list_overrides,
    check_overrides,
    get_effective_meal_status,
    InsufficientPermissionsError,
    InvalidMealTypeError,
    InvalidOverrideError,
    UserNotFoundError,
    OverrideNotFoundError,
)

from .conftest import utc

NOW = utc(2026, 1, 20, 6, 0)


class TestAuthorizationPredicates:
    """Tests for can_create_override and can_modify_override."""

    @pytest.mark.parametrize('role,target_type,expected', [
        ('user', 'user', False),
        ('user', 'global', False),
        ('manager', 'user', True),
        ('manager', 'all_users', False),
        ('manager', 'global', False),
        ('admin', 'user', True),
        ('admin', 'all_users', True),
        ('admin', 'global', True),
        ('superadmin', 'global', True),
        ('admin', 'team', False),
    ])
    def test_can_create(self, role, target_type, expected):
        assert can_create_override(role, target_type) is expected

    def test_admin_modifies_any(self):
        override = SimpleNamespace(created_by_id='someone')
        assert can_modify_override(override, 'admin-id', 'admin') is True
        assert can_modify_override(override, 'root-id', 'superadmin') is True

    def test_manager_modifies_own_only(self):
        override = SimpleNamespace(created_by_id='m1')
        assert can_modify_override(override, 'm1', 'manager') is True
        assert can_modify_override(override, 'm2', 'manager') is False

    def test_user_modifies_none(self):
        override = SimpleNamespace(created_by_id='u1')
        assert can_modify_override(override, 'u1', 'user') is False

    def test_orphaned_override_admin_only(self):
        override = SimpleNamespace(created_by_id=None)
        assert can_modify_override(override, None, 'manager') is False
        assert can_modify_override(override, None, 'admin') is True


@pytest.mark.django_db
class TestCreateOverride:
    """Tests for create_override."""

    def test_manager_creates_user_override(self, manager, member):
        override = create_override(
            actor=manager, target_type='user', target_user_id=member.pk,
            date_type='single', start_date='2026-01-30', meal_type='lunch', action='force_on',
        )

        assert override.priority == 3
        assert override.created_by_role == 'manager'
        assert override.created_by == manager
        assert override.target_user == member
        assert override.start_date == date(2026, 1, 30)

    def test_admin_global_priority(self, admin):
        override = create_override(
            actor=admin, target_type='global', date_type='range',
            start_date=date(2026, 3, 1), end_date=date(2026, 3, 5), meal_type='both', action='force_off',
        )
        assert override.priority == 4

    def test_manager_cannot_create_global(self, manager):
        with pytest.raises(InsufficientPermissionsError):
            create_override(
                actor=manager, target_type='global', date_type='single',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_user_cannot_create(self, member):
        with pytest.raises(InsufficientPermissionsError):
            create_override(
                actor=member, target_type='user', target_user_id=member.pk, date_type='single',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_user_target_requires_user(self, manager):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=manager, target_type='user', date_type='single',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_unknown_target_user(self, manager):
        with pytest.raises(UserNotFoundError):
            create_override(
                actor=manager, target_type='user', target_user_id='00000000-0000-0000-0000-000000000000',
                date_type='single', start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_range_requires_end_date(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='range',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_range_end_before_start(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='range',
                start_date=date(2026, 3, 5), end_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_recurring_requires_pattern(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='recurring',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_weekly_requires_days(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='recurring', recurring_pattern='weekly',
                start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_weekly_day_out_of_range(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='recurring', recurring_pattern='weekly',
                recurring_days=[7], start_date=date(2026, 3, 1), meal_type='lunch', action='force_off',
            )

    def test_daily_needs_no_days(self, admin):
        override = create_override(
            actor=admin, target_type='global', date_type='recurring', recurring_pattern='daily',
            start_date=date(2026, 3, 1), meal_type='dinner', action='force_off',
        )
        assert override.recurring_days == []

    def test_single_drops_end_date(self, admin):
        override = create_override(
            actor=admin, target_type='global', date_type='single',
            start_date=date(2026, 3, 1), end_date=date(2026, 3, 9), meal_type='lunch', action='force_off',
        )
        assert override.end_date is None

    def test_invalid_meal_type(self, admin):
        with pytest.raises(InvalidMealTypeError):
            create_override(
                actor=admin, target_type='global', date_type='single',
                start_date=date(2026, 3, 1), meal_type='breakfast', action='force_off',
            )

    def test_invalid_action(self, admin):
        with pytest.raises(InvalidOverrideError):
            create_override(
                actor=admin, target_type='global', date_type='single',
                start_date=date(2026, 3, 1), meal_type='lunch', action='toggle',
            )

    def test_created_override_resolves(self, manager, member):
        create_override(
            actor=manager, target_type='user', target_user_id=member.pk,
            date_type='single', start_date=date(2026, 1, 30), meal_type='lunch', action='force_off',
        )
        status = get_effective_meal_status(date(2026, 1, 30), member.pk, 'lunch', now=NOW)
        assert status.source == 'override_manager'


@pytest.mark.django_db
class TestModifyOverride:
    """Tests for update, delete and toggle."""

    def test_update_allowed_fields(self, manager, make_override):
        override = make_override(manager, date(2026, 1, 30))
        updated = update_override(
            actor=manager, override_id=override.pk, action='force_on', reason='Guests', is_active=False,
        )

        assert updated.action == 'force_on'
        assert updated.reason == 'Guests'
        assert updated.is_active is False
        assert updated.priority == 3

    def test_priority_cannot_be_updated(self, admin, make_override):
        override = make_override(admin, date(2026, 1, 30))
        with pytest.raises(InvalidOverrideError):
            update_override(actor=admin, override_id=override.pk, priority=1)

    def test_dates_cannot_be_updated(self, admin, make_override):
        override = make_override(admin, date(2026, 1, 30))
        with pytest.raises(InvalidOverrideError):
            update_override(actor=admin, override_id=override.pk, start_date=date(2026, 2, 1))

    def test_manager_cannot_touch_admin_override(self, manager, admin, make_override):
        override = make_override(admin, date(2026, 1, 30))
        with pytest.raises(InsufficientPermissionsError):
            update_override(actor=manager, override_id=override.pk, reason='x')
        with pytest.raises(InsufficientPermissionsError):
            delete_override(actor=manager, override_id=override.pk)

    def test_manager_cannot_touch_other_manager_override(self, manager, other_manager, make_override):
        override = make_override(other_manager, date(2026, 1, 30))
        with pytest.raises(InsufficientPermissionsError):
            toggle_override_active(actor=manager, override_id=override.pk)

    def test_admin_deletes_manager_override(self, admin, manager, make_override):
        override = make_override(manager, date(2026, 1, 30))
        delete_override(actor=admin, override_id=override.pk)
        assert not RuleOverride.objects.filter(pk=override.pk).exists()

    def test_missing_override(self, admin):
        with pytest.raises(OverrideNotFoundError):
            delete_override(actor=admin, override_id=999)

    def test_toggle_active(self, manager, make_override):
        override = make_override(manager, date(2026, 1, 30))
        assert toggle_override_active(actor=manager, override_id=override.pk).is_active is False
        assert toggle_override_active(actor=manager, override_id=override.pk).is_active is True


@pytest.mark.django_db
class TestOverrideQueries:
    """Tests for list_overrides and check_overrides."""

    def test_list_requires_manager(self, member):
        with pytest.raises(InsufficientPermissionsError):
            list_overrides(actor=member)

    def test_list_filters(self, manager, admin, member, make_override):
        lunch = make_override(manager, date(2026, 1, 30), target_user=member)
        make_override(admin, date(2026, 1, 30), meal_type='dinner', target_type='all_users')
        make_override(admin, date(2026, 1, 30), is_active=False)

        assert list(list_overrides(actor=manager, meal_type='lunch', target_type='user')) == [lunch]
        assert list_overrides(actor=manager, is_active=False).count() == 1
        assert list_overrides(actor=manager).count() == 3

    def test_list_date_window(self, admin, make_override):
        single_inside = make_override(admin, date(2026, 3, 10))
        make_override(admin, date(2026, 4, 10))
        range_overlap = make_override(admin, date(2026, 2, 25), date_type='range', end_date=date(2026, 3, 2))
        make_override(admin, date(2026, 2, 1), date_type='range', end_date=date(2026, 2, 10))
        recurring = make_override(
            admin, date(2025, 1, 1), date_type='recurring', recurring_pattern='weekly', recurring_days=[4],
        )

        found = set(list_overrides(actor=admin, start=date(2026, 3, 1), end=date(2026, 3, 31)))
        assert found == {single_inside, range_overlap, recurring}

    def test_check_own_overrides(self, member, manager, make_override):
        override = make_override(manager, date(2026, 1, 30), target_user=member)
        assert check_overrides(actor=member, day=date(2026, 1, 30), meal_type='lunch', now=NOW) == [override]

    def test_user_cannot_check_others(self, member, other_member):
        with pytest.raises(InsufficientPermissionsError):
            check_overrides(
                actor=member, user_id=other_member.pk, day=date(2026, 1, 30), meal_type='lunch', now=NOW,
            )

    def test_manager_checks_others(self, manager, member, make_override):
        override = make_override(manager, date(2026, 1, 30), target_user=member)
        found = check_overrides(
            actor=manager, user_id=member.pk, day=date(2026, 1, 30), meal_type='lunch', now=NOW,
        )
        assert found == [override]
