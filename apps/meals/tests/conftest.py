import pytest
from datetime import date, datetime, timezone as dt_timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.calendar.models import MonthSettings
from apps.calendar.services import MealPolicy
from apps.meals.models import Meal, Priority, RuleOverride


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


def make_client(user):
    """Return an API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def make_user(email, role, name=''):
    return User.objects.create_user(email=email, password='TestPass123!', name=name, role=role)


class InMemoryProvider:
    """Provider over plain lists, for resolver and gate tests without a database."""

    def __init__(self, policy=None, holidays=(), meals=(), overrides=(), month_settings=()):
        self.policy = policy or MealPolicy()
        self.holidays = list(holidays)
        self.meals = list(meals)
        self.overrides = list(overrides)
        self.month_settings = list(month_settings)

    def get_policy(self):
        return self.policy

    def find_holidays(self, start, end):
        return [h for h in self.holidays if h.is_active and start <= h.date <= end]

    def find_manual_meal(self, user_id, day, meal_type):
        for meal in self.meals:
            if (meal.user_id, meal.date, meal.meal_type) == (user_id, day, meal_type) and meal.is_manually_set:
                return meal
        return None

    def find_overrides(self, user_id, meal_type, now):
        return list(self.overrides)

    def find_month_settings(self, year, month):
        for row in self.month_settings:
            if (row.year, row.month) == (year, month):
                return row
        return None


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def member(db):
    """Create and return a regular user."""
    return make_user('member@example.com', UserRole.USER, 'Member')


@pytest.fixture
def other_member(db):
    return make_user('other@example.com', UserRole.USER, 'Other')


@pytest.fixture
def manager(db):
    return make_user('manager@example.com', UserRole.MANAGER, 'Manager')


@pytest.fixture
def other_manager(db):
    return make_user('manager2@example.com', UserRole.MANAGER, 'Second Manager')


@pytest.fixture
def admin(db):
    return make_user('admin@example.com', UserRole.ADMIN, 'Admin')


@pytest.fixture
def superadmin(db):
    return make_user('root@example.com', UserRole.SUPERADMIN, 'Root')


@pytest.fixture
def member_client(member):
    return make_client(member)


@pytest.fixture
def manager_client(manager):
    return make_client(manager)


@pytest.fixture
def admin_client(admin):
    return make_client(admin)


@pytest.fixture
def manual_meal(db):
    """Factory for manual meal records."""
    def _create(user, day, meal_type='lunch', is_on=True, count=1):
        return Meal.objects.create(
            user=user,
            date=day,
            meal_type=meal_type,
            is_on=is_on,
            count=count,
            is_manually_set=True,
            modified_by=user,
        )
    return _create


@pytest.fixture
def make_override(db):
    """
    Factory for overrides stored directly, bypassing the service checks.

    ``created_at`` can be pinned to make tie-breaks deterministic.
    """
    def _create(creator, day, action='force_off', meal_type='lunch', target_user=None, created_at=None, **fields):
        role = UserRole.coerce(creator.role)
        override = RuleOverride.objects.create(
            target_type=fields.pop('target_type', 'user' if target_user else 'global'),
            target_user=target_user,
            date_type=fields.pop('date_type', 'single'),
            start_date=day,
            meal_type=meal_type,
            action=action,
            priority=Priority.for_role(role),
            created_by_role=role.value,
            created_by=creator,
            **fields,
        )
        if created_at is not None:
            RuleOverride.objects.filter(pk=override.pk).update(created_at=created_at)
            override.refresh_from_db()
        return override
    return _create


@pytest.fixture
def finalized_january(db, manager):
    return MonthSettings.objects.create(
        year=2026,
        month=1,
        start_date=date(2026, 1, 1),
        end_date=date(2026, 1, 31),
        is_finalized=True,
        created_by=manager,
    )
