import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.calendar.models import GlobalSettings, Holiday, HolidayType, MonthSettings


def make_client(user):
    """Return an API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def member(db):
    """Create and return a regular user."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        name='Member',
        role=UserRole.USER,
    )


@pytest.fixture
def manager(db):
    """Create and return a manager."""
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        name='Manager',
        role=UserRole.MANAGER,
    )


@pytest.fixture
def admin(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Admin',
        role=UserRole.ADMIN,
    )


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
def global_settings(db):
    """Settings row with default policy."""
    return GlobalSettings.load()


@pytest.fixture
def victory_day(db):
    """Government holiday on a Wednesday."""
    return Holiday.objects.create(
        date=date(2026, 12, 16),
        name='Victory Day',
        name_bn='বিজয় দিবস',
        type=HolidayType.GOVERNMENT,
    )


@pytest.fixture
def february_settings(db, manager):
    """Custom February 2026 window running into early March."""
    return MonthSettings.objects.create(
        year=2026,
        month=2,
        start_date=date(2026, 2, 3),
        end_date=date(2026, 3, 2),
        created_by=manager,
    )
