import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


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
def user(db):
    """Create and return a regular user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        name='Test User',
        phone='01700000000',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        name='Manager',
        role=UserRole.MANAGER,
    )


@pytest.fixture
def superadmin(db):
    return User.objects.create_superuser(
        email='root@example.com',
        password='TestPass123!',
        name='Root',
    )


@pytest.fixture
def authenticated_client(user):
    """Return an API client authenticated as the regular user."""
    return make_client(user)


@pytest.fixture
def manager_client(manager):
    return make_client(manager)


@pytest.fixture
def superadmin_client(superadmin):
    return make_client(superadmin)
