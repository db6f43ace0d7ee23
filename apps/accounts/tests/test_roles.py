"""
Tests for the role model and role management service.
"""

import pytest
from types import SimpleNamespace

from apps.accounts.models import UserRole
from apps.accounts.permissions import IsAdminRole, IsManagerRole, IsSuperAdminRole
from apps.accounts.services import (
    change_user_role,
    list_users,
    InsufficientPermissionsError,
    InvalidRoleError,
    UserNotFoundError,
)


class TestUserRole:
    """Tests for the closed role enum."""

    def test_ranks_are_ordered(self):
        ranks = [role.rank for role in (UserRole.USER, UserRole.MANAGER, UserRole.ADMIN, UserRole.SUPERADMIN)]
        assert ranks == sorted(ranks)

    @pytest.mark.parametrize('role,manager,admin,superadmin', [
        ('user', False, False, False),
        ('manager', True, False, False),
        ('admin', True, True, False),
        ('superadmin', True, True, True),
    ])
    def test_predicates(self, role, manager, admin, superadmin):
        role = UserRole.coerce(role)
        assert (role.is_manager, role.is_admin, role.is_superadmin) == (manager, admin, superadmin)

    def test_coerce_unknown(self):
        with pytest.raises(ValueError):
            UserRole.coerce('owner')


class TestRolePermissions:
    """Tests for the DRF permission classes."""

    @staticmethod
    def request_for(role, authenticated=True):
        return SimpleNamespace(user=SimpleNamespace(role=role, is_authenticated=authenticated))

    @pytest.mark.parametrize('permission,role,expected', [
        (IsManagerRole, 'user', False),
        (IsManagerRole, 'manager', True),
        (IsManagerRole, 'superadmin', True),
        (IsAdminRole, 'manager', False),
        (IsAdminRole, 'admin', True),
        (IsSuperAdminRole, 'admin', False),
        (IsSuperAdminRole, 'superadmin', True),
    ])
    def test_minimum_role(self, permission, role, expected):
        assert permission().has_permission(self.request_for(role), None) is expected

    def test_anonymous_denied(self):
        assert IsManagerRole().has_permission(self.request_for('admin', authenticated=False), None) is False

    def test_unknown_role_denied(self):
        assert IsManagerRole().has_permission(self.request_for('owner'), None) is False


@pytest.mark.django_db
class TestRoleManagement:
    """Tests for role_management.py service functions."""

    def test_change_role(self, superadmin, user):
        updated = change_user_role(actor=superadmin, user_id=user.pk, new_role='admin')
        assert updated.role == UserRole.ADMIN

    def test_only_superadmin(self, manager, user):
        with pytest.raises(InsufficientPermissionsError):
            change_user_role(actor=manager, user_id=user.pk, new_role='manager')

    def test_invalid_role(self, superadmin, user):
        with pytest.raises(InvalidRoleError):
            change_user_role(actor=superadmin, user_id=user.pk, new_role='chef')

    def test_missing_user(self, superadmin):
        with pytest.raises(UserNotFoundError):
            change_user_role(
                actor=superadmin, user_id='00000000-0000-0000-0000-000000000000', new_role='manager',
            )

    def test_list_users_by_role(self, user, manager, user_inactive):
        assert list(list_users(role='manager')) == [manager]
        assert set(list_users()) == {user, manager}

    def test_list_users_unknown_role(self):
        with pytest.raises(InvalidRoleError):
            list_users(role='chef')
