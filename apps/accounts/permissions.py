"""
Role-based permission classes.

Each class compares the requesting user's role rank against a minimum
role, so new roles only need a rank to slot in.

Usage:
    @api_view(['PUT'])
    @permission_classes([IsAuthenticated, IsManagerRole])
    def update_meal_count(request):
        ...
"""

from rest_framework.permissions import BasePermission

from .models import UserRole


class HasMinimumRole(BasePermission):
    """Permission: user's role must rank at or above ``minimum_role``."""

    minimum_role = UserRole.USER
    message = 'You do not have permission to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        try:
            role = UserRole.coerce(user.role)
        except ValueError:
            return False
        return role.rank >= self.minimum_role.rank


class IsManagerRole(HasMinimumRole):
    """Permission: manager, admin or superadmin."""

    minimum_role = UserRole.MANAGER
    message = 'Only managers or higher roles can perform this action.'


class IsAdminRole(HasMinimumRole):
    """Permission: admin or superadmin."""

    minimum_role = UserRole.ADMIN
    message = 'Only admins or superadmins can perform this action.'


class IsSuperAdminRole(HasMinimumRole):
    """Permission: superadmin only."""

    minimum_role = UserRole.SUPERADMIN
    message = 'Only superadmins can perform this action.'
