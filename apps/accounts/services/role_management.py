"""
Role management service.

Roles decide both what an actor may change and the priority of the
overrides they create, so role changes are restricted to superadmins.
"""

import logging
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User, UserRole

from .exceptions import (
    UserNotFoundError,
    InvalidRoleError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def change_user_role(*, actor: User, user_id: UUID, new_role: str) -> User:
    """
    Assign a new role to a user (superadmin only).

    Uses select_for_update to serialize concurrent role changes.

    Args:
        actor: User performing the change (must be superadmin)
        user_id: UUID of the user whose role changes
        new_role: One of the UserRole values

    Returns:
        Updated User instance

    Raises:
        InvalidRoleError: If new_role is unknown
        InsufficientPermissionsError: If actor is not superadmin, or targets themselves
        UserNotFoundError: If the target user does not exist
    """
    try:
        role = UserRole.coerce(new_role)
    except ValueError as e:
        raise InvalidRoleError(str(e))

    if not actor.user_role.is_superadmin:
        raise InsufficientPermissionsError("Only superadmins can change roles")

    if str(actor.pk) == str(user_id):
        raise InsufficientPermissionsError("You cannot change your own role")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    previous = user.role
    user.role = role
    user.save(update_fields=['role'])

    logger.info(
        "Role of %s changed from %s to %s by %s",
        user.email, previous, role.value, actor.email,
    )
    return user


def list_users(*, role: str = None):
    """Return active users, optionally restricted to one role."""
    queryset = User.objects.filter(is_active=True).order_by('name', 'email')
    if role:
        try:
            queryset = queryset.filter(role=UserRole.coerce(role))
        except ValueError as e:
            raise InvalidRoleError(str(e))
    return queryset
