"""
Accounts app services layer.

Authentication itself is delegated to simplejwt; these services cover
role administration only.
"""

from .exceptions import (
    AccountsServiceError,
    UserNotFoundError,
    InvalidRoleError,
    InsufficientPermissionsError,
)

from .role_management import (
    change_user_role,
    list_users,
)


__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserNotFoundError',
    'InvalidRoleError',
    'InsufficientPermissionsError',

    # Role Management
    'change_user_role',
    'list_users',
]
