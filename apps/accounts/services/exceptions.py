"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class InvalidRoleError(AccountsServiceError):
    """Raised when a role name is not one of the known roles."""
    pass


class InsufficientPermissionsError(AccountsServiceError):
    """Raised when the acting user may not perform the operation."""
    pass
