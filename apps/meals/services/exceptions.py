"""
Domain-specific exceptions for the meals app.

A denied toggle is not an error for the gate itself; only the mutation
services that act on a denial raise ``ToggleNotAllowedError``.
"""


class MealsServiceError(Exception):
    """Base exception for all meals service errors."""
    pass


class InvalidMealTypeError(MealsServiceError, ValueError):
    """Raised when a meal type is not lunch or dinner (or both, for overrides)."""
    pass


class InvalidOverrideError(MealsServiceError):
    """Raised when override fields do not form a valid rule."""
    pass


class OverrideNotFoundError(MealsServiceError):
    """Raised when an override does not exist."""
    pass


class UserNotFoundError(MealsServiceError):
    """Raised when the user a meal or override refers to does not exist."""
    pass


class InsufficientPermissionsError(MealsServiceError):
    """Raised when the acting user's role does not allow the operation."""
    pass


class ToggleNotAllowedError(MealsServiceError):
    """Raised when the toggle gate denies a meal change."""

    def __init__(self, message, source=None, reason_bn=None):
        super().__init__(message)
        self.source = source
        self.reason_bn = reason_bn


class NoToggleableDatesError(MealsServiceError):
    """Raised when a bulk toggle finds no date the actor may change."""

    def __init__(self, message, skipped=None):
        super().__init__(message)
        self.skipped = skipped or []


class InvalidMealCountError(MealsServiceError, ValueError):
    """Raised when a meal count is outside the allowed range."""
    pass
