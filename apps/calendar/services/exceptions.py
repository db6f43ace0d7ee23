"""
Domain-specific exceptions for the calendar app.

These exceptions represent invalid input or business rule violations
around dates, holidays and month settings. Views catch them and convert
them to HTTP responses.
"""


class CalendarServiceError(Exception):
    """Base exception for all calendar service errors."""
    pass


class InvalidDateError(CalendarServiceError, ValueError):
    """Raised when a value cannot be read as a calendar date."""
    pass


class InvalidDateRangeError(CalendarServiceError):
    """Raised when a start date is after the end date or the window is too long."""
    pass


class MonthSettingsNotFoundError(CalendarServiceError):
    """Raised when no month settings exist for the requested id or month."""
    pass


class MonthFinalizedError(CalendarServiceError):
    """Raised when trying to edit settings of a finalized month."""
    pass


class DuplicateHolidayError(CalendarServiceError):
    """Raised when a holiday with the same date and name already exists."""
    pass


class HolidayNotFoundError(CalendarServiceError):
    """Raised when a holiday does not exist."""
    pass


class InsufficientPermissionsError(CalendarServiceError):
    """Raised when the acting user may not change calendar data."""
    pass


class InvalidHolidayTypeError(CalendarServiceError):
    """Raised when a holiday type is not government, optional or religious."""
    pass


class InvalidSettingsError(CalendarServiceError):
    """Raised when a global settings update names an unknown field or bad value."""
    pass
