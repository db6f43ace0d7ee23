"""Services for calendar policy, holidays and month settings."""

from .exceptions import (
    CalendarServiceError,
    InvalidDateError,
    InvalidDateRangeError,
    MonthSettingsNotFoundError,
    MonthFinalizedError,
    DuplicateHolidayError,
    HolidayNotFoundError,
    InvalidHolidayTypeError,
    InvalidSettingsError,
    InsufficientPermissionsError,
)
from .dates import (
    meal_timezone,
    meal_now,
    meal_today,
    to_meal_date,
    month_bounds,
    iter_days,
    validate_range,
    MAX_RANGE_DAYS,
)
from .policy import (
    MealPolicy,
    WeekendPolicy,
    HolidayPolicy,
    CutoffTimes,
    DefaultMealStatus,
    MEAL_TYPES,
)
from .calendar_policy import (
    DefaultOffResult,
    is_friday,
    is_saturday,
    saturday_ordinal,
    is_odd_saturday,
    is_even_saturday,
    get_applicable_holiday,
    is_default_meal_off,
    filter_applicable_holidays,
    list_off_days,
)
from .month_window import (
    MonthWindow,
    find_month_settings,
    build_month_window,
    get_month_window,
    current_month_window,
    is_month_finalized,
    is_within_current_month,
)
from .holiday_management import (
    find_holidays,
    get_applicable_holidays,
    get_upcoming_off_days,
    list_holidays,
    create_holiday,
    update_holiday,
    delete_holiday,
)
from .month_settings_management import (
    save_month_settings,
    finalize_month,
    list_month_settings,
)
from .settings_management import (
    load_policy,
    update_global_settings,
)

__all__ = [
    # Exceptions
    'CalendarServiceError',
    'InvalidDateError',
    'InvalidDateRangeError',
    'MonthSettingsNotFoundError',
    'MonthFinalizedError',
    'DuplicateHolidayError',
    'HolidayNotFoundError',
    'InvalidHolidayTypeError',
    'InvalidSettingsError',
    'InsufficientPermissionsError',
    # Dates
    'meal_timezone',
    'meal_now',
    'meal_today',
    'to_meal_date',
    'month_bounds',
    'iter_days',
    'validate_range',
    'MAX_RANGE_DAYS',
    # Policy
    'MealPolicy',
    'WeekendPolicy',
    'HolidayPolicy',
    'CutoffTimes',
    'DefaultMealStatus',
    'MEAL_TYPES',
    # Calendar Policy
    'DefaultOffResult',
    'is_friday',
    'is_saturday',
    'saturday_ordinal',
    'is_odd_saturday',
    'is_even_saturday',
    'get_applicable_holiday',
    'is_default_meal_off',
    'filter_applicable_holidays',
    'list_off_days',
    # Month Window
    'MonthWindow',
    'find_month_settings',
    'build_month_window',
    'get_month_window',
    'current_month_window',
    'is_month_finalized',
    'is_within_current_month',
    # Holidays
    'find_holidays',
    'get_applicable_holidays',
    'get_upcoming_off_days',
    'list_holidays',
    'create_holiday',
    'update_holiday',
    'delete_holiday',
    # Month Settings
    'save_month_settings',
    'finalize_month',
    'list_month_settings',
    # Global Settings
    'load_policy',
    'update_global_settings',
]
