"""Services for meal status resolution, the toggle gate, overrides and meals."""

from .exceptions import (
    MealsServiceError,
    InvalidMealTypeError,
    InvalidMealCountError,
    InvalidOverrideError,
    OverrideNotFoundError,
    UserNotFoundError,
    InsufficientPermissionsError,
    ToggleNotAllowedError,
    NoToggleableDatesError,
)
from .providers import (
    MealDataProvider,
    default_provider,
)
from .override_query import (
    MEAL_TYPES,
    validate_meal_type,
    override_sort_key,
    order_overrides,
    is_override_applicable,
    get_applicable_overrides,
)
from .status_resolution import (
    EffectiveStatus,
    system_default_status,
    get_effective_meal_status,
)
from .toggle_permission import (
    TogglePermission,
    get_meal_toggle_permission,
)
from .override_management import (
    can_create_override,
    can_modify_override,
    create_override,
    update_override,
    delete_override,
    toggle_override_active,
    list_overrides,
    check_overrides,
)
from .meal_management import (
    toggle_meal,
    bulk_toggle_meals,
    update_meal_count,
    reset_to_default,
    get_meal_status,
    get_meal_calendar,
    get_meal_summary,
    get_daily_meals,
)

__all__ = [
    # Exceptions
    'MealsServiceError',
    'InvalidMealTypeError',
    'InvalidMealCountError',
    'InvalidOverrideError',
    'OverrideNotFoundError',
    'UserNotFoundError',
    'InsufficientPermissionsError',
    'ToggleNotAllowedError',
    'NoToggleableDatesError',
    # Providers
    'MealDataProvider',
    'default_provider',
    # Override Query
    'MEAL_TYPES',
    'validate_meal_type',
    'override_sort_key',
    'order_overrides',
    'is_override_applicable',
    'get_applicable_overrides',
    # Status Resolution
    'EffectiveStatus',
    'system_default_status',
    'get_effective_meal_status',
    # Toggle Permission
    'TogglePermission',
    'get_meal_toggle_permission',
    # Overrides
    'can_create_override',
    'can_modify_override',
    'create_override',
    'update_override',
    'delete_override',
    'toggle_override_active',
    'list_overrides',
    'check_overrides',
    # Meals
    'toggle_meal',
    'bulk_toggle_meals',
    'update_meal_count',
    'reset_to_default',
    'get_meal_status',
    'get_meal_calendar',
    'get_meal_summary',
    'get_daily_meals',
]
