"""Global settings service."""

import logging

from django.db import transaction

from apps.accounts.models import UserRole
from apps.calendar.models import GlobalSettings

from .exceptions import InsufficientPermissionsError, InvalidSettingsError
from .policy import MealPolicy

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    'friday_off': bool,
    'saturday_off': bool,
    'odd_saturday_off': bool,
    'even_saturday_off': bool,
    'government_holiday_off': bool,
    'optional_holiday_off': bool,
    'religious_holiday_off': bool,
    'lunch_cutoff_hour': int,
    'dinner_cutoff_hour': int,
    'lunch_default_on': bool,
    'dinner_default_on': bool,
}


def load_policy() -> MealPolicy:
    """Read the settings row once and return it as an immutable policy."""
    return GlobalSettings.load().to_policy()


@transaction.atomic
def update_global_settings(*, actor, **changes) -> GlobalSettings:
    """
    Update policy fields of the singleton settings row (admin only).

    Raises:
        InsufficientPermissionsError: If actor is below admin
        InvalidSettingsError: If a field is unknown or a cutoff hour is out of range
    """
    if not UserRole.coerce(actor.role).is_admin:
        raise InsufficientPermissionsError("Only admins can change global settings")

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidSettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")

    GlobalSettings.load()
    settings_row = GlobalSettings.objects.select_for_update().get(pk=GlobalSettings.SINGLETON_PK)

    for field_name, value in changes.items():
        value = EDITABLE_FIELDS[field_name](value)
        if field_name.endswith('_cutoff_hour') and not 0 <= value <= 23:
            raise InvalidSettingsError(f"{field_name} must be between 0 and 23")
        setattr(settings_row, field_name, value)

    settings_row.updated_by = actor
    settings_row.save()

    logger.info("Global settings updated by %s: %s", actor.email, sorted(changes))
    return settings_row
