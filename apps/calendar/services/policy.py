"""
Immutable meal policy value.

A ``MealPolicy`` is built once per operation (usually from the
``GlobalSettings`` row) and handed to every evaluator, resolver and gate
call. Missing fields always fall back to the defaults below.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

MEAL_TYPES = ('lunch', 'dinner')

DEFAULT_CUTOFF_HOURS = {'lunch': 10, 'dinner': 16}
DEFAULT_MEAL_STATUS = {'lunch': True, 'dinner': True}


def _section(data: Optional[Mapping[str, Any]], key: str) -> Mapping[str, Any]:
    if not data:
        return {}
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _flag(section: Mapping[str, Any], key: str, default: bool) -> bool:
    value = section.get(key)
    return default if value is None else bool(value)


def _hour(section: Mapping[str, Any], key: str, default: int) -> int:
    value = section.get(key)
    if value is None:
        return default
    try:
        hour = int(value)
    except (TypeError, ValueError):
        return default
    return hour if 0 <= hour <= 23 else default


@dataclass(frozen=True)
class WeekendPolicy:
    friday_off: bool = True
    saturday_off: bool = False
    odd_saturday_off: bool = True
    even_saturday_off: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'WeekendPolicy':
        data = data or {}
        defaults = cls()
        return cls(
            friday_off=_flag(data, 'friday_off', defaults.friday_off),
            saturday_off=_flag(data, 'saturday_off', defaults.saturday_off),
            odd_saturday_off=_flag(data, 'odd_saturday_off', defaults.odd_saturday_off),
            even_saturday_off=_flag(data, 'even_saturday_off', defaults.even_saturday_off),
        )


@dataclass(frozen=True)
class HolidayPolicy:
    government_holiday_off: bool = True
    optional_holiday_off: bool = False
    religious_holiday_off: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'HolidayPolicy':
        data = data or {}
        defaults = cls()
        return cls(
            government_holiday_off=_flag(data, 'government_holiday_off', defaults.government_holiday_off),
            optional_holiday_off=_flag(data, 'optional_holiday_off', defaults.optional_holiday_off),
            religious_holiday_off=_flag(data, 'religious_holiday_off', defaults.religious_holiday_off),
        )

    def applies_to(self, holiday_type: str) -> bool:
        """Whether holidays of ``holiday_type`` turn meals off. Unknown types count as government."""
        if holiday_type == 'optional':
            return self.optional_holiday_off
        if holiday_type == 'religious':
            return self.religious_holiday_off
        return self.government_holiday_off


@dataclass(frozen=True)
class CutoffTimes:
    lunch: int = DEFAULT_CUTOFF_HOURS['lunch']
    dinner: int = DEFAULT_CUTOFF_HOURS['dinner']

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CutoffTimes':
        data = data or {}
        return cls(
            lunch=_hour(data, 'lunch', DEFAULT_CUTOFF_HOURS['lunch']),
            dinner=_hour(data, 'dinner', DEFAULT_CUTOFF_HOURS['dinner']),
        )

    def for_meal(self, meal_type: str) -> int:
        return getattr(self, meal_type)


@dataclass(frozen=True)
class DefaultMealStatus:
    lunch: bool = DEFAULT_MEAL_STATUS['lunch']
    dinner: bool = DEFAULT_MEAL_STATUS['dinner']

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'DefaultMealStatus':
        data = data or {}
        return cls(
            lunch=_flag(data, 'lunch', DEFAULT_MEAL_STATUS['lunch']),
            dinner=_flag(data, 'dinner', DEFAULT_MEAL_STATUS['dinner']),
        )

    def for_meal(self, meal_type: str) -> bool:
        return getattr(self, meal_type)


@dataclass(frozen=True)
class MealPolicy:
    """
    Complete, defaulted policy the core reads.

    Example:
        >>> policy = MealPolicy.from_dict({'weekend_policy': {'friday_off': False}})
        >>> policy.weekend.friday_off, policy.weekend.odd_saturday_off
        (False, True)
    """

    weekend: WeekendPolicy = field(default_factory=WeekendPolicy)
    holidays: HolidayPolicy = field(default_factory=HolidayPolicy)
    cutoff_times: CutoffTimes = field(default_factory=CutoffTimes)
    default_meal_status: DefaultMealStatus = field(default_factory=DefaultMealStatus)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None) -> 'MealPolicy':
        """Build a policy from a possibly partial nested mapping."""
        return cls(
            weekend=WeekendPolicy.from_dict(_section(data, 'weekend_policy')),
            holidays=HolidayPolicy.from_dict(_section(data, 'holiday_policy')),
            cutoff_times=CutoffTimes.from_dict(_section(data, 'cutoff_times')),
            default_meal_status=DefaultMealStatus.from_dict(_section(data, 'default_meal_status')),
        )

    def as_dict(self) -> dict:
        return {
            'weekend_policy': asdict(self.weekend),
            'holiday_policy': asdict(self.holidays),
            'cutoff_times': asdict(self.cutoff_times),
            'default_meal_status': asdict(self.default_meal_status),
        }
