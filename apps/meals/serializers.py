from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer

from .models import (
    DateType,
    Meal,
    MealType,
    OverrideAction,
    OverrideMealType,
    RecurringPattern,
    RuleOverride,
    TargetType,
)


# =============================================================================
# MEALS
# =============================================================================

class MealSerializer(serializers.ModelSerializer):
    """Stored manual meal record."""

    class Meta:
        model = Meal
        fields = [
            'id', 'user', 'date', 'meal_type', 'is_on', 'count',
            'is_manually_set', 'notes', 'updated_at',
        ]
        read_only_fields = fields


class EffectiveStatusSerializer(serializers.Serializer):
    date = serializers.DateField()
    meal_type = serializers.CharField()
    is_on = serializers.BooleanField()
    count = serializers.IntegerField()
    source = serializers.CharField()
    priority = serializers.IntegerField()
    reason = serializers.CharField()
    reason_bn = serializers.CharField()
    override_id = serializers.IntegerField(allow_null=True)
    meal_id = serializers.IntegerField(allow_null=True)


class CalendarMealSerializer(EffectiveStatusSerializer):
    can_edit = serializers.BooleanField()
    edit_restriction = serializers.CharField(allow_null=True)


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    is_default_off = serializers.BooleanField()
    default_off_reason = serializers.CharField(allow_null=True)
    default_off_reason_bn = serializers.CharField(allow_null=True)
    lunch = CalendarMealSerializer()
    dinner = CalendarMealSerializer()


class TogglePermissionSerializer(serializers.Serializer):
    can_toggle = serializers.BooleanField()
    source = serializers.CharField()
    reason = serializers.CharField()
    reason_bn = serializers.CharField()


class MealQuerySerializer(serializers.Serializer):
    """Query for a single meal: ?date=&meal_type=&user_id="""

    date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    user_id = serializers.UUIDField(required=False)


class MealRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    user_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError("start_date must be on or before end_date")
        return attrs


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
    user_id = serializers.UUIDField(required=False)


class MealToggleSerializer(serializers.Serializer):
    date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    is_on = serializers.BooleanField(required=False, allow_null=True, default=None)
    user_id = serializers.UUIDField(required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class BulkToggleSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=OverrideMealType.choices)
    is_on = serializers.BooleanField()
    user_id = serializers.UUIDField(required=False)


class MealCountSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    count = serializers.IntegerField(min_value=0, max_value=10)


class ResetMealsSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=OverrideMealType.choices, required=False)


class MealSummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    lunch_days = serializers.IntegerField()
    lunch_count = serializers.IntegerField()
    dinner_days = serializers.IntegerField()
    dinner_count = serializers.IntegerField()
    total_meals = serializers.IntegerField()


class DailyMealQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    meal_type = serializers.ChoiceField(choices=MealType.choices, default=MealType.LUNCH)


class DailyMealEntrySerializer(serializers.Serializer):
    user = UserMinimalSerializer()
    is_on = serializers.BooleanField()
    count = serializers.IntegerField()
    source = serializers.CharField()
    is_manually_set = serializers.BooleanField()


class DailyMealsSerializer(serializers.Serializer):
    """Every active user's status for one meal, with kitchen totals."""

    date = serializers.DateField()
    meal_type = serializers.CharField()
    is_default_off = serializers.BooleanField()
    is_holiday = serializers.BooleanField()
    holiday_name = serializers.CharField(allow_null=True)
    holiday_name_bn = serializers.CharField(allow_null=True)
    total_meals_on = serializers.IntegerField()
    total_meal_count = serializers.IntegerField()
    meals = DailyMealEntrySerializer(many=True)


# =============================================================================
# OVERRIDES
# =============================================================================

class RuleOverrideSerializer(serializers.ModelSerializer):
    """Override with its creator and target expanded."""

    target_user = UserMinimalSerializer(read_only=True, allow_null=True)
    created_by = UserMinimalSerializer(read_only=True, allow_null=True)

    class Meta:
        model = RuleOverride
        fields = [
            'id', 'target_type', 'target_user', 'date_type', 'start_date', 'end_date',
            'recurring_pattern', 'recurring_days', 'meal_type', 'action', 'priority',
            'created_by_role', 'created_by', 'reason', 'reason_bn', 'is_active',
            'expires_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OverrideCreateSerializer(serializers.Serializer):
    target_type = serializers.ChoiceField(choices=TargetType.choices)
    target_user_id = serializers.UUIDField(required=False, allow_null=True)
    date_type = serializers.ChoiceField(choices=DateType.choices)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    recurring_pattern = serializers.ChoiceField(choices=RecurringPattern.choices, required=False, allow_blank=True)
    recurring_days = serializers.ListField(child=serializers.IntegerField(min_value=0, max_value=31), required=False)
    meal_type = serializers.ChoiceField(choices=OverrideMealType.choices)
    action = serializers.ChoiceField(choices=OverrideAction.choices)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)
    reason_bn = serializers.CharField(max_length=500, required=False, allow_blank=True)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class OverrideUpdateSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=OverrideAction.choices, required=False)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)
    reason_bn = serializers.CharField(max_length=500, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class OverrideListQuerySerializer(serializers.Serializer):
    meal_type = serializers.ChoiceField(choices=OverrideMealType.choices, required=False)
    target_type = serializers.ChoiceField(choices=TargetType.choices, required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
