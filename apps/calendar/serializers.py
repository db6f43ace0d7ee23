from rest_framework import serializers

from .models import GlobalSettings, Holiday, HolidayType, MonthSettings


class HolidaySerializer(serializers.ModelSerializer):
    """Serializer for holidays."""

    class Meta:
        model = Holiday
        fields = ['id', 'date', 'name', 'name_bn', 'type', 'is_active', 'created_at']
        read_only_fields = ['id', 'created_at']


class HolidayCreateSerializer(serializers.Serializer):
    date = serializers.DateField()
    name = serializers.CharField(max_length=200)
    name_bn = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=HolidayType.choices, default=HolidayType.GOVERNMENT)


class HolidayUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    name = serializers.CharField(max_length=200, required=False)
    name_bn = serializers.CharField(max_length=200, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=HolidayType.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class YearQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)


class UpcomingOffDaysQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=30, min_value=1, max_value=366)


class OffDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    source = serializers.CharField()
    reason = serializers.CharField()
    reason_bn = serializers.CharField()


class GlobalSettingsSerializer(serializers.ModelSerializer):
    """
    Flat policy fields of the settings singleton.

    All fields are optional on update; only the ones sent are changed.
    """

    class Meta:
        model = GlobalSettings
        fields = [
            'friday_off',
            'saturday_off',
            'odd_saturday_off',
            'even_saturday_off',
            'government_holiday_off',
            'optional_holiday_off',
            'religious_holiday_off',
            'lunch_cutoff_hour',
            'dinner_cutoff_hour',
            'lunch_default_on',
            'dinner_default_on',
            'updated_at',
        ]
        read_only_fields = ['updated_at']


class MonthSettingsSerializer(serializers.ModelSerializer):
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True, default=None)

    class Meta:
        model = MonthSettings
        fields = [
            'id',
            'year',
            'month',
            'start_date',
            'end_date',
            'is_finalized',
            'finalized_at',
            'notes',
            'created_by_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class MonthSettingsInputSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class MonthWindowSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    is_finalized = serializers.BooleanField()
    is_custom = serializers.BooleanField()
    settings_id = serializers.IntegerField(allow_null=True)
