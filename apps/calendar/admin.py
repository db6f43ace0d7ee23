# ==========================================
# apps/calendar/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import GlobalSettings, Holiday, MonthSettings


@admin.register(Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ['date', 'name', 'name_bn', 'type', 'is_active']
    list_filter = ['type', 'is_active']
    search_fields = ['name', 'name_bn']
    date_hierarchy = 'date'
    ordering = ['date']

    actions = ['activate_holidays', 'deactivate_holidays']

    @admin.action(description='Activate selected holidays')
    def activate_holidays(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} holiday(s).')

    @admin.action(description='Deactivate selected holidays')
    def deactivate_holidays(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} holiday(s).')


@admin.register(GlobalSettings)
class GlobalSettingsAdmin(admin.ModelAdmin):
    """Single-row settings; adding is blocked once the row exists."""

    fieldsets = (
        ('Weekend Policy', {
            'fields': ('friday_off', 'saturday_off', 'odd_saturday_off', 'even_saturday_off'),
        }),
        ('Holiday Policy', {
            'fields': ('government_holiday_off', 'optional_holiday_off', 'religious_holiday_off'),
        }),
        ('Cutoff Times', {
            'fields': ('lunch_cutoff_hour', 'dinner_cutoff_hour'),
        }),
        ('Default Meal Status', {
            'fields': ('lunch_default_on', 'dinner_default_on'),
        }),
    )

    def has_add_permission(self, request):
        return not GlobalSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MonthSettings)
class MonthSettingsAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'start_date', 'end_date', 'finalized_badge']
    list_filter = ['is_finalized', 'year']
    ordering = ['-year', '-month']
    readonly_fields = ['finalized_at', 'created_at', 'updated_at']

    def finalized_badge(self, obj):
        """Display finalization status as colored badge."""
        if obj.is_finalized:
            return format_html(
                '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Finalized</span>'
            )
        return format_html(
            '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Open</span>'
        )
    finalized_badge.short_description = 'Status'
    finalized_badge.admin_order_field = 'is_finalized'
