# ==========================================
# apps/meals/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Meal, RuleOverride


@admin.register(Meal)
class MealAdmin(admin.ModelAdmin):
    list_display = ['user', 'date', 'meal_type', 'status_badge', 'count', 'is_manually_set', 'modified_by']
    list_filter = ['meal_type', 'is_on', 'is_manually_set']
    search_fields = ['user__email', 'user__name']
    date_hierarchy = 'date'
    ordering = ['-date', 'meal_type']
    raw_id_fields = ['user', 'modified_by']

    @admin.display(description='Status')
    def status_badge(self, obj):
        color = '#28a745' if obj.is_on else '#dc3545'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-weight: bold;">{}</span>',
            color,
            'ON' if obj.is_on else 'OFF',
        )


@admin.register(RuleOverride)
class RuleOverrideAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'action_badge', 'meal_type', 'target_type', 'target_user',
        'date_type', 'start_date', 'end_date', 'priority', 'created_by_role', 'is_active',
    ]
    list_filter = ['action', 'meal_type', 'target_type', 'date_type', 'priority', 'is_active']
    search_fields = ['reason', 'reason_bn', 'target_user__email', 'created_by__email']
    readonly_fields = ['priority', 'created_by_role', 'created_by', 'created_at', 'updated_at']
    raw_id_fields = ['target_user']

    fieldsets = (
        ('Target', {
            'fields': ('target_type', 'target_user', 'meal_type', 'action'),
        }),
        ('Dates', {
            'fields': ('date_type', 'start_date', 'end_date', 'recurring_pattern', 'recurring_days', 'expires_at'),
        }),
        ('Reason', {
            'fields': ('reason', 'reason_bn', 'is_active'),
        }),
        ('Audit', {
            'fields': ('priority', 'created_by_role', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['deactivate_overrides']

    @admin.display(description='Action')
    def action_badge(self, obj):
        color = '#28a745' if obj.action == 'force_on' else '#dc3545'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px;">{}</span>',
            color,
            obj.get_action_display(),
        )

    @admin.action(description='Deactivate selected overrides')
    def deactivate_overrides(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} override(s).')

    def has_add_permission(self, request):
        # Priority comes from the creator's role; overrides are created through the API
        return False
