from django.urls import path
from . import views

app_name = 'calendar'

urlpatterns = [
    # Global policy
    # GET   /api/calendar/settings/          - Read policy
    # PATCH /api/calendar/settings/          - Update policy (admin)
    path('settings/', views.global_settings, name='global-settings'),

    # Holidays
    path('holidays/', views.holiday_list, name='holiday-list'),
    path('holidays/upcoming/', views.upcoming_off_days, name='upcoming-off-days'),
    path('holidays/<int:pk>/', views.holiday_detail, name='holiday-detail'),

    # Month settings
    path('months/', views.month_settings_list, name='month-settings-list'),
    path('months/current/', views.current_month, name='current-month'),
    path('months/<int:pk>/finalize/', views.finalize_month_settings, name='finalize-month'),
]
