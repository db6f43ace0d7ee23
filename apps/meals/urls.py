from django.urls import path
from . import views

app_name = 'meals'

urlpatterns = [
    # Meal reads
    # GET  /api/meals/calendar/?start_date=&end_date=    - Resolved status per day
    # GET  /api/meals/status/?date=&meal_type=           - Resolved status of one meal
    # GET  /api/meals/permission/?date=&meal_type=       - Toggle gate decision
    path('calendar/', views.meal_calendar, name='meal-calendar'),
    path('status/', views.meal_status, name='meal-status'),
    path('permission/', views.toggle_permission, name='toggle-permission'),
    path('summary/', views.meal_summary, name='meal-summary'),
    path('daily/', views.daily_meals, name='daily-meals'),

    # Meal mutations
    path('toggle/', views.meal_toggle, name='meal-toggle'),
    path('bulk-toggle/', views.meal_bulk_toggle, name='meal-bulk-toggle'),
    path('count/', views.meal_count, name='meal-count'),
    path('reset/', views.meal_reset, name='meal-reset'),

    # Overrides
    path('overrides/', views.override_list, name='override-list'),
    path('overrides/check/', views.override_check, name='override-check'),
    path('overrides/<int:pk>/', views.override_detail, name='override-detail'),
    path('overrides/<int:pk>/toggle/', views.override_toggle, name='override-toggle'),
]
