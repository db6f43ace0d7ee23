import pytest
from datetime import date, timedelta
from django.conf import settings
from django.urls import reverse
from rest_framework import status
from apps.calendar.services import meal_today
from apps.meals.models import Meal, RuleOverride


def future(days=2):
    return meal_today() + timedelta(days=days)


# =============================================================================
# Meal Read Tests
# =============================================================================

@pytest.mark.django_db
class TestMealReadAPI:
    """Tests for calendar, status, permission and summary endpoints."""

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('meals:meal-status'), {'date': '2026-01-30', 'meal_type': 'lunch'})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_status_of_friday(self, member_client):
        response = member_client.get(reverse('meals:meal-status'), {'date': '2026-01-30', 'meal_type': 'lunch'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_on'] is False
        assert response.data['source'] == 'system_friday'
        assert response.data['priority'] == 1

    def test_status_invalid_meal_type(self, member_client):
        response = member_client.get(reverse('meals:meal-status'), {'date': '2026-01-30', 'meal_type': 'snack'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_status_of_other_user_forbidden(self, member_client, other_member):
        response = member_client.get(
            reverse('meals:meal-status'),
            {'date': '2026-01-30', 'meal_type': 'lunch', 'user_id': str(other_member.pk)},
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_permission_denial_is_ok_response(self, member_client):
        response = member_client.get(reverse('meals:toggle-permission'), {'date': '2020-01-01', 'meal_type': 'lunch'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['can_toggle'] is False
        assert response.data['source'] == 'past_date'

    def test_calendar(self, member_client):
        response = member_client.get(
            reverse('meals:meal-calendar'), {'start_date': '2026-01-26', 'end_date': '2026-02-01'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 7
        assert response.data[4]['lunch']['source'] == 'system_friday'

    def test_calendar_too_long(self, member_client):
        response = member_client.get(
            reverse('meals:meal-calendar'), {'start_date': '2026-01-01', 'end_date': '2026-03-01'},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_summary(self, member_client):
        response = member_client.get(reverse('meals:meal-summary'), {'year': 2026, 'month': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_meals'] == 44

    def test_plain_http_is_not_redirected(self, member_client):
        response = member_client.get(reverse('meals:meal-status'), {'date': '2026-01-30', 'meal_type': 'lunch'})

        assert response.status_code == status.HTTP_200_OK
        assert getattr(settings, 'SECURE_SSL_REDIRECT', False) is False

    def test_daily_meals_for_manager(self, manager_client, member):
        response = manager_client.get(reverse('meals:daily-meals'), {'date': '2026-01-29'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meal_type'] == 'lunch'
        assert len(response.data['meals']) == 2
        assert response.data['total_meals_on'] == 2
        assert {m['user']['email'] for m in response.data['meals']} == {'manager@example.com', member.email}

    def test_daily_meals_forbidden_for_member(self, member_client):
        response = member_client.get(reverse('meals:daily-meals'), {'date': '2026-01-29'})
        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Meal Mutation Tests
# =============================================================================

@pytest.mark.django_db
class TestMealMutationAPI:
    """Tests for toggle, bulk toggle, count and reset endpoints."""

    def test_toggle_future_meal(self, member_client, member):
        day = future()
        response = member_client.post(
            reverse('meals:meal-toggle'), {'date': day.isoformat(), 'meal_type': 'lunch', 'is_on': False}, format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_on'] is False
        assert Meal.objects.get(user=member, date=day, meal_type='lunch').is_manually_set is True

    def test_toggle_past_meal_forbidden(self, member_client):
        response = member_client.post(
            reverse('meals:meal-toggle'), {'date': '2020-01-01', 'meal_type': 'lunch', 'is_on': False}, format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['source'] == 'past_date'

    def test_bulk_toggle(self, member_client):
        start = future(1)
        response = member_client.post(
            reverse('meals:meal-bulk-toggle'),
            {'start_date': start.isoformat(), 'end_date': (start + timedelta(days=2)).isoformat(),
             'meal_type': 'both', 'is_on': False},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['updated']) == 6

    def test_bulk_toggle_nothing_allowed(self, member_client):
        response = member_client.post(
            reverse('meals:meal-bulk-toggle'),
            {'start_date': '2020-01-01', 'end_date': '2020-01-03', 'meal_type': 'lunch', 'is_on': False},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.data['skipped']) == 3

    def test_manager_sets_count(self, manager_client, member):
        day = meal_today()
        response = manager_client.put(
            reverse('meals:meal-count'),
            {'user_id': str(member.pk), 'date': day.isoformat(), 'meal_type': 'dinner', 'count': 2},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2

    def test_user_cannot_set_count(self, member_client, member):
        response = member_client.put(
            reverse('meals:meal-count'),
            {'user_id': str(member.pk), 'date': future().isoformat(), 'meal_type': 'dinner', 'count': 2},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_resets(self, admin_client, member, manual_meal):
        manual_meal(member, date(2026, 1, 29))
        response = admin_client.post(
            reverse('meals:meal-reset'),
            {'user_id': str(member.pk), 'start_date': '2026-01-01', 'end_date': '2026-01-31'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deleted'] == 1

    def test_manager_cannot_reset(self, manager_client, member):
        response = manager_client.post(
            reverse('meals:meal-reset'),
            {'user_id': str(member.pk), 'start_date': '2026-01-01', 'end_date': '2026-01-31'},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Override Tests
# =============================================================================

@pytest.mark.django_db
class TestOverrideAPI:
    """Tests for /api/meals/overrides/"""

    def test_manager_creates_user_override(self, manager_client, member):
        data = {
            'target_type': 'user',
            'target_user_id': str(member.pk),
            'date_type': 'single',
            'start_date': '2026-01-30',
            'meal_type': 'lunch',
            'action': 'force_off',
        }
        response = manager_client.post(reverse('meals:override-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['priority'] == 3
        assert response.data['target_user']['email'] == member.email

    def test_manager_cannot_create_global(self, manager_client):
        data = {
            'target_type': 'global',
            'date_type': 'single',
            'start_date': '2026-01-30',
            'meal_type': 'lunch',
            'action': 'force_off',
        }
        response = manager_client.post(reverse('meals:override-list'), data, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_range(self, admin_client):
        data = {
            'target_type': 'global',
            'date_type': 'range',
            'start_date': '2026-01-30',
            'meal_type': 'lunch',
            'action': 'force_off',
        }
        response = admin_client.post(reverse('meals:override-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_member_cannot_list(self, member_client):
        response = member_client.get(reverse('meals:override-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_active_filter(self, manager_client, manager, make_override):
        make_override(manager, date(2026, 1, 30))
        make_override(manager, date(2026, 1, 31), is_active=False)

        response = manager_client.get(reverse('meals:override-list'), {'is_active': 'true'})
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

        response = manager_client.get(reverse('meals:override-list'))
        assert len(response.data) == 2

    def test_update_and_delete(self, manager_client, manager, make_override):
        override = make_override(manager, date(2026, 1, 30))
        url = reverse('meals:override-detail', kwargs={'pk': override.pk})

        response = manager_client.patch(url, {'reason': 'Picnic'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['reason'] == 'Picnic'

        response = manager_client.delete(url)
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not RuleOverride.objects.filter(pk=override.pk).exists()

    def test_update_others_override_forbidden(self, manager_client, admin, make_override):
        override = make_override(admin, date(2026, 1, 30))
        url = reverse('meals:override-detail', kwargs={'pk': override.pk})

        response = manager_client.patch(url, {'reason': 'x'}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_missing(self, admin_client):
        response = admin_client.delete(reverse('meals:override-detail', kwargs={'pk': 999}))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_toggle(self, manager_client, manager, make_override):
        override = make_override(manager, date(2026, 1, 30))
        response = manager_client.post(reverse('meals:override-toggle', kwargs={'pk': override.pk}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_active'] is False

    def test_check(self, member_client, member, manager, make_override):
        make_override(manager, date(2026, 1, 30), target_user=member)
        response = member_client.get(reverse('meals:override-check'), {'date': '2026-01-30', 'meal_type': 'lunch'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
