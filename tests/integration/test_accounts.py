"""
Accounts Integration Tests

SCENARIO:
=========
A farmer registers, which creates their farm and makes them its admin.
They add a viewer to the farm, switch their preferred language and log out.
"""

import pytest
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()

pytestmark = pytest.mark.django_db


class TestRegistration:

    def test_register_creates_farm_and_admin(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'username': 'kumar',
            'email': 'kumar@example.com',
            'password': 'Shr1mp-Pass-2024',
            'password_confirm': 'Shr1mp-Pass-2024',
            'farm_name': 'Kumar Aqua Farm',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']

        user = User.objects.get(username='kumar')
        assert user.role == 'admin'
        assert user.farm.name == 'Kumar Aqua Farm'
        assert user.farm.owner == user

    def test_register_default_farm_name(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'username': 'latha',
            'email': 'latha@example.com',
            'password': 'Shr1mp-Pass-2024',
            'password_confirm': 'Shr1mp-Pass-2024',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(username='latha').farm.name == "latha's Farm"

    def test_register_password_mismatch(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'username': 'ravi',
            'email': 'ravi@example.com',
            'password': 'Shr1mp-Pass-2024',
            'password_confirm': 'Different-Pass-2024',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data

    def test_login_returns_token_pair(self, farm_admin):
        client = APIClient()
        response = client.post('/api/auth/login/', {
            'username': farm_admin.username,
            'password': 'Shr1mp-Pass-2024',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data


class TestLogout:

    def test_logout_requires_refresh_token(self, admin_client):
        response = admin_client.post('/api/auth/logout/', {}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_rejects_invalid_token(self, admin_client):
        response = admin_client.post('/api/auth/logout/', {'refresh_token': 'not-a-token'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_blacklists_token(self, admin_client, farm_admin):
        from rest_framework_simplejwt.tokens import RefreshToken

        refresh = RefreshToken.for_user(farm_admin)
        response = admin_client.post('/api/auth/logout/', {'refresh_token': str(refresh)}, format='json')
        assert response.status_code == status.HTTP_200_OK

        again = admin_client.post('/api/auth/logout/', {'refresh_token': str(refresh)}, format='json')
        assert again.status_code == status.HTTP_400_BAD_REQUEST


class TestLanguageSetting:

    def test_update_language(self, admin_client, farm_admin):
        response = admin_client.put('/api/settings/language/', {'language': 'ta'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['language'] == 'ta'
        farm_admin.refresh_from_db()
        assert farm_admin.language == 'ta'

    def test_unsupported_language_rejected(self, admin_client):
        response = admin_client.put('/api/settings/language/', {'language': 'fr'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_names_follow_user_language(self, admin_client, farm_admin, pond):
        farm_admin.language = 'ta'
        farm_admin.save(update_fields=['language'])

        response = admin_client.get(f'/api/ponds/{pond.id}/')
        assert response.data['name'] == 'குளம் A'
        assert response.data['season_name'] == 'பருவம் 2024'

    def test_accept_language_header_used_without_profile_language(self, api_client, farm_admin, pond):
        farm_admin.language = ''
        farm_admin.save(update_fields=['language'])
        api_client.force_authenticate(user=farm_admin)

        response = api_client.get(f'/api/ponds/{pond.id}/', HTTP_ACCEPT_LANGUAGE='fr-FR, ta;q=0.8')
        assert response.data['name'] == 'குளம் A'


class TestFarmUsers:

    def test_admin_adds_user_to_farm(self, admin_client, farm):
        response = admin_client.post('/api/auth/users/', {
            'username': 'pond_operator',
            'email': 'operator@example.com',
            'password': 'Shr1mp-Pass-2024',
            'role': 'operator',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(username='pond_operator').farm == farm

    def test_viewer_cannot_manage_users(self, viewer_client):
        response = viewer_client.get('/api/auth/users/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_cannot_delete_self(self, admin_client, farm_admin):
        response = admin_client.delete(f'/api/auth/users/{farm_admin.id}/')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_users_of_other_farms_are_hidden(self, admin_client, other_farm_admin):
        response = admin_client.get(f'/api/auth/users/{other_farm_admin.id}/')
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestFarmProfile:

    def test_get_farm(self, admin_client, farm):
        response = admin_client.get('/api/farm/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == farm.name
        assert response.data['currency'] == 'LKR'

    def test_viewer_cannot_update_farm(self, viewer_client):
        response = viewer_client.patch('/api/farm/', {'name': 'Renamed'}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated_request_rejected(self, api_client):
        response = api_client.get('/api/seasons/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
