"""
Health Check Integration Tests

SCENARIO:
=========
The load balancer polls the backend without credentials. While the
database answers, every check is green; when the database connection
drops, readiness fails with 503 so traffic is routed elsewhere, while
liveness keeps answering.
"""

from unittest import mock

import pytest
from django.db import OperationalError
from rest_framework import status

pytestmark = pytest.mark.django_db


def broken_cursor():
    return mock.patch(
        'core.health.connection.cursor',
        side_effect=OperationalError('could not connect to server')
    )


class TestHealthy:

    def test_overall_status(self, api_client):
        response = api_client.get('/api/health/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'healthy'
        assert response.data['is_healthy'] is True
        assert response.data['checks']['database']['status'] == 'healthy'
        assert response.data['checks']['cache']['status'] == 'healthy'
        assert 'timestamp' in response.data

    def test_live(self, api_client):
        response = api_client.get('/api/health/live/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['alive'] is True

    def test_ready(self, api_client):
        response = api_client.get('/api/health/ready/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['ready'] is True

    def test_database(self, api_client):
        response = api_client.get('/api/health/database/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['database']['response_time_ms'] >= 0


class TestDatabaseDown:

    def test_overall_status_is_503(self, api_client):
        with broken_cursor():
            response = api_client.get('/api/health/')
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['status'] == 'unhealthy'
        assert response.data['is_healthy'] is False
        assert 'could not connect' in response.data['checks']['database']['error']

    def test_not_ready(self, api_client):
        with broken_cursor():
            response = api_client.get('/api/health/ready/')
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['ready'] is False

    def test_database_is_503(self, api_client):
        with broken_cursor():
            response = api_client.get('/api/health/database/')
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_still_live(self, api_client):
        with broken_cursor():
            response = api_client.get('/api/health/live/')
        assert response.status_code == status.HTTP_200_OK


class TestCacheDown:

    def test_degraded_but_serving(self, api_client):
        with mock.patch('core.health.cache.get', return_value=None):
            response = api_client.get('/api/health/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'degraded'
        assert response.data['checks']['cache']['status'] == 'unhealthy'
