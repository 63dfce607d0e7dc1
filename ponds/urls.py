"""
URL configuration for Ponds.

All endpoints are prefixed with /api/ponds/
"""

from django.urls import path
from .views import (
    PondListCreateView,
    PondDetailView,
    PondsBySeasonView,
    PondKPIView,
    PondEventsView,
    PondLogsView,
)

app_name = 'ponds'

urlpatterns = [
    path('', PondListCreateView.as_view(), name='pond-list'),
    path('season/<uuid:season_id>/', PondsBySeasonView.as_view(), name='pond-by-season'),
    path('<uuid:pk>/', PondDetailView.as_view(), name='pond-detail'),
    path('<uuid:pk>/kpis/', PondKPIView.as_view(), name='pond-kpis'),
    path('<uuid:pk>/events/', PondEventsView.as_view(), name='pond-events'),
    path('<uuid:pk>/logs/', PondLogsView.as_view(), name='pond-logs'),
]
