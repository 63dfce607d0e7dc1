"""
URL configuration for Feed Inputs.

All endpoints are prefixed with /api/feed-inputs/
"""

from django.urls import path
from .views import (
    FeedInputListCreateView,
    FeedInputDetailView,
    FeedInputBatchCreateView,
    FeedInputsByPondView,
    FeedInputsBySeasonView,
    FeedInputsByDateRangeView,
    PondFeedTotalView,
    FeedTrendsView,
)

app_name = 'feeding'

urlpatterns = [
    path('', FeedInputListCreateView.as_view(), name='feed-input-list'),
    path('batch/', FeedInputBatchCreateView.as_view(), name='feed-input-batch'),
    path('date-range/', FeedInputsByDateRangeView.as_view(), name='feed-input-date-range'),
    path('trends/', FeedTrendsView.as_view(), name='feed-input-trends'),
    path('pond/<uuid:pond_id>/', FeedInputsByPondView.as_view(), name='feed-input-by-pond'),
    path('pond/<uuid:pond_id>/total/', PondFeedTotalView.as_view(), name='feed-input-pond-total'),
    path('season/<uuid:season_id>/', FeedInputsBySeasonView.as_view(), name='feed-input-by-season'),
    path('<uuid:pk>/', FeedInputDetailView.as_view(), name='feed-input-detail'),
]
