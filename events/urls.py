"""
URL configuration for Farm Events.

All endpoints are prefixed with /api/events/
"""

from django.urls import path
from .views import (
    EventListCreateView,
    EventDetailView,
    EventApproveView,
    EventsByPondView,
    EventsBySeasonView,
    EventsByNurseryBatchView,
    EventsByDateRangeView,
    UpcomingEventsView,
    OverdueEventsView,
    EventStatisticsView,
    EventTimelineView,
    EventTypeListView,
)

app_name = 'events'

urlpatterns = [
    path('', EventListCreateView.as_view(), name='event-list'),
    path('types/', EventTypeListView.as_view(), name='event-types'),
    path('date-range/', EventsByDateRangeView.as_view(), name='event-date-range'),
    path('upcoming/', UpcomingEventsView.as_view(), name='event-upcoming'),
    path('overdue/', OverdueEventsView.as_view(), name='event-overdue'),
    path('statistics/', EventStatisticsView.as_view(), name='event-statistics'),
    path('timeline/', EventTimelineView.as_view(), name='event-timeline'),
    path('pond/<uuid:pond_id>/', EventsByPondView.as_view(), name='event-by-pond'),
    path('season/<uuid:season_id>/', EventsBySeasonView.as_view(), name='event-by-season'),
    path('nursery-batch/<uuid:batch_id>/', EventsByNurseryBatchView.as_view(), name='event-by-nursery-batch'),
    path('<uuid:pk>/', EventDetailView.as_view(), name='event-detail'),
    path('<uuid:pk>/approve/', EventApproveView.as_view(), name='event-approve'),
]
