"""
Views for Farm Events.

API Endpoints:
- /api/events/ - List/create events
  (filters: event_type, status, priority, pond, season, nursery_batch, start_date, end_date)
- /api/events/{id}/ - Retrieve/update/delete event
- /api/events/{id}/approve/ - Approve an event that requires approval
- /api/events/pond/{pond_id}/ - Events of a pond
- /api/events/season/{season_id}/ - Events of a season
- /api/events/nursery-batch/{batch_id}/ - Events of a nursery batch
- /api/events/date-range/ - Events between two dates
- /api/events/upcoming/?days=7 - Open events due soon
- /api/events/overdue/ - Open events past their date
- /api/events/statistics/ - Counts by type/status and total cost
- /api/events/timeline/?pond= - Production timeline of a pond
- /api/events/types/ - Event type constants
"""

import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_date_range, filter_uuid
from farms.permissions import FarmScopedMixin, IsFarmAdmin
from ponds.models import Pond, Season, NurseryBatch
from .models import Event, EventType, EventStatus, EventPriority
from .serializers import EventSerializer
from .services import EventService, DETAIL_RULES

logger = logging.getLogger(__name__)


class EventQuerysetMixin(FarmScopedMixin):
    queryset = Event.objects.select_related(
        'season', 'pond', 'nursery_batch', 'created_by', 'approved_by'
    )
    serializer_class = EventSerializer

    def get_service(self):
        return EventService(self.get_farm(), self.request.user)


# =============================================================================
# CRUD
# =============================================================================

class EventListCreateView(EventQuerysetMixin, generics.ListCreateAPIView):
    """
    GET  /api/events/
    POST /api/events/
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        for param in ('event_type', 'status', 'priority'):
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})

        queryset = filter_uuid(queryset, 'pond_id', params.get('pond'))
        queryset = filter_uuid(queryset, 'season_id', params.get('season'))
        queryset = filter_uuid(queryset, 'nursery_batch_id', params.get('nursery_batch'))
        return filter_date_range(queryset, params)

    def perform_create(self, serializer):
        self.get_service().create(serializer)


class EventDetailView(EventQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/events/{id}/

    Stock moved by feeding and chemical application events is reversed on
    delete and re-applied when the item or quantity changes.
    """

    def perform_update(self, serializer):
        self.get_service().update(serializer)

    def perform_destroy(self, instance):
        self.get_service().delete(instance)


class EventApproveView(EventQuerysetMixin, APIView):
    """
    POST /api/events/{id}/approve/

    Farm admins only.
    """

    def get_permissions(self):
        return [permission() for permission in self.permission_classes + [IsFarmAdmin]]

    def post(self, request, pk):
        event = self.get_farm_object(Event, pk)
        event = self.get_service().approve(event)
        return Response({
            'message': 'Event approved successfully',
            'event': EventSerializer(event, context={'request': request}).data,
        })


# =============================================================================
# LOOKUPS
# =============================================================================

class EventsByPondView(EventQuerysetMixin, generics.ListAPIView):

    def get_queryset(self):
        pond = self.get_farm_object(Pond, self.kwargs['pond_id'])
        return super().get_queryset().filter(pond=pond)


class EventsBySeasonView(EventQuerysetMixin, generics.ListAPIView):

    def get_queryset(self):
        season = self.get_farm_object(Season, self.kwargs['season_id'])
        return super().get_queryset().filter(season=season)


class EventsByNurseryBatchView(EventQuerysetMixin, generics.ListAPIView):

    def get_queryset(self):
        batch = self.get_farm_object(NurseryBatch, self.kwargs['batch_id'])
        return super().get_queryset().filter(nursery_batch=batch)


class EventsByDateRangeView(EventQuerysetMixin, generics.ListAPIView):
    """
    GET /api/events/date-range/?start_date&end_date (both required)
    """

    def get_queryset(self):
        return filter_date_range(super().get_queryset(), self.request.query_params, required=True)


class UpcomingEventsView(EventQuerysetMixin, generics.ListAPIView):
    """
    GET /api/events/upcoming/?days=7
    """

    def get_queryset(self):
        try:
            days = int(self.request.query_params.get('days', 7))
        except ValueError:
            days = 7
        days = max(0, min(days, 365))
        return super().get_queryset().upcoming(days)


class OverdueEventsView(EventQuerysetMixin, generics.ListAPIView):
    """
    GET /api/events/overdue/
    """

    def get_queryset(self):
        return super().get_queryset().overdue()


# =============================================================================
# REPORTING
# =============================================================================

class EventStatisticsView(EventQuerysetMixin, APIView):
    """
    GET /api/events/statistics/?season=
    """

    def get(self, request):
        season = None
        season_id = request.query_params.get('season')
        if season_id:
            season = self.get_farm_object(Season, season_id)
        return Response(self.get_service().statistics(season))


class EventTimelineView(EventQuerysetMixin, APIView):
    """
    GET /api/events/timeline/?pond=<id>
    """

    def get(self, request):
        pond_id = request.query_params.get('pond')
        if not pond_id:
            return Response({'error': 'pond is required'}, status=status.HTTP_400_BAD_REQUEST)
        pond = self.get_farm_object(Pond, pond_id)
        return Response({
            'pond_id': str(pond.id),
            'timeline': self.get_service().timeline(pond),
        })


class EventTypeListView(FarmScopedMixin, APIView):
    """
    GET /api/events/types/

    Event types with the detail keys each one requires.
    """

    def get(self, request):
        return Response({
            'event_types': [
                {
                    'value': value,
                    'label': label,
                    'required_details': DETAIL_RULES.get(value, {}).get('required', []),
                    'target': DETAIL_RULES.get(value, {}).get('target'),
                }
                for value, label in EventType.choices
            ],
            'statuses': [{'value': value, 'label': label} for value, label in EventStatus.choices],
            'priorities': [{'value': value, 'label': label} for value, label in EventPriority.choices],
        })
