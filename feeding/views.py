"""
Views for Feed Inputs.

API Endpoints:
- /api/feed-inputs/ - List/create feed inputs (filters: pond, season, feed_type, start_date, end_date)
- /api/feed-inputs/{id}/ - Retrieve/update/delete feed input
- /api/feed-inputs/batch/ - Create several feed inputs at once
- /api/feed-inputs/pond/{pond_id}/ - Feed inputs of a pond
- /api/feed-inputs/pond/{pond_id}/total/ - Total feed of a pond
- /api/feed-inputs/season/{season_id}/ - Feed inputs of a season
- /api/feed-inputs/date-range/ - Feed inputs between two dates
- /api/feed-inputs/trends/ - Consumption grouped by day, week or month
"""

import logging
from decimal import Decimal

from django.db.models import Sum, Count, Avg
from django.db.models.functions import TruncDay, TruncWeek, TruncMonth
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.exceptions import FarmOperationError
from farms.filters import filter_date_range, filter_uuid
from farms.permissions import FarmScopedMixin
from ponds.models import Pond, Season
from .models import FeedInput
from .serializers import FeedInputSerializer
from .services import FeedInputService

logger = logging.getLogger(__name__)

TRUNC_FUNCTIONS = {
    'day': TruncDay,
    'week': TruncWeek,
    'month': TruncMonth,
}


class FeedInputQuerysetMixin(FarmScopedMixin):
    queryset = FeedInput.objects.select_related('pond', 'season', 'inventory_item')
    serializer_class = FeedInputSerializer


# =============================================================================
# CRUD
# =============================================================================

class FeedInputListCreateView(FeedInputQuerysetMixin, generics.ListCreateAPIView):
    """
    GET  /api/feed-inputs/
    POST /api/feed-inputs/
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        queryset = filter_uuid(queryset, 'pond_id', params.get('pond'))
        queryset = filter_uuid(queryset, 'season_id', params.get('season'))

        feed_type = params.get('feed_type')
        if feed_type:
            queryset = queryset.filter(feed_type=feed_type)

        return filter_date_range(queryset, params)

    def perform_create(self, serializer):
        FeedInputService(self.get_farm(), self.request.user).create(serializer)


class FeedInputDetailView(FeedInputQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/feed-inputs/{id}/

    Updates and deletes keep the inventory ledger in step.
    """

    def perform_update(self, serializer):
        FeedInputService(self.get_farm(), self.request.user).update(serializer)

    def perform_destroy(self, instance):
        FeedInputService(self.get_farm(), self.request.user).delete(instance)


class FeedInputBatchCreateView(FarmScopedMixin, APIView):
    """
    POST /api/feed-inputs/batch/

    Body: a list of feed inputs, or {"feed_inputs": [...]}.
    Each row is created on its own; failures are reported per row.
    """

    def post(self, request):
        rows = request.data
        if isinstance(rows, dict):
            rows = rows.get('feed_inputs')
        if not isinstance(rows, list) or not rows:
            return Response(
                {'error': 'A non-empty list of feed inputs is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        service = FeedInputService(self.get_farm(), request.user)
        created, errors = [], []

        for index, row in enumerate(rows):
            serializer = FeedInputSerializer(data=row, context={'request': request})
            if not serializer.is_valid():
                errors.append({'index': index, 'errors': serializer.errors})
                continue
            try:
                feed_input = service.create(serializer)
            except FarmOperationError as e:
                errors.append({'index': index, 'errors': {'error': e.message}})
                continue
            created.append(FeedInputSerializer(feed_input, context={'request': request}).data)

        logger.info(f"Feed input batch: {len(created)} created, {len(errors)} failed")
        return Response(
            {'created': created, 'errors': errors},
            status=status.HTTP_201_CREATED if created else status.HTTP_400_BAD_REQUEST
        )


# =============================================================================
# LOOKUPS
# =============================================================================

class FeedInputsByPondView(FeedInputQuerysetMixin, generics.ListAPIView):
    """
    GET /api/feed-inputs/pond/{pond_id}/?season=
    """

    def get_queryset(self):
        pond = self.get_farm_object(Pond, self.kwargs['pond_id'])
        queryset = super().get_queryset().filter(pond=pond)
        return filter_uuid(queryset, 'season_id', self.request.query_params.get('season'))


class FeedInputsBySeasonView(FeedInputQuerysetMixin, generics.ListAPIView):
    """
    GET /api/feed-inputs/season/{season_id}/
    """

    def get_queryset(self):
        season = self.get_farm_object(Season, self.kwargs['season_id'])
        return super().get_queryset().filter(season=season)


class FeedInputsByDateRangeView(FeedInputQuerysetMixin, generics.ListAPIView):
    """
    GET /api/feed-inputs/date-range/?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        queryset = filter_uuid(queryset, 'pond_id', self.request.query_params.get('pond'))
        return filter_date_range(queryset, self.request.query_params, required=True)


class PondFeedTotalView(FarmScopedMixin, APIView):
    """
    GET /api/feed-inputs/pond/{pond_id}/total/?season=
    """

    def get(self, request, pond_id):
        pond = self.get_farm_object(Pond, pond_id)
        feed_inputs = FeedInput.objects.filter(farm=self.get_farm(), pond=pond)
        feed_inputs = filter_uuid(feed_inputs, 'season_id', request.query_params.get('season'))

        totals = feed_inputs.aggregate(
            total_quantity=Sum('quantity'),
            total_cost=Sum('total_cost'),
            entries=Count('id'),
        )
        return Response({
            'pond_id': str(pond.id),
            'total_quantity': float(totals['total_quantity'] or Decimal('0')),
            'total_cost': float(totals['total_cost'] or Decimal('0')),
            'entries': totals['entries'],
        })


class FeedTrendsView(FarmScopedMixin, APIView):
    """
    GET /api/feed-inputs/trends/?group_by=day|week|month&season=&pond=

    Consumption series: total quantity, entry count and average per entry.
    """

    def get(self, request):
        group_by = request.query_params.get('group_by', 'day')
        trunc = TRUNC_FUNCTIONS.get(group_by)
        if trunc is None:
            return Response(
                {'error': 'group_by must be one of: day, week, month'},
                status=status.HTTP_400_BAD_REQUEST
            )

        feed_inputs = FeedInput.objects.filter(farm=self.get_farm())
        feed_inputs = filter_uuid(feed_inputs, 'season_id', request.query_params.get('season'))
        feed_inputs = filter_uuid(feed_inputs, 'pond_id', request.query_params.get('pond'))
        feed_inputs = filter_date_range(feed_inputs, request.query_params)

        series = (
            feed_inputs
            .annotate(period=trunc('date'))
            .values('period')
            .annotate(
                total_quantity=Sum('quantity'),
                entries=Count('id'),
                average_quantity=Avg('quantity'),
            )
            .order_by('period')
        )

        return Response({
            'group_by': group_by,
            'trends': [
                {
                    'period': row['period'],
                    'total_quantity': round(float(row['total_quantity'] or 0), 3),
                    'entries': row['entries'],
                    'average_quantity': round(float(row['average_quantity'] or 0), 3),
                }
                for row in series
            ],
        })
