"""
Views for Seasons, Ponds and Nursery Batches.

API Endpoints:
- /api/seasons/ - List/create seasons
- /api/seasons/{id}/ - Retrieve/update/delete season
- /api/seasons/copy-ponds/ - Copy ponds from one season to another
- /api/ponds/ - List/create ponds (filters: season, status, search)
- /api/ponds/{id}/ - Retrieve/update/delete pond
- /api/ponds/season/{season_id}/ - Ponds of a season
- /api/ponds/{id}/kpis/ - Pond performance figures
- /api/ponds/{id}/events/ - Events of a pond
- /api/ponds/{id}/logs/ - Full-cycle log of a pond
- /api/nursery-batches/ - List/create nursery batches (filter: season)
- /api/nursery-batches/{id}/ - Retrieve/update/delete nursery batch
- /api/nursery-batches/{id}/events/ - Events of a nursery batch
"""

import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_uuid
from farms.permissions import FarmScopedMixin
from .models import Season, Pond, NurseryBatch
from .serializers import (
    SeasonSerializer,
    PondSerializer,
    NurseryBatchSerializer,
    PondCopySerializer,
)
from .services import copy_ponds, PondKPIService, pond_full_cycle_logs

logger = logging.getLogger(__name__)


# =============================================================================
# SEASONS
# =============================================================================

class SeasonListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/seasons/
    POST /api/seasons/
    """
    queryset = Season.objects.all()
    serializer_class = SeasonSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        season_status = self.request.query_params.get('status')
        if season_status:
            queryset = queryset.filter(status=season_status)
        return queryset.order_by('-start_date')

    def perform_create(self, serializer):
        season = serializer.save(farm=self.get_farm())
        logger.info(f"Season created: {season} ({season.id}) for farm {season.farm_id}")


class SeasonDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/seasons/{id}/
    """
    queryset = Season.objects.all()
    serializer_class = SeasonSerializer

    def perform_destroy(self, instance):
        logger.info(f"Season deleted: {instance} ({instance.id})")
        instance.delete()


class SeasonCopyPondsView(FarmScopedMixin, APIView):
    """
    POST /api/seasons/copy-ponds/

    Body: {"source_season_id": "...", "target_season_id": "..."}
    """

    def post(self, request):
        serializer = PondCopySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        farm = self.get_farm()
        source = Season.objects.filter(farm=farm, pk=serializer.validated_data['source_season_id']).first()
        if source is None:
            return Response({'error': 'Source season not found'}, status=status.HTTP_404_NOT_FOUND)
        target = Season.objects.filter(farm=farm, pk=serializer.validated_data['target_season_id']).first()
        if target is None:
            return Response({'error': 'Target season not found'}, status=status.HTTP_404_NOT_FOUND)

        count = copy_ponds(source, target)
        return Response(
            {'message': f'{count} ponds copied successfully', 'count': count},
            status=status.HTTP_201_CREATED
        )


# =============================================================================
# PONDS
# =============================================================================

class PondListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/ponds/
    POST /api/ponds/
    """
    queryset = Pond.objects.select_related('season')
    serializer_class = PondSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        queryset = filter_uuid(queryset, 'season_id', params.get('season'))

        pond_status = params.get('status')
        if pond_status:
            queryset = queryset.filter(status=pond_status)

        search = params.get('search')
        if search:
            queryset = queryset.filter(name__en__icontains=search)

        return queryset

    def create(self, request, *args, **kwargs):
        season_id = request.data.get('season')
        if season_id and not filter_uuid(
            Season.objects.filter(farm=self.get_farm()), 'pk', season_id
        ).exists():
            return Response({'error': 'Season not found'}, status=status.HTTP_404_NOT_FOUND)
        return super().create(request, *args, **kwargs)

    def perform_create(self, serializer):
        pond = serializer.save(farm=self.get_farm())
        logger.info(f"Pond created: {pond} ({pond.id}) in season {pond.season_id}")


class PondDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/ponds/{id}/
    """
    queryset = Pond.objects.select_related('season')
    serializer_class = PondSerializer

    def perform_destroy(self, instance):
        logger.info(f"Pond deleted: {instance} ({instance.id})")
        instance.delete()


class PondsBySeasonView(FarmScopedMixin, generics.ListAPIView):
    """
    GET /api/ponds/season/{season_id}/
    """
    queryset = Pond.objects.select_related('season')
    serializer_class = PondSerializer

    def get_queryset(self):
        season = self.get_farm_object(Season, self.kwargs['season_id'])
        return super().get_queryset().filter(season=season)


class PondKPIView(FarmScopedMixin, APIView):
    """
    GET /api/ponds/{id}/kpis/
    """

    def get(self, request, pk):
        pond = self.get_farm_object(Pond, pk)
        return Response(PondKPIService(pond).get_kpis())


class PondEventsView(FarmScopedMixin, generics.ListAPIView):
    """
    GET /api/ponds/{id}/events/ - newest first
    """

    def get_serializer_class(self):
        from events.serializers import EventSerializer
        return EventSerializer

    def get_queryset(self):
        from events.models import Event

        pond = self.get_farm_object(Pond, self.kwargs['pk'])
        return Event.objects.filter(pond=pond).select_related(
            'season', 'pond', 'created_by', 'approved_by'
        ).order_by('-date', '-created_at')


class PondLogsView(FarmScopedMixin, APIView):
    """
    GET /api/ponds/{id}/logs/

    Every feed input, growth sampling, water test and event of the pond.
    """

    def get(self, request, pk):
        from events.serializers import EventSerializer
        from feeding.serializers import FeedInputSerializer
        from growth.serializers import GrowthSamplingSerializer
        from water_quality.serializers import WaterQualityInputSerializer

        pond = self.get_farm_object(Pond, pk)
        logs = pond_full_cycle_logs(pond)
        context = {'request': request}

        data = {
            'feed_inputs': FeedInputSerializer(logs['feed_inputs'], many=True, context=context).data,
            'growth_samplings': GrowthSamplingSerializer(logs['growth_samplings'], many=True, context=context).data,
            'water_quality': WaterQualityInputSerializer(logs['water_quality'], many=True, context=context).data,
            'events': EventSerializer(logs['events'], many=True, context=context).data,
        }
        return Response({
            'pond': PondSerializer(pond, context=context).data,
            'counts': {key: len(rows) for key, rows in data.items()},
            **data,
        })


# =============================================================================
# NURSERY BATCHES
# =============================================================================

class NurseryBatchListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/nursery-batches/
    POST /api/nursery-batches/
    """
    queryset = NurseryBatch.objects.select_related('season')
    serializer_class = NurseryBatchSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        queryset = filter_uuid(queryset, 'season_id', self.request.query_params.get('season'))
        batch_status = self.request.query_params.get('status')
        if batch_status:
            queryset = queryset.filter(status=batch_status)
        return queryset


class NurseryBatchDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/nursery-batches/{id}/
    """
    queryset = NurseryBatch.objects.select_related('season')
    serializer_class = NurseryBatchSerializer


class NurseryBatchEventsView(FarmScopedMixin, generics.ListAPIView):
    """
    GET /api/nursery-batches/{id}/events/
    """

    def get_serializer_class(self):
        from events.serializers import EventSerializer
        return EventSerializer

    def get_queryset(self):
        from events.models import Event

        batch = self.get_farm_object(NurseryBatch, self.kwargs['pk'])
        return Event.objects.filter(nursery_batch=batch).select_related(
            'season', 'nursery_batch', 'created_by', 'approved_by'
        ).order_by('-date', '-created_at')
