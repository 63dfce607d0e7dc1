"""
Views for Growth Samplings.

API Endpoints:
- /api/growth-samplings/ - List/create samplings (filters: pond, season, start_date, end_date)
- /api/growth-samplings/{id}/ - Retrieve/update/delete sampling
- /api/growth-samplings/pond/{pond_id}/ - Samplings of a pond
- /api/growth-samplings/season/{season_id}/ - Samplings of a season
- /api/growth-samplings/date-range/ - Samplings between two dates
"""

import logging

from django.db import transaction
from rest_framework import generics

from events.services import EventService, require_stocking
from farms.filters import filter_date_range, filter_uuid
from farms.permissions import FarmScopedMixin
from ponds.models import Pond, Season
from .models import GrowthSampling
from .serializers import GrowthSamplingSerializer

logger = logging.getLogger(__name__)


class GrowthSamplingQuerysetMixin(FarmScopedMixin):
    queryset = GrowthSampling.objects.select_related('pond', 'season')
    serializer_class = GrowthSamplingSerializer


class GrowthSamplingListCreateView(GrowthSamplingQuerysetMixin, generics.ListCreateAPIView):
    """
    GET  /api/growth-samplings/
    POST /api/growth-samplings/

    The pond must be stocked on or before the sampling date. The first
    sampling of a day also records a Sampling event for the pond.
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        queryset = filter_uuid(queryset, 'pond_id', params.get('pond'))
        queryset = filter_uuid(queryset, 'season_id', params.get('season'))
        return filter_date_range(queryset, params)

    @transaction.atomic
    def perform_create(self, serializer):
        data = serializer.validated_data
        require_stocking(data['pond'], data['season'], data['date'], 'growth sampling')

        sampling = serializer.save(farm=self.get_farm(), created_by=self.request.user)
        EventService(self.get_farm(), self.request.user).ensure_sampling_event(sampling)
        logger.info(
            f"Growth sampling created for pond {sampling.pond_id}: "
            f"{sampling.average_weight_grams} g average"
        )


class GrowthSamplingDetailView(GrowthSamplingQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/growth-samplings/{id}/

    Moving a sampling to another date or pond re-checks the stocking rule.
    """

    @transaction.atomic
    def perform_update(self, serializer):
        previous = serializer.instance
        data = serializer.validated_data
        if 'date' in data or 'pond' in data:
            require_stocking(
                data.get('pond', previous.pond), data.get('season', previous.season),
                data.get('date', previous.date), 'growth sampling'
            )
        sampling = serializer.save()
        logger.info(f"Growth sampling updated: {sampling.id}")

    def perform_destroy(self, instance):
        logger.info(f"Growth sampling deleted: {instance.id}")
        instance.delete()


class GrowthSamplingsByPondView(GrowthSamplingQuerysetMixin, generics.ListAPIView):

    def get_queryset(self):
        pond = self.get_farm_object(Pond, self.kwargs['pond_id'])
        queryset = super().get_queryset().filter(pond=pond)
        return filter_uuid(queryset, 'season_id', self.request.query_params.get('season'))


class GrowthSamplingsBySeasonView(GrowthSamplingQuerysetMixin, generics.ListAPIView):

    def get_queryset(self):
        season = self.get_farm_object(Season, self.kwargs['season_id'])
        return super().get_queryset().filter(season=season)


class GrowthSamplingsByDateRangeView(GrowthSamplingQuerysetMixin, generics.ListAPIView):
    """
    GET /api/growth-samplings/date-range/?start_date&end_date (both required)
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        queryset = filter_uuid(queryset, 'pond_id', self.request.query_params.get('pond'))
        return filter_date_range(queryset, self.request.query_params, required=True)
