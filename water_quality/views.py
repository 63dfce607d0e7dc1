"""
Views for Water Quality.

API Endpoints:
- /api/water-quality/ - List/create readings (filters: pond, season, overall_quality, start_date, end_date)
- /api/water-quality/{id}/ - Retrieve/update/delete reading
- /api/water-quality/batch/ - Offline sync of several readings
- /api/water-quality/filtered/ - Range-filtered readings with summary
- /api/water-quality/export/ - CSV export
- /api/water-quality/trends/ - Averages per day, week or month
- /api/water-quality/statistics/ - Per-parameter statistics
"""

import csv
import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_date_range, filter_uuid, get_date_range
from farms.i18n import get_request_language, translate
from farms.permissions import FarmScopedMixin
from .models import WaterQualityInput, CORE_PARAMETERS
from .serializers import WaterQualityInputSerializer
from .services import WaterQualityService, parse_parameters

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    'Date', 'Time', 'Pond', 'pH', 'Dissolved Oxygen', 'Temperature',
    'Salinity', 'Ammonia', 'Nitrite', 'Alkalinity', 'Season',
]


def _csv_value(value):
    return '' if value is None else value


class WaterQualityQuerysetMixin(FarmScopedMixin):
    queryset = WaterQualityInput.objects.select_related('pond', 'season', 'chemical_used')
    serializer_class = WaterQualityInputSerializer

    def scoped_readings(self):
        """Readings of the farm narrowed by the common pond/season params."""
        params = self.request.query_params
        readings = WaterQualityInput.objects.filter(farm=self.get_farm()).select_related('pond', 'season')
        readings = filter_uuid(readings, 'pond_id', params.get('pond'))
        return filter_uuid(readings, 'season_id', params.get('season'))


# =============================================================================
# CRUD
# =============================================================================

class WaterQualityListCreateView(WaterQualityQuerysetMixin, generics.ListCreateAPIView):
    """
    GET  /api/water-quality/
    POST /api/water-quality/
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        queryset = filter_uuid(queryset, 'pond_id', params.get('pond'))
        queryset = filter_uuid(queryset, 'season_id', params.get('season'))

        overall_quality = params.get('overall_quality')
        if overall_quality:
            queryset = queryset.filter(overall_quality=overall_quality)

        return filter_date_range(queryset, params)

    def perform_create(self, serializer):
        WaterQualityService(self.get_farm(), self.request.user).create(serializer)


class WaterQualityDetailView(WaterQualityQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/water-quality/{id}/
    """

    def perform_update(self, serializer):
        WaterQualityService(self.get_farm(), self.request.user).update(serializer)

    def perform_destroy(self, instance):
        WaterQualityService(self.get_farm(), self.request.user).delete(instance)


class WaterQualityBatchSyncView(FarmScopedMixin, APIView):
    """
    POST /api/water-quality/batch/

    Body: a list of readings, or {"readings": [...]}. Rows may carry ``id``
    and ``updated_at`` from an offline client.
    """

    def post(self, request):
        rows = request.data
        if isinstance(rows, dict):
            rows = rows.get('readings')
        if not isinstance(rows, list) or not rows:
            return Response(
                {'error': 'A non-empty list of readings is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        result = WaterQualityService(self.get_farm(), request.user).sync(rows, request)
        return Response(result)


# =============================================================================
# REPORTING
# =============================================================================

class WaterQualityFilteredView(WaterQualityQuerysetMixin, APIView):
    """
    GET /api/water-quality/filtered/?start_date&end_date

    Optional: pond, season, min_/max_ bounds for ph, dissolved_oxygen,
    temperature and salinity, and ``parameters`` to limit returned fields.
    """

    def get(self, request):
        params = request.query_params
        start_date, end_date = get_date_range(params, required=True)
        parameters = parse_parameters(params.get('parameters'))

        readings = self.scoped_readings().filter(date__gte=start_date, date__lte=end_date)

        for name in CORE_PARAMETERS:
            for prefix, lookup in (('min', 'gte'), ('max', 'lte')):
                raw = params.get(f'{prefix}_{name}')
                if raw in (None, ''):
                    continue
                try:
                    bound = float(raw)
                except ValueError:
                    return Response(
                        {'error': f'{prefix}_{name} must be a number'},
                        status=status.HTTP_400_BAD_REQUEST
                    )
                readings = readings.filter(**{f'{name}__{lookup}': bound})

        readings = readings.order_by('date', 'time')
        language = get_request_language(request)

        data = []
        for reading in readings:
            row = {
                'id': str(reading.id),
                'date': reading.date,
                'time': reading.time,
                'pond': str(reading.pond_id),
                'pond_name': translate(reading.pond.name, language),
                'season': str(reading.season_id),
                'quality_score': reading.quality_score,
                'overall_quality': reading.overall_quality,
            }
            for name in parameters:
                value = getattr(reading, name)
                row[name] = float(value) if value is not None else None
            data.append(row)

        summary = WaterQualityService(self.get_farm()).summarize(
            readings, parameters, start_date, end_date
        )
        return Response({'data': data, 'summary': summary})


class WaterQualityExportView(WaterQualityQuerysetMixin, APIView):
    """
    GET /api/water-quality/export/?start_date&end_date[&pond&season]
    """

    def get(self, request):
        start_date, end_date = get_date_range(request.query_params, required=True)
        readings = self.scoped_readings().filter(
            date__gte=start_date, date__lte=end_date
        ).order_by('date', 'time')

        response = HttpResponse(content_type='text/csv')
        filename = f"water_quality_{start_date}_{end_date}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        writer = csv.writer(response)
        writer.writerow(EXPORT_COLUMNS)
        language = get_request_language(request)
        count = 0
        for reading in readings:
            writer.writerow([
                reading.date.isoformat(),
                reading.time,
                translate(reading.pond.name, language),
                _csv_value(reading.ph),
                _csv_value(reading.dissolved_oxygen),
                _csv_value(reading.temperature),
                _csv_value(reading.salinity),
                _csv_value(reading.ammonia),
                _csv_value(reading.nitrite),
                _csv_value(reading.alkalinity),
                translate(reading.season.name, language),
            ])
            count += 1

        logger.info(f"Exported {count} water quality rows for farm {self.get_farm().id}")
        return response


class WaterQualityTrendsView(WaterQualityQuerysetMixin, APIView):
    """
    GET /api/water-quality/trends/?pond&season&group_by=day|week|month
    """

    def get(self, request):
        group_by = request.query_params.get('group_by', 'day')
        readings = filter_date_range(self.scoped_readings(), request.query_params)
        trends = WaterQualityService(self.get_farm()).trends(readings, group_by)
        return Response({'group_by': group_by, 'trends': trends})


class WaterQualityStatisticsView(WaterQualityQuerysetMixin, APIView):
    """
    GET /api/water-quality/statistics/?pond&season
    """

    def get(self, request):
        readings = filter_date_range(self.scoped_readings(), request.query_params)
        return Response({
            'total_readings': readings.count(),
            'generated_at': timezone.now(),
            'parameters': WaterQualityService(self.get_farm()).statistics(readings),
        })
