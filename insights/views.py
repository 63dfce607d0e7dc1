"""
Views for Historical Insights.

API Endpoints:
- /api/historical-insights/seasons/ - Seasons available for comparison
- /api/historical-insights/ponds/season/{season_id}/ - Ponds of a season
- /api/historical-insights/ponds/current/ - Ponds of the current season
- /api/historical-insights/compare/current/ - Compare two ponds over a date range
- /api/historical-insights/compare/historical/ - Compare two ponds over their seasons
- /api/historical-insights/export/ - Comparison as CSV
"""

import csv
import logging

from django.http import HttpResponse
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.i18n import get_request_language, translate
from farms.permissions import FarmScopedMixin, HasFarm
from ponds.models import Season, SeasonStatus, Pond
from .serializers import (
    PondComparisonSerializer,
    DateRangeComparisonSerializer,
    ComparisonExportSerializer,
)
from .services import PondComparisonService

logger = logging.getLogger(__name__)


def _season_summary(season, language):
    return {
        'id': str(season.id),
        'name': translate(season.name, language),
        'start_date': season.start_date,
        'end_date': season.end_date,
        'status': season.status,
    }


def _pond_summary(pond, season, language):
    return {
        'id': str(pond.id),
        'name': translate(pond.name, language),
        'season': _season_summary(season, language),
        'status': pond.status,
        'created_at': pond.created_at,
    }


class InsightsView(FarmScopedMixin, APIView):
    # comparison POSTs are read-only; viewers allowed
    permission_classes = [IsAuthenticated, HasFarm]

    def get_service(self, request):
        return PondComparisonService(self.get_farm(), language=get_request_language(request))

    def ponds_of(self, season, request):
        language = get_request_language(request)
        ponds = Pond.objects.filter(farm=self.get_farm(), season=season).order_by('-created_at')
        return [_pond_summary(pond, season, language) for pond in ponds]


class InsightSeasonListView(InsightsView):
    """
    GET /api/historical-insights/seasons/
    """

    def get(self, request):
        language = get_request_language(request)
        seasons = Season.objects.filter(farm=self.get_farm()).order_by('-start_date')
        return Response({'seasons': [_season_summary(season, language) for season in seasons]})


class InsightPondsBySeasonView(InsightsView):
    """
    GET /api/historical-insights/ponds/season/{season_id}/
    """

    def get(self, request, season_id):
        season = self.get_farm_object(Season, season_id)
        return Response({'ponds': self.ponds_of(season, request)})


class InsightCurrentPondsView(InsightsView):
    """
    GET /api/historical-insights/ponds/current/

    Ponds of the latest Active season, falling back to the latest season.
    """

    def get(self, request):
        seasons = Season.objects.filter(farm=self.get_farm()).order_by('-start_date')
        season = seasons.filter(status=SeasonStatus.ACTIVE).first() or seasons.first()
        if season is None:
            return Response({'ponds': []})
        return Response({'ponds': self.ponds_of(season, request)})


class CompareCurrentView(InsightsView):
    """
    POST /api/historical-insights/compare/current/

    Body: pond_a_id, pond_b_id, start_date, end_date, metrics
    """

    def post(self, request):
        serializer = DateRangeComparisonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        comparison = self.get_service(request).compare_date_range(
            data['pond_a_id'], data['pond_b_id'], data['metrics'],
            data['start_date'], data['end_date']
        )
        return Response({'comparison_data': comparison})


class CompareHistoricalView(InsightsView):
    """
    POST /api/historical-insights/compare/historical/

    Body: pond_a_id, pond_b_id, metrics
    """

    def post(self, request):
        serializer = PondComparisonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        comparison = self.get_service(request).compare_historical(
            data['pond_a_id'], data['pond_b_id'], data['metrics']
        )
        return Response({'comparison_data': comparison})


class ComparisonExportView(InsightsView):
    """
    POST /api/historical-insights/export/

    Body: pond_a_id, pond_b_id, metrics, format=csv, mode=current|historical,
    start_date and end_date (current mode).
    """

    def post(self, request):
        serializer = ComparisonExportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = self.get_service(request)
        if data['mode'] == 'current':
            comparison = service.compare_date_range(
                data['pond_a_id'], data['pond_b_id'], data['metrics'],
                data['start_date'], data['end_date']
            )
        else:
            comparison = service.compare_historical(
                data['pond_a_id'], data['pond_b_id'], data['metrics']
            )

        response = HttpResponse(content_type='text/csv')
        filename = f"pond_comparison_{data['pond_a_id']}_vs_{data['pond_b_id']}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        writer = csv.writer(response)
        writer.writerows(service.export_rows(comparison, data['mode']))

        logger.info(f"Comparison export ({data['mode']}) for ponds {data['pond_a_id']} and {data['pond_b_id']}")
        return response
