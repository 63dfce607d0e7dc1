"""
Farm Dashboard Views

Endpoints:
- GET /api/farm/kpis/?season_id= - Season KPIs (cached)
- GET /api/farm/trends/water-quality/?season_id=&time_range= - Daily water quality
- GET /api/farm/trends/feed-consumption/?season_id=&time_range= - Daily feed usage
- GET /api/farm/report/?season_id=&format=json|csv - Season report
"""

import csv
import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_uuid
from farms.i18n import get_request_language
from farms.permissions import FarmScopedMixin
from ponds.models import Season
from .services.farm_dashboard import FarmDashboardService, DEFAULT_TIME_RANGE

logger = logging.getLogger(__name__)

REPORT_FORMATS = ('json', 'csv')


class BaseFarmDashboardView(FarmScopedMixin, APIView):
    """Resolves the season_id query parameter for every dashboard endpoint."""

    def get_season(self, request):
        season_id = request.query_params.get('season_id')
        if not season_id:
            return None, Response(
                {'error': 'season_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        season = filter_uuid(
            Season.objects.filter(farm=self.get_farm()), 'pk', season_id
        ).first()
        if season is None:
            return None, Response({'error': 'Season not found'}, status=status.HTTP_404_NOT_FOUND)
        return season, None

    def get_service(self, season):
        return FarmDashboardService(self.get_farm(), season)


class FarmKPIView(BaseFarmDashboardView):
    """
    GET /api/farm/kpis/?season_id=

    Pond, feed, growth, water quality, harvest and efficiency figures for
    one season. Served from cache until a record of the farm changes.
    """

    def get(self, request):
        season, error = self.get_season(request)
        if error:
            return error
        return Response(self.get_service(season).get_kpis())


class WaterQualityTrendsView(BaseFarmDashboardView):
    """
    GET /api/farm/trends/water-quality/?season_id=&time_range=week|month|quarter
    """

    def get(self, request):
        season, error = self.get_season(request)
        if error:
            return error
        time_range = request.query_params.get('time_range', DEFAULT_TIME_RANGE)
        return Response(self.get_service(season).get_water_quality_trends(time_range))


class FeedConsumptionTrendsView(BaseFarmDashboardView):
    """
    GET /api/farm/trends/feed-consumption/?season_id=&time_range=week|month|quarter
    """

    def get(self, request):
        season, error = self.get_season(request)
        if error:
            return error
        time_range = request.query_params.get('time_range', DEFAULT_TIME_RANGE)
        return Response(
            self.get_service(season).get_feed_consumption_trends(
                time_range, language=get_request_language(request)
            )
        )


class FarmReportView(BaseFarmDashboardView):
    """
    GET /api/farm/report/?season_id=&format=json|csv

    Query Parameters:
        format (str): json (default) or csv. The CSV is a flattened summary
        with the executive figures and one row per recommendation.
    """

    def perform_content_negotiation(self, request, force=False):
        # ?format=csv would otherwise be matched against the JSON-only renderers
        return super().perform_content_negotiation(request, force=True)

    def get(self, request):
        report_format = request.query_params.get('format', 'json').lower()
        if report_format not in REPORT_FORMATS:
            return Response(
                {'error': f"Invalid format. Use one of: {', '.join(REPORT_FORMATS)}"},
                status=status.HTTP_400_BAD_REQUEST
            )

        season, error = self.get_season(request)
        if error:
            return error

        report = self.get_service(season).get_report(
            language=get_request_language(request),
            generated_by=request.user.get_full_name() or request.user.username,
        )
        logger.info(f"Farm report generated for season {season.id} by {request.user.username}")

        if report_format == 'csv':
            response = HttpResponse(content_type='text/csv')
            filename = f"farm_report_{season.id}_{timezone.localdate():%Y%m%d}.csv"
            response['Content-Disposition'] = f'attachment; filename="{filename}"'
            writer = csv.writer(response)
            writer.writerows(FarmDashboardService.flatten_report(report))
            return response

        return Response(report)
