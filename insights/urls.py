from django.urls import path

from .views import (
    InsightSeasonListView,
    InsightPondsBySeasonView,
    InsightCurrentPondsView,
    CompareCurrentView,
    CompareHistoricalView,
    ComparisonExportView,
)

app_name = 'insights'

urlpatterns = [
    path('seasons/', InsightSeasonListView.as_view(), name='seasons'),
    path('ponds/current/', InsightCurrentPondsView.as_view(), name='current-ponds'),
    path('ponds/season/<uuid:season_id>/', InsightPondsBySeasonView.as_view(), name='season-ponds'),
    path('compare/current/', CompareCurrentView.as_view(), name='compare-current'),
    path('compare/historical/', CompareHistoricalView.as_view(), name='compare-historical'),
    path('export/', ComparisonExportView.as_view(), name='export'),
]
