from django.urls import path

from .views import (
    FarmKPIView,
    WaterQualityTrendsView,
    FeedConsumptionTrendsView,
    FarmReportView,
)

app_name = 'dashboards'

urlpatterns = [
    path('kpis/', FarmKPIView.as_view(), name='kpis'),
    path('trends/water-quality/', WaterQualityTrendsView.as_view(), name='water-quality-trends'),
    path('trends/feed-consumption/', FeedConsumptionTrendsView.as_view(), name='feed-consumption-trends'),
    path('report/', FarmReportView.as_view(), name='report'),
]
