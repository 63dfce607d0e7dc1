from django.urls import path
from .views import (
    WaterQualityListCreateView,
    WaterQualityDetailView,
    WaterQualityBatchSyncView,
    WaterQualityFilteredView,
    WaterQualityExportView,
    WaterQualityTrendsView,
    WaterQualityStatisticsView,
)

app_name = 'water_quality'

urlpatterns = [
    path('', WaterQualityListCreateView.as_view(), name='water-quality-list'),
    path('batch/', WaterQualityBatchSyncView.as_view(), name='water-quality-batch'),
    path('filtered/', WaterQualityFilteredView.as_view(), name='water-quality-filtered'),
    path('export/', WaterQualityExportView.as_view(), name='water-quality-export'),
    path('trends/', WaterQualityTrendsView.as_view(), name='water-quality-trends'),
    path('statistics/', WaterQualityStatisticsView.as_view(), name='water-quality-statistics'),
    path('<uuid:pk>/', WaterQualityDetailView.as_view(), name='water-quality-detail'),
]
