from django.urls import path
from .views import (
    GrowthSamplingListCreateView,
    GrowthSamplingDetailView,
    GrowthSamplingsByPondView,
    GrowthSamplingsBySeasonView,
    GrowthSamplingsByDateRangeView,
)

app_name = 'growth'

urlpatterns = [
    path('', GrowthSamplingListCreateView.as_view(), name='growth-sampling-list'),
    path('date-range/', GrowthSamplingsByDateRangeView.as_view(), name='growth-sampling-date-range'),
    path('pond/<uuid:pond_id>/', GrowthSamplingsByPondView.as_view(), name='growth-sampling-by-pond'),
    path('season/<uuid:season_id>/', GrowthSamplingsBySeasonView.as_view(), name='growth-sampling-by-season'),
    path('<uuid:pk>/', GrowthSamplingDetailView.as_view(), name='growth-sampling-detail'),
]
