"""
Season endpoints, prefixed with /api/seasons/
"""

from django.urls import path
from .views import SeasonListCreateView, SeasonDetailView, SeasonCopyPondsView

app_name = 'seasons'

urlpatterns = [
    path('', SeasonListCreateView.as_view(), name='season-list'),
    path('copy-ponds/', SeasonCopyPondsView.as_view(), name='season-copy-ponds'),
    path('<uuid:pk>/', SeasonDetailView.as_view(), name='season-detail'),
]
