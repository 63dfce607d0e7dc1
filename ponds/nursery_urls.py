"""
Nursery batch endpoints, prefixed with /api/nursery-batches/
"""

from django.urls import path
from .views import NurseryBatchListCreateView, NurseryBatchDetailView, NurseryBatchEventsView

app_name = 'nursery_batches'

urlpatterns = [
    path('', NurseryBatchListCreateView.as_view(), name='nursery-batch-list'),
    path('<uuid:pk>/', NurseryBatchDetailView.as_view(), name='nursery-batch-detail'),
    path('<uuid:pk>/events/', NurseryBatchEventsView.as_view(), name='nursery-batch-events'),
]
