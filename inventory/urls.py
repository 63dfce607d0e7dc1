from django.urls import path
from .views import (
    InventoryItemListCreateView,
    InventoryItemDetailView,
    InventoryItemAdjustmentListView,
    InventoryAdjustmentCreateView,
    InventoryAggregateView,
)

app_name = 'inventory'

urlpatterns = [
    path('', InventoryItemListCreateView.as_view(), name='item-list'),
    path('adjustments/', InventoryAdjustmentCreateView.as_view(), name='adjustment-create'),
    path('aggregate/', InventoryAggregateView.as_view(), name='aggregate'),
    path('<uuid:pk>/', InventoryItemDetailView.as_view(), name='item-detail'),
    path('<uuid:pk>/adjustments/', InventoryItemAdjustmentListView.as_view(), name='item-adjustments'),
]
