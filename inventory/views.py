"""
Views for Inventory.

API Endpoints:
- /api/inventory/ - List/create items (filters: item_type, search, include_inactive)
- /api/inventory/{id}/ - Retrieve/update/soft-delete item
- /api/inventory/{id}/adjustments/ - Adjustment ledger of an item
- /api/inventory/adjustments/ - Record a manual adjustment
- /api/inventory/aggregate/ - Current stock and usage summary
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum, Count
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_date_range, filter_uuid
from farms.i18n import get_request_language, translate
from farms.permissions import FarmScopedMixin
from .models import InventoryItem, InventoryAdjustment, AdjustmentType
from .serializers import InventoryItemSerializer, InventoryAdjustmentSerializer
from .services import InventoryLedger

logger = logging.getLogger(__name__)


class InventoryItemListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/inventory/
    POST /api/inventory/

    ``initial_quantity`` on create opens the ledger with an Initial adjustment.
    """
    queryset = InventoryItem.objects.with_current_quantity()
    serializer_class = InventoryItemSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        if params.get('include_inactive', 'false').lower() != 'true':
            queryset = queryset.filter(is_active=True)

        item_type = params.get('item_type')
        if item_type:
            queryset = queryset.filter(item_type=item_type)

        search = params.get('search')
        if search:
            queryset = queryset.filter(item_name__en__icontains=search)

        return queryset.order_by('-created_at')

    @transaction.atomic
    def perform_create(self, serializer):
        initial_quantity = serializer.validated_data.get('initial_quantity')
        item = serializer.save(farm=self.get_farm())
        if initial_quantity:
            InventoryLedger.record(
                item, initial_quantity, AdjustmentType.INITIAL,
                reason='Initial stock', user=self.request.user
            )
        logger.info(f"Inventory item created: {item} ({item.item_type}) for farm {item.farm_id}")


class InventoryItemDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/inventory/{id}/

    Delete is soft: the item is deactivated and kept for history.
    """
    queryset = InventoryItem.objects.with_current_quantity()
    serializer_class = InventoryItemSerializer

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.deleted_at = timezone.now()
        instance.save(update_fields=['is_active', 'deleted_at', 'updated_at'])
        logger.info(f"Inventory item deactivated: {instance.id}")


class InventoryItemAdjustmentListView(FarmScopedMixin, generics.ListAPIView):
    """
    GET /api/inventory/{id}/adjustments/
    """
    queryset = InventoryAdjustment.objects.select_related('created_by')
    serializer_class = InventoryAdjustmentSerializer

    def get_queryset(self):
        item = self.get_farm_object(InventoryItem, self.kwargs['pk'])
        queryset = super().get_queryset().filter(inventory_item=item)

        adjustment_type = self.request.query_params.get('adjustment_type')
        if adjustment_type:
            queryset = queryset.filter(adjustment_type=adjustment_type)
        return queryset.order_by('-created_at')


class InventoryAdjustmentCreateView(FarmScopedMixin, APIView):
    """
    POST /api/inventory/adjustments/

    Body: inventory_item, adjustment_type, quantity_change (signed, non-zero), reason.
    """

    def post(self, request):
        serializer = InventoryAdjustmentSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        item = InventoryLedger.get_active_item(self.get_farm(), data['inventory_item_id'])
        adjustment = InventoryLedger.record(
            item, data['quantity_change'], data['adjustment_type'],
            reason=data.get('reason', ''), user=request.user
        )
        return Response(
            {
                'message': 'Inventory adjusted successfully',
                'adjustment': InventoryAdjustmentSerializer(adjustment).data,
                'current_quantity': float(item.get_current_quantity()),
            },
            status=status.HTTP_201_CREATED
        )


class InventoryAggregateView(FarmScopedMixin, APIView):
    """
    GET /api/inventory/aggregate/?season=&pond=&start_date=&end_date=

    Stock on hand for active items and per-item usage from feed inputs and
    water quality chemical treatments.
    """

    def get(self, request):
        from feeding.models import FeedInput
        from water_quality.models import WaterQualityInput

        farm = self.get_farm()
        params = request.query_params
        language = get_request_language(request)

        items = InventoryItem.objects.filter(farm=farm).with_current_quantity()
        current_stock = [
            {
                'id': str(item.id),
                'item_name': translate(item.item_name, language),
                'item_type': item.item_type,
                'unit': item.unit,
                'current_quantity': float(item.current_quantity),
                'low_stock_threshold': float(item.low_stock_threshold),
                'is_low_stock': item.current_quantity <= item.low_stock_threshold,
            }
            for item in items.filter(is_active=True).order_by('item_type')
        ]

        feed_inputs = FeedInput.objects.filter(farm=farm)
        readings = WaterQualityInput.objects.filter(farm=farm, chemical_used__isnull=False)
        for field in ('season_id', 'pond_id'):
            feed_inputs = filter_uuid(feed_inputs, field, params.get(field.replace('_id', '')))
            readings = filter_uuid(readings, field, params.get(field.replace('_id', '')))
        feed_inputs = filter_date_range(feed_inputs, params)
        readings = filter_date_range(readings, params)

        usage = {}
        feed_usage = feed_inputs.values('inventory_item_id').annotate(
            total=Sum('quantity'), entries=Count('id')
        )
        chemical_usage = readings.values('chemical_used_id').annotate(
            total=Sum('chemical_quantity_used'), entries=Count('id')
        )
        for row in feed_usage:
            usage[row['inventory_item_id']] = [row['total'] or Decimal('0'), row['entries'], 'feed_inputs']
        for row in chemical_usage:
            usage[row['chemical_used_id']] = [row['total'] or Decimal('0'), row['entries'], 'water_quality']

        items_by_id = {item.id: item for item in items.filter(id__in=list(usage))}
        usage_summary = []
        for item_id, (total, entries, source) in usage.items():
            item = items_by_id.get(item_id)
            if item is None:
                continue
            usage_summary.append({
                'id': str(item.id),
                'item_name': translate(item.item_name, language),
                'item_type': item.item_type,
                'unit': item.unit,
                'source': source,
                'total_used': float(total),
                'entries': entries,
                'total_cost': float((total * item.cost_per_unit).quantize(Decimal('0.01'))),
            })
        usage_summary.sort(key=lambda row: row['total_used'], reverse=True)

        return Response({
            'current_stock': current_stock,
            'usage_summary': usage_summary,
            'total_usage_cost': round(sum(row['total_cost'] for row in usage_summary), 2),
        })
