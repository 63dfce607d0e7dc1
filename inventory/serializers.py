"""
Serializers for inventory items and their adjustment ledger.
"""

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from farms.i18n import MultilingualField
from .models import InventoryItem, InventoryAdjustment


class InventoryItemSerializer(serializers.ModelSerializer):
    item_name = MultilingualField()
    item_type_display = serializers.CharField(source='get_item_type_display', read_only=True)
    unit_display = serializers.CharField(source='get_unit_display', read_only=True)
    initial_quantity = serializers.DecimalField(
        max_digits=14, decimal_places=3, write_only=True, required=False,
        min_value=Decimal('0'),
        help_text="Opening stock recorded as an Initial adjustment"
    )
    current_quantity = serializers.SerializerMethodField()
    is_low_stock = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'item_name', 'item_type', 'item_type_display', 'supplier',
            'purchase_date', 'unit', 'unit_display', 'cost_per_unit',
            'low_stock_threshold', 'initial_quantity', 'current_quantity', 'is_low_stock',
            'is_active', 'deleted_at', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'is_active', 'deleted_at', 'created_at', 'updated_at']

    def _quantity(self, obj):
        quantity = getattr(obj, 'current_quantity', None)
        if quantity is None:
            quantity = obj.get_current_quantity()
        return quantity

    def get_current_quantity(self, obj):
        return float(self._quantity(obj))

    def get_is_low_stock(self, obj):
        return self._quantity(obj) <= obj.low_stock_threshold

    def create(self, validated_data):
        validated_data.pop('initial_quantity', None)
        validated_data.setdefault(
            'low_stock_threshold', Decimal(settings.LOW_STOCK_DEFAULT_THRESHOLD)
        )
        return super().create(validated_data)

    def update(self, instance, validated_data):
        validated_data.pop('initial_quantity', None)
        return super().update(instance, validated_data)


class InventoryAdjustmentSerializer(serializers.ModelSerializer):
    inventory_item = serializers.UUIDField(source='inventory_item_id')
    adjustment_type_display = serializers.CharField(source='get_adjustment_type_display', read_only=True)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, allow_null=True)

    class Meta:
        model = InventoryAdjustment
        fields = [
            'id', 'inventory_item', 'adjustment_type', 'adjustment_type_display',
            'quantity_change', 'reason', 'related_document_type', 'related_document_id',
            'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = [
            'id', 'related_document_type', 'related_document_id', 'created_by', 'created_at',
        ]

    def validate_quantity_change(self, value):
        if value == 0:
            raise serializers.ValidationError('Quantity change cannot be zero')
        return value
