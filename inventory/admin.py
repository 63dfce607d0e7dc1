from django.contrib import admin

from .models import InventoryItem, InventoryAdjustment


class InventoryAdjustmentInline(admin.TabularInline):
    """Read-only ledger of an item"""
    model = InventoryAdjustment
    extra = 0
    fields = ['created_at', 'adjustment_type', 'quantity_change', 'reason', 'related_document_type']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'item_type', 'unit', 'cost_per_unit', 'low_stock_threshold', 'is_active', 'farm']
    list_filter = ['item_type', 'unit', 'is_active']
    search_fields = ['supplier']
    raw_id_fields = ['farm']
    readonly_fields = ['deleted_at', 'created_at', 'updated_at']
    inlines = [InventoryAdjustmentInline]


@admin.register(InventoryAdjustment)
class InventoryAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'inventory_item', 'adjustment_type', 'quantity_change', 'related_document_type']
    list_filter = ['adjustment_type']
    search_fields = ['reason']
    raw_id_fields = ['farm', 'inventory_item', 'created_by']
