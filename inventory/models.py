"""
Inventory Models

Stock on hand is never stored on the item. It is the running sum of the
item's adjustment ledger: purchases add, usages subtract, corrections undo.

MODELS:
- InventoryItem: Feed, chemicals, probiotics and other consumables
- InventoryAdjustment: Signed quantity changes against an item
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum, DecimalField
from django.db.models.functions import Coalesce

from farms.i18n import translate


class ItemType(models.TextChoices):
    FEED = 'Feed', 'Feed'
    CHEMICAL = 'Chemical', 'Chemical'
    PROBIOTIC = 'Probiotic', 'Probiotic'
    OTHER = 'Other', 'Other'


class ItemUnit(models.TextChoices):
    KG = 'kg', 'Kilogram'
    GRAM = 'g', 'Gram'
    LITRE = 'litre', 'Litre'
    ML = 'ml', 'Millilitre'
    BAG = 'bag', 'Bag'
    BOTTLE = 'bottle', 'Bottle'


class AdjustmentType(models.TextChoices):
    PURCHASE = 'Purchase', 'Purchase'
    USAGE = 'Usage', 'Usage'
    CORRECTION = 'Correction', 'Correction'
    SPOILAGE = 'Spoilage', 'Spoilage'
    INITIAL_ENTRY_ERROR = 'Initial Entry Error', 'Initial Entry Error'
    INITIAL = 'Initial', 'Initial'


class InventoryItemQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def with_current_quantity(self):
        return self.annotate(
            current_quantity=Coalesce(
                Sum('adjustments__quantity_change'),
                Decimal('0'),
                output_field=DecimalField(max_digits=14, decimal_places=3)
            )
        )


class InventoryItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='inventory_items')

    item_name = models.JSONField(help_text="Language map of the item name")
    item_type = models.CharField(max_length=20, choices=ItemType.choices, db_index=True)
    supplier = models.CharField(max_length=200, blank=True)
    purchase_date = models.DateField(null=True, blank=True)
    unit = models.CharField(max_length=10, choices=ItemUnit.choices)
    cost_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    low_stock_threshold = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Alert when current quantity falls to or below this value"
    )

    # Soft delete
    is_active = models.BooleanField(default=True, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InventoryItemQuerySet.as_manager()

    class Meta:
        db_table = 'inventory_items'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['farm', 'item_type', 'is_active']),
        ]

    def __str__(self):
        return translate(self.item_name, 'en')

    def get_current_quantity(self):
        total = self.adjustments.aggregate(total=Sum('quantity_change'))['total']
        return total or Decimal('0')


class InventoryAdjustment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='inventory_adjustments')
    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='adjustments'
    )

    adjustment_type = models.CharField(max_length=30, choices=AdjustmentType.choices)
    quantity_change = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Positive adds stock, negative removes it"
    )
    reason = models.CharField(max_length=500, blank=True)

    # Record that caused the adjustment (feed input, event, water quality input)
    related_document_type = models.CharField(max_length=50, blank=True)
    related_document_id = models.UUIDField(null=True, blank=True, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inventory_adjustments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'inventory_adjustments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['inventory_item', '-created_at']),
            models.Index(fields=['related_document_type', 'related_document_id']),
        ]

    def __str__(self):
        return f"{self.adjustment_type} {self.quantity_change} of {self.inventory_item}"
