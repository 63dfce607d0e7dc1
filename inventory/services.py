"""
Inventory ledger service.

Feed inputs, water quality chemical usage and feeding/chemical events all
move stock through here so every change lands in the adjustment ledger.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError

from farms.exceptions import FarmOperationError, RecordNotFound
from .models import InventoryItem, InventoryAdjustment, AdjustmentType, ItemType

logger = logging.getLogger(__name__)


class InventoryLedger:
    """
    Records signed quantity changes against inventory items.

    Usage:
        InventoryLedger.consume(item, quantity, related=feed_input, user=user,
                                reason='Feed input')
        InventoryLedger.restore(item, quantity, related=feed_input, user=user,
                                reason='Reversal of feed input')
    """

    @staticmethod
    def get_active_item(farm, item_id, allowed_types=None, label='Inventory item'):
        """
        Fetch an active item of ``farm``.

        Raises RecordNotFound when missing or inactive and FarmOperationError
        when its type is not one of ``allowed_types``.
        """
        try:
            item = InventoryItem.objects.get(pk=item_id, farm=farm)
        except (InventoryItem.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise RecordNotFound(f'{label} not found or is inactive')

        if not item.is_active:
            raise RecordNotFound(f'{label} not found or is inactive')

        if allowed_types and item.item_type not in allowed_types:
            names = ' or '.join(allowed_types)
            raise FarmOperationError(f'{label} must be of type {names}')

        return item

    @staticmethod
    def record(item, quantity_change, adjustment_type, reason='', related=None, user=None):
        quantity_change = Decimal(str(quantity_change))
        if quantity_change == 0:
            raise FarmOperationError('Quantity change cannot be zero')

        adjustment = InventoryAdjustment.objects.create(
            farm_id=item.farm_id,
            inventory_item=item,
            adjustment_type=adjustment_type,
            quantity_change=quantity_change,
            reason=reason,
            related_document_type=type(related).__name__ if related is not None else '',
            related_document_id=getattr(related, 'pk', None),
            created_by=user,
        )
        logger.info(
            f"Inventory {adjustment_type}: {quantity_change} {item.unit} of {item} "
            f"(item {item.id})"
        )
        return adjustment

    @classmethod
    def consume(cls, item, quantity, related=None, user=None, reason=''):
        return cls.record(
            item, -Decimal(str(quantity)), AdjustmentType.USAGE,
            reason=reason, related=related, user=user
        )

    @classmethod
    def restore(cls, item, quantity, related=None, user=None, reason=''):
        return cls.record(
            item, Decimal(str(quantity)), AdjustmentType.CORRECTION,
            reason=reason, related=related, user=user
        )

    @classmethod
    def replace_usage(cls, old_item, old_quantity, new_item, new_quantity, related=None,
                      user=None, label='record'):
        """Reverse a previous usage and apply the new one, if anything changed."""
        same_item = old_item is not None and new_item is not None and old_item.pk == new_item.pk
        if same_item and Decimal(str(old_quantity)) == Decimal(str(new_quantity)):
            return

        if old_item is not None and old_quantity:
            cls.restore(old_item, old_quantity, related=related, user=user,
                        reason=f'Reversal of {label} before update')
        if new_item is not None and new_quantity:
            cls.consume(new_item, new_quantity, related=related, user=user,
                        reason=f'Usage for updated {label}')


FEED_TYPES = [ItemType.FEED]
CHEMICAL_TYPES = [ItemType.CHEMICAL, ItemType.PROBIOTIC]
