"""
Inventory Celery tasks.
"""
from celery import shared_task
from django.db.models import F
import logging

logger = logging.getLogger(__name__)


@shared_task
def check_low_stock():
    """
    Log active items at or below their low stock threshold.

    Scheduled via Celery Beat to run every 6 hours.
    """
    from inventory.models import InventoryItem

    low_items = (
        InventoryItem.objects.active()
        .with_current_quantity()
        .filter(current_quantity__lte=F('low_stock_threshold'))
        .select_related('farm')
    )

    count = 0
    for item in low_items:
        logger.warning(
            f"Low stock on farm {item.farm_id}: {item} has {item.current_quantity} {item.unit} "
            f"(threshold {item.low_stock_threshold})"
        )
        count += 1

    logger.info(f"Low stock check complete: {count} items at or below threshold")
    return {'low_stock_items': count}
