"""
Feed input signals.

Inventory deductions happen in the views inside the same transaction as
the write; signals only keep the dashboard cache honest.
"""

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from dashboards.cache import invalidate_farm_dashboard
from .models import FeedInput

logger = logging.getLogger(__name__)


@receiver(post_save, sender=FeedInput)
def feed_input_saved(sender, instance, created, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
    logger.debug(
        f"Feed input {'created' if created else 'updated'}: {instance.id} "
        f"({instance.quantity} for pond {instance.pond_id})"
    )


@receiver(post_delete, sender=FeedInput)
def feed_input_deleted(sender, instance, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
    logger.debug(f"Feed input deleted: {instance.id}")
