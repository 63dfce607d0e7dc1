"""
Event signals.

Harvests and stockings feed the dashboard, so every event write drops the
farm's cached KPIs.
"""

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from dashboards.cache import invalidate_farm_dashboard
from .models import Event, HARVEST_TYPES

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Event)
def event_saved(sender, instance, created, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
    if instance.event_type in HARVEST_TYPES and created:
        logger.info(
            f"Harvest recorded for pond {instance.pond_id}: "
            f"{(instance.details or {}).get('harvest_weight')} kg"
        )


@receiver(post_delete, sender=Event)
def event_deleted(sender, instance, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
