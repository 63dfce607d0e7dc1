"""
Water quality signals.
"""

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from dashboards.cache import invalidate_farm_dashboard
from .models import WaterQualityInput

logger = logging.getLogger(__name__)


@receiver(post_save, sender=WaterQualityInput)
def water_quality_saved(sender, instance, created, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
    for alert in instance.alerts:
        logger.warning(
            f"Water quality alert for pond {instance.pond_id} on {instance.date}: "
            f"{alert['message']}"
        )


@receiver(post_delete, sender=WaterQualityInput)
def water_quality_deleted(sender, instance, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
