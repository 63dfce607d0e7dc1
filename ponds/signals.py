"""
Pond signals: pond changes alter the dashboard counts of their farm.
"""

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from dashboards.cache import invalidate_farm_dashboard
from .models import Pond


@receiver(post_save, sender=Pond)
@receiver(post_delete, sender=Pond)
def pond_changed_invalidate_dashboard(sender, instance, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
