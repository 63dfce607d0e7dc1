from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from dashboards.cache import invalidate_farm_dashboard
from .models import GrowthSampling


@receiver(post_save, sender=GrowthSampling)
@receiver(post_delete, sender=GrowthSampling)
def growth_sampling_changed(sender, instance, **kwargs):
    invalidate_farm_dashboard(instance.farm_id)
