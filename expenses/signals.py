"""
Expense Tracking Signals

Keeps cached expense summaries in step with expense records.
"""

from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver
import logging

from .models import Expense
from .services import invalidate_summary_cache

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Expense)
def expense_pre_save_track_changes(sender, instance, **kwargs):
    """
    Remember the season the expense was booked against before an update,
    so a move between seasons refreshes both summaries.
    """
    instance._old_season_id = None
    if instance.pk:
        instance._old_season_id = (
            Expense.objects.filter(pk=instance.pk).values_list('season_id', flat=True).first()
        )


@receiver(post_save, sender=Expense)
def expense_saved(sender, instance, created, **kwargs):
    invalidate_summary_cache(instance.farm_id, instance.season_id)

    old_season_id = getattr(instance, '_old_season_id', None)
    if old_season_id and old_season_id != instance.season_id:
        invalidate_summary_cache(instance.farm_id, old_season_id)
        logger.info(
            f"Expense {instance.id} moved from season {old_season_id} to {instance.season_id}"
        )

    logger.debug(
        f"Expense {'created' if created else 'updated'}: {instance.id} "
        f"{instance.main_category}/{instance.sub_category} {instance.amount}"
    )


@receiver(post_delete, sender=Expense)
def expense_deleted(sender, instance, **kwargs):
    invalidate_summary_cache(instance.farm_id, instance.season_id)
    logger.info(f"Expense deleted: {instance.id} ({instance.amount})")
