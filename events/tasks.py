"""
Event Celery tasks.
"""
from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def flag_overdue_events():
    """
    Log open events whose date has passed.

    Scheduled via Celery Beat to run daily at 6 AM.
    """
    from events.models import Event

    overdue = Event.objects.overdue().select_related('farm')
    per_farm = {}
    for event in overdue:
        per_farm.setdefault(event.farm_id, []).append(event)

    for farm_id, events in per_farm.items():
        logger.warning(
            f"Farm {farm_id} has {len(events)} overdue events: "
            + ', '.join(f"{e.event_type} ({e.date})" for e in events[:10])
        )

    total = sum(len(events) for events in per_farm.values())
    logger.info(f"Flagged {total} overdue events across {len(per_farm)} farms")
    return {'overdue_events': total, 'farms': len(per_farm)}
