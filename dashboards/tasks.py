"""
Dashboard Celery tasks.

Pre-computes season KPIs so the first dashboard load of the day is served
from cache.
"""
from celery import shared_task
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


@shared_task
def warm_farm_kpis():
    """
    Compute and cache KPIs for every active season of every farm.

    Scheduled via Celery Beat to run at 1 AM daily.
    """
    from dashboards.services.farm_dashboard import FarmDashboardService
    from ponds.models import Season, SeasonStatus

    logger.info("Starting farm KPI cache warm-up...")

    warmed, failed = 0, 0
    for season in Season.objects.filter(status=SeasonStatus.ACTIVE).select_related('farm'):
        try:
            FarmDashboardService(season.farm, season, use_cache=False).get_kpis()
            warmed += 1
        except Exception as exc:
            failed += 1
            logger.error(f"KPI warm-up failed for season {season.id}: {exc}")

    logger.info(f"Farm KPI warm-up completed: {warmed} seasons cached, {failed} failed")
    return {
        'status': 'success' if not failed else 'partial',
        'timestamp': timezone.now().isoformat(),
        'seasons_warmed': warmed,
        'seasons_failed': failed,
    }
