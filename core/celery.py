"""
Celery configuration for the Shrimp Farm Management System.

Tasks to run in background:
- Dashboard KPI cache warming
- Overdue event checks
- Low stock inventory checks
"""
import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

# Create Celery app
app = Celery('core')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()


# =============================================================================
# CELERY BEAT SCHEDULE - Periodic Tasks
# =============================================================================
app.conf.beat_schedule = {
    # Pre-compute farm KPIs for active seasons (run at 1 AM)
    'warm-farm-kpis': {
        'task': 'dashboards.tasks.warm_farm_kpis',
        'schedule': crontab(hour=1, minute=0),
    },

    # Flag events that slipped past their date (run at 6 AM)
    'flag-overdue-events': {
        'task': 'events.tasks.flag_overdue_events',
        'schedule': crontab(hour=6, minute=0),
    },

    # Low stock check (run every 6 hours)
    'check-low-stock': {
        'task': 'inventory.tasks.check_low_stock',
        'schedule': crontab(hour='*/6', minute=0),
    },
}

app.conf.update(
    result_expires=3600,  # 1 hour

    task_time_limit=300,  # 5 minutes hard limit
    task_soft_time_limit=240,  # 4 minutes soft limit

    task_acks_late=True,
    task_reject_on_worker_lost=True,

    worker_prefetch_multiplier=1,

    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],

    timezone='Asia/Colombo',
    enable_utc=True,
)
