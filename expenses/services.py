"""
Expense Services

Season expense summaries: totals by category and sub-category with each
category's share, and a monthly series.
"""

import logging
from decimal import Decimal
from typing import Any, Dict

from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum, Count
from django.db.models.functions import TruncMonth

from .models import Expense

logger = logging.getLogger(__name__)


def summary_cache_key(farm_id, season_id=None) -> str:
    return f"expenses:summary:{farm_id}:{season_id or 'all'}"


def invalidate_summary_cache(farm_id, season_id=None):
    cache.delete_many([summary_cache_key(farm_id, season_id), summary_cache_key(farm_id)])


class ExpenseSummaryService:
    """
    Example Usage:
        summary = ExpenseSummaryService(farm).get_summary(season)
    """

    def __init__(self, farm):
        self.farm = farm

    def get_summary(self, season=None) -> Dict[str, Any]:
        key = summary_cache_key(self.farm.id, getattr(season, 'id', None))
        cached = cache.get(key)
        if cached is not None:
            return cached

        expenses = Expense.objects.filter(farm=self.farm)
        if season is not None:
            expenses = expenses.filter(season=season)

        total = expenses.aggregate(total=Sum('amount'))['total'] or Decimal('0')

        def share(amount):
            if not total:
                return 0.0
            return round(float(amount / total * 100), 1)

        by_category = [
            {
                'main_category': row['main_category'],
                'total': float(row['total']),
                'count': row['count'],
                'percentage': share(row['total']),
            }
            for row in expenses.values('main_category')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('-total')
        ]

        by_sub_category = [
            {
                'main_category': row['main_category'],
                'sub_category': row['sub_category'],
                'total': float(row['total']),
                'count': row['count'],
                'percentage': share(row['total']),
            }
            for row in expenses.values('main_category', 'sub_category')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('-total')
        ]

        monthly = [
            {
                'month': row['month'].strftime('%Y-%m'),
                'total': float(row['total']),
                'count': row['count'],
            }
            for row in expenses.annotate(month=TruncMonth('date'))
            .values('month')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('month')
        ]

        summary = {
            'season_id': str(season.id) if season is not None else None,
            'total': float(total),
            'count': expenses.count(),
            'by_category': by_category,
            'by_sub_category': by_sub_category,
            'monthly': monthly,
        }
        cache.set(key, summary, timeout=settings.CACHE_TTL)
        return summary
