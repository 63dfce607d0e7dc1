"""
Water Quality Service

1. Chemical usage recorded against inventory when a test applies a treatment
2. Offline batch sync with last-writer conflict detection
3. Filtered summaries, trends and per-parameter statistics
"""

import logging
import statistics as stats
from typing import Any, Dict, List

from django.db import transaction
from django.db.models import Avg, Count, Q
from django.db.models.functions import TruncDay, TruncWeek, TruncMonth

from farms.exceptions import FarmOperationError
from inventory.services import InventoryLedger
from .models import WaterQualityInput, WATER_PARAMETERS, CORE_PARAMETERS, QualityRating

logger = logging.getLogger(__name__)

TRUNC_FUNCTIONS = {
    'day': TruncDay,
    'week': TruncWeek,
    'month': TruncMonth,
}


def parse_parameters(raw):
    """Split a comma list of parameter names; unknown names are rejected."""
    if not raw:
        return list(WATER_PARAMETERS)
    names = [name.strip() for name in raw.split(',') if name.strip()]
    unknown = [name for name in names if name not in WATER_PARAMETERS]
    if unknown:
        raise FarmOperationError(
            f"Invalid parameters: {', '.join(unknown)}. "
            f"Allowed: {', '.join(WATER_PARAMETERS)}"
        )
    return names


def _round(value, places=2):
    return round(float(value), places) if value is not None else None


class WaterQualityService:
    """
    Usage:
        service = WaterQualityService(farm, user)
        reading = service.create(serializer)
        result = service.sync(rows, request)
    """

    def __init__(self, farm, user=None):
        self.farm = farm
        self.user = user

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @transaction.atomic
    def create(self, serializer, **extra):
        reading = serializer.save(farm=self.farm, created_by=self.user, **extra)
        if reading.chemical_used_id and reading.chemical_quantity_used:
            InventoryLedger.consume(
                reading.chemical_used, reading.chemical_quantity_used,
                related=reading, user=self.user,
                reason=f'Chemical applied at water test of pond {reading.pond} on {reading.date}'
            )
        logger.info(
            f"Water quality input created for pond {reading.pond_id}: "
            f"score {reading.quality_score} ({reading.overall_quality})"
        )
        return reading

    @transaction.atomic
    def update(self, serializer):
        previous = serializer.instance
        old_chemical, old_quantity = previous.chemical_used, previous.chemical_quantity_used

        reading = serializer.save()
        InventoryLedger.replace_usage(
            old_chemical, old_quantity or 0,
            reading.chemical_used, reading.chemical_quantity_used or 0,
            related=reading, user=self.user, label='water quality input'
        )
        logger.info(f"Water quality input updated: {reading.id}")
        return reading

    @transaction.atomic
    def delete(self, reading):
        if reading.chemical_used_id and reading.chemical_quantity_used:
            InventoryLedger.restore(
                reading.chemical_used, reading.chemical_quantity_used,
                related=reading, user=self.user,
                reason=f'Reversal of chemical usage due to deletion of water test {reading.id}'
            )
        logger.info(f"Water quality input deleted: {reading.id}")
        reading.delete()

    # =========================================================================
    # OFFLINE SYNC
    # =========================================================================

    def sync(self, rows: List[Dict[str, Any]], request) -> Dict[str, List]:
        """
        Upsert readings captured offline.

        A row whose ``id`` exists on the server and whose server copy was
        updated after the row's ``updated_at`` is left untouched and reported
        as a conflict.
        """
        from .serializers import WaterQualityInputSerializer, WaterQualitySyncRowSerializer

        result = {'created': [], 'updated': [], 'conflicts': [], 'errors': []}
        context = {'request': request}

        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                result['errors'].append({'index': index, 'errors': {'error': 'Row must be an object'}})
                continue

            meta = WaterQualitySyncRowSerializer(data=row)
            if not meta.is_valid():
                result['errors'].append({'index': index, 'errors': meta.errors})
                continue
            row_id = meta.validated_data.get('id')
            client_updated_at = meta.validated_data.get('updated_at')

            existing = None
            if row_id is not None:
                existing = WaterQualityInput.objects.filter(pk=row_id, farm=self.farm).first()
                if existing is None and WaterQualityInput.objects.filter(pk=row_id).exists():
                    result['errors'].append({'index': index, 'errors': {'error': 'Water quality input not found'}})
                    continue

            if existing is not None:
                if client_updated_at is not None and existing.updated_at > client_updated_at:
                    logger.warning(
                        f"Sync conflict on water quality input {existing.id}: "
                        f"server {existing.updated_at}, client {client_updated_at}"
                    )
                    result['conflicts'].append({
                        'index': index,
                        'id': str(existing.id),
                        'server_updated_at': existing.updated_at,
                        'client_updated_at': client_updated_at,
                    })
                    continue
                serializer = WaterQualityInputSerializer(
                    existing, data=row, partial=True, context=context
                )
            else:
                serializer = WaterQualityInputSerializer(data=row, context=context)

            if not serializer.is_valid():
                result['errors'].append({'index': index, 'errors': serializer.errors})
                continue

            try:
                if existing is not None:
                    reading = self.update(serializer)
                    result['updated'].append(WaterQualityInputSerializer(reading, context=context).data)
                else:
                    extra = {'id': row_id} if row_id is not None else {}
                    reading = self.create(serializer, **extra)
                    result['created'].append(WaterQualityInputSerializer(reading, context=context).data)
            except FarmOperationError as e:
                result['errors'].append({'index': index, 'errors': {'error': e.message}})

        logger.info(
            f"Water quality sync for farm {self.farm.id}: {len(result['created'])} created, "
            f"{len(result['updated'])} updated, {len(result['conflicts'])} conflicts, "
            f"{len(result['errors'])} errors"
        )
        return result

    # =========================================================================
    # REPORTING
    # =========================================================================

    def summarize(self, readings, parameters, start_date, end_date) -> Dict[str, Any]:
        averages = readings.aggregate(**{name: Avg(name) for name in parameters})
        return {
            'total_records': readings.count(),
            'date_range': {'start_date': start_date, 'end_date': end_date},
            'unique_ponds': readings.values('pond_id').distinct().count(),
            'average_values': {name: _round(value) for name, value in averages.items()},
        }

    def trends(self, readings, group_by='day') -> List[Dict[str, Any]]:
        trunc = TRUNC_FUNCTIONS.get(group_by)
        if trunc is None:
            raise FarmOperationError('group_by must be one of: day, week, month')

        rows = (
            readings
            .annotate(period=trunc('date'))
            .values('period')
            .annotate(
                readings=Count('id'),
                quality_issues=Count(
                    'id',
                    filter=Q(overall_quality__in=[QualityRating.POOR, QualityRating.CRITICAL])
                ),
                avg_quality_score=Avg('quality_score'),
                **{f'avg_{name}': Avg(name) for name in CORE_PARAMETERS + ['ammonia', 'nitrite']}
            )
            .order_by('period')
        )

        return [
            {
                'period': row['period'],
                'readings': row['readings'],
                'quality_issues': row['quality_issues'],
                'avg_quality_score': _round(row['avg_quality_score'], 1),
                **{
                    key: _round(value)
                    for key, value in row.items()
                    if key.startswith('avg_') and key != 'avg_quality_score'
                },
            }
            for row in rows
        ]

    def statistics(self, readings) -> Dict[str, Any]:
        """avg, min, max, population standard deviation and count per parameter."""
        result = {}
        for name in WATER_PARAMETERS:
            values = [float(v) for v in readings.values_list(name, flat=True) if v is not None]
            if not values:
                result[name] = {'avg': None, 'min': None, 'max': None, 'std_dev': None, 'count': 0}
                continue
            result[name] = {
                'avg': round(stats.fmean(values), 2),
                'min': round(min(values), 2),
                'max': round(max(values), 2),
                'std_dev': round(stats.pstdev(values), 2),
                'count': len(values),
            }
        return result
