"""
Pond Service

Season-level pond copies, per-pond KPIs and the full-cycle log of a pond.
"""

import logging
from decimal import Decimal
from typing import Any, Dict

from django.db import transaction
from django.db.models import Sum, Count
from django.utils import timezone

from farms.exceptions import FarmOperationError
from .models import Pond, PondStatus

logger = logging.getLogger(__name__)


@transaction.atomic
def copy_ponds(source_season, target_season) -> int:
    """
    Copy the ponds of ``source_season`` into ``target_season``.

    Names, sizes and capacities carry over; status starts again at Planning.
    """
    if Pond.objects.filter(season=target_season).exists():
        raise FarmOperationError('Target season already has ponds')

    source_ponds = list(Pond.objects.filter(season=source_season).order_by('created_at'))
    if not source_ponds:
        raise FarmOperationError('Source season has no ponds to copy')

    Pond.objects.bulk_create([
        Pond(
            farm_id=target_season.farm_id,
            season=target_season,
            name=dict(pond.name) if isinstance(pond.name, dict) else pond.name,
            size=pond.size,
            capacity=pond.capacity,
            status=PondStatus.PLANNING,
        )
        for pond in source_ponds
    ])
    logger.info(
        f"Copied {len(source_ponds)} ponds from season {source_season.id} "
        f"to season {target_season.id}"
    )
    return len(source_ponds)


class PondKPIService:
    """
    Performance figures of a single pond in its current season.

    Usage:
        kpis = PondKPIService(pond).get_kpis()
    """

    def __init__(self, pond):
        self.pond = pond

    def _stocked_count(self):
        from events.models import Event, EventType

        total = 0
        for event in Event.objects.filter(
            pond=self.pond, season_id=self.pond.season_id, event_type=EventType.STOCKING
        ).only('details'):
            try:
                total += int((event.details or {}).get('initial_count') or 0)
            except (TypeError, ValueError):
                continue
        return total

    def get_kpis(self) -> Dict[str, Any]:
        from events.services import stocking_date_for
        from growth.models import GrowthSampling
        from water_quality.models import WaterQualityInput

        pond = self.pond
        feed = pond.feed_inputs.filter(season_id=pond.season_id).aggregate(
            total=Sum('quantity'), entries=Count('id')
        )
        total_feed = feed['total'] or Decimal('0')

        latest_sampling = GrowthSampling.objects.filter(
            pond=pond, season_id=pond.season_id
        ).order_by('-date', '-time').first()

        latest_reading = WaterQualityInput.objects.filter(
            pond=pond, season_id=pond.season_id
        ).order_by('-date', '-time').first()

        stocked_on = stocking_date_for(pond)
        days_of_culture = (timezone.localdate() - stocked_on).days + 1 if stocked_on else None

        stocked_count = self._stocked_count()
        population = stocked_count or pond.capacity

        average_weight = latest_sampling.average_weight if latest_sampling else None
        biomass = None
        if average_weight:
            biomass = round(float(average_weight) * population, 2)

        fcr = None
        if biomass:
            fcr = round(float(total_feed) / biomass, 2)

        survival_rate = None
        if latest_sampling and stocked_count:
            # sample count relative to stocked count, capped at 100%
            survival_rate = round(min(latest_sampling.total_count / stocked_count * 100, 100.0), 1)

        return {
            'pond_id': str(pond.id),
            'season_id': str(pond.season_id),
            'total_feed': float(total_feed),
            'feed_entries': feed['entries'],
            'latest_average_weight_grams': (
                latest_sampling.average_weight_grams if latest_sampling else None
            ),
            'latest_sampling_date': latest_sampling.date if latest_sampling else None,
            'latest_water_quality': {
                'date': latest_reading.date,
                'time': latest_reading.time,
                'ph': float(latest_reading.ph),
                'dissolved_oxygen': float(latest_reading.dissolved_oxygen),
                'temperature': float(latest_reading.temperature),
                'salinity': float(latest_reading.salinity),
                'quality_score': latest_reading.quality_score,
                'overall_quality': latest_reading.overall_quality,
            } if latest_reading else None,
            'stocking_date': stocked_on,
            'days_of_culture': days_of_culture,
            'stocked_count': stocked_count,
            'estimated_biomass': biomass,
            'fcr': fcr,
            'survival_rate': survival_rate,
        }


def pond_full_cycle_logs(pond) -> Dict[str, Any]:
    """Every record of a pond, each list in date order."""
    from events.models import Event
    from feeding.models import FeedInput
    from growth.models import GrowthSampling
    from water_quality.models import WaterQualityInput

    feed_inputs = FeedInput.objects.filter(pond=pond).select_related('inventory_item').order_by('date', 'time')
    samplings = GrowthSampling.objects.filter(pond=pond).order_by('date', 'time')
    readings = WaterQualityInput.objects.filter(pond=pond).order_by('date', 'time')
    events = Event.objects.filter(pond=pond).order_by('date', 'created_at')

    return {
        'feed_inputs': list(feed_inputs),
        'growth_samplings': list(samplings),
        'water_quality': list(readings),
        'events': list(events),
    }
