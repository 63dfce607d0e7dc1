"""
Pond Comparison Service

Side-by-side metrics for two ponds of a farm:
1. Current mode - Same calendar window, differences matched by date
2. Historical mode - Each pond's whole season, differences matched by
   day of culture (days since the season started, plus one)
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Any, List

from farms.exceptions import FarmOperationError, RecordNotFound
from farms.i18n import translate
from feeding.models import FeedInput
from growth.models import GrowthSampling
from ponds.models import Pond
from water_quality.models import WaterQualityInput

logger = logging.getLogger(__name__)

WATER_QUALITY_METRICS = {
    'temperature': 'temperature',
    'ph': 'ph',
    'dissolved_oxygen': 'dissolved_oxygen',
    'ammonia': 'ammonia',
}

METRICS = {
    'temperature': 'Temperature',
    'ph': 'pH',
    'dissolved_oxygen': 'Dissolved Oxygen',
    'ammonia': 'Ammonia',
    'feed_consumption': 'Feed Consumption',
    'average_weight': 'Average Weight',
}


def _as_float(value):
    return float(value) if isinstance(value, Decimal) else value


class PondComparisonService:
    """
    Usage:
        service = PondComparisonService(farm, language='en')
        data = service.compare_date_range(pond_a_id, pond_b_id, metrics, start, end)
        data = service.compare_historical(pond_a_id, pond_b_id, metrics)
        rows = service.export_rows(data, mode='historical')
    """

    def __init__(self, farm, language='en'):
        self.farm = farm
        self.language = language

    def get_pond(self, pond_id):
        pond = Pond.objects.filter(farm=self.farm, pk=pond_id).select_related('season').first()
        if pond is None:
            raise RecordNotFound('One or both ponds not found')
        return pond

    def describe_pond(self, pond) -> Dict[str, Any]:
        season = pond.season
        return {
            'id': str(pond.id),
            'name': translate(pond.name, self.language),
            'season': {
                'id': str(season.id),
                'name': translate(season.name, self.language),
                'start_date': season.start_date,
                'end_date': season.end_date,
            },
        }

    # =========================================================================
    # SERIES
    # =========================================================================

    def get_series(self, pond, metric, start_date, end_date) -> List[Dict[str, Any]]:
        """Raw points of one metric for one pond, oldest first."""
        if metric in WATER_QUALITY_METRICS:
            field = WATER_QUALITY_METRICS[metric]
            rows = WaterQualityInput.objects.filter(
                pond=pond, date__gte=start_date, date__lte=end_date
            ).order_by('date', 'time').values_list('date', field)
            return [
                {'timestamp': day, 'value': _as_float(value)}
                for day, value in rows if value is not None
            ]

        if metric == 'feed_consumption':
            rows = FeedInput.objects.filter(
                pond=pond, date__gte=start_date, date__lte=end_date
            ).order_by('date', 'time').values_list('date', 'quantity')
            return [{'timestamp': day, 'value': _as_float(value)} for day, value in rows]

        if metric == 'average_weight':
            rows = GrowthSampling.objects.filter(
                pond=pond, date__gte=start_date, date__lte=end_date
            ).order_by('date', 'time').values_list('date', 'total_weight', 'total_count')
            # grams per shrimp
            return [
                {
                    'timestamp': day,
                    'value': round(float(weight) * 1000 / count, 3) if count else 0,
                }
                for day, weight, count in rows
            ]

        raise FarmOperationError(f'Unknown metric: {metric}')

    @staticmethod
    def daily_values(metric, points) -> Dict[Any, float]:
        """Collapse points to one value per date: feed is summed, readings averaged."""
        grouped = defaultdict(list)
        for point in points:
            grouped[point['timestamp']].append(point['value'])
        if metric == 'feed_consumption':
            return {day: sum(values) for day, values in grouped.items()}
        return {day: sum(values) / len(values) for day, values in grouped.items()}

    @staticmethod
    def differences(values_a: Dict, values_b: Dict, key: str) -> List[Dict[str, Any]]:
        return [
            {
                key: point,
                'pond_a_value': round(values_a[point], 3),
                'pond_b_value': round(values_b[point], 3),
                'difference': round(values_a[point] - values_b[point], 3),
            }
            for point in sorted(set(values_a) & set(values_b))
        ]

    # =========================================================================
    # COMPARISONS
    # =========================================================================

    def _load_ponds(self, pond_a_id, pond_b_id):
        if str(pond_a_id) == str(pond_b_id):
            raise FarmOperationError('Cannot compare a pond with itself')
        return self.get_pond(pond_a_id), self.get_pond(pond_b_id)

    def compare_date_range(self, pond_a_id, pond_b_id, metrics, start_date, end_date) -> Dict[str, Any]:
        pond_a, pond_b = self._load_ponds(pond_a_id, pond_b_id)

        for label, pond in (('Pond A', pond_a), ('Pond B', pond_b)):
            season = pond.season
            if start_date < season.start_date or end_date > season.end_date:
                raise FarmOperationError(
                    f"Date range is outside of {label}'s season ({translate(season.name, self.language)})"
                )

        data = {
            'pond_a': self.describe_pond(pond_a),
            'pond_b': self.describe_pond(pond_b),
            'period': {'start_date': start_date, 'end_date': end_date},
            'metrics': {},
        }
        for metric in metrics:
            series_a = self.get_series(pond_a, metric, start_date, end_date)
            series_b = self.get_series(pond_b, metric, start_date, end_date)
            data['metrics'][metric] = {
                'pond_a_data': series_a,
                'pond_b_data': series_b,
                'differences': self.differences(
                    self.daily_values(metric, series_a),
                    self.daily_values(metric, series_b),
                    'date'
                ),
            }

        logger.info(f"Compared ponds {pond_a.id} and {pond_b.id} from {start_date} to {end_date}")
        return data

    def compare_historical(self, pond_a_id, pond_b_id, metrics) -> Dict[str, Any]:
        pond_a, pond_b = self._load_ponds(pond_a_id, pond_b_id)
        season_a, season_b = pond_a.season, pond_b.season

        data = {
            'pond_a': self.describe_pond(pond_a),
            'pond_b': self.describe_pond(pond_b),
            'period': {
                'pond_a_start': season_a.start_date,
                'pond_a_end': season_a.end_date,
                'pond_b_start': season_b.start_date,
                'pond_b_end': season_b.end_date,
            },
            'metrics': {},
        }
        for metric in metrics:
            series_a = self.get_series(pond_a, metric, season_a.start_date, season_a.end_date)
            series_b = self.get_series(pond_b, metric, season_b.start_date, season_b.end_date)
            data['metrics'][metric] = {
                'pond_a_data': series_a,
                'pond_b_data': series_b,
                'differences': self.differences(
                    self.by_day_of_culture(metric, series_a, season_a.start_date),
                    self.by_day_of_culture(metric, series_b, season_b.start_date),
                    'day'
                ),
            }

        logger.info(f"Compared ponds {pond_a.id} and {pond_b.id} across their seasons")
        return data

    def by_day_of_culture(self, metric, points, season_start) -> Dict[int, float]:
        return {
            (day - season_start).days + 1: value
            for day, value in self.daily_values(metric, points).items()
        }

    # =========================================================================
    # EXPORT
    # =========================================================================

    @staticmethod
    def export_rows(data: Dict[str, Any], mode: str) -> List[List[Any]]:
        key = 'date' if mode == 'current' else 'day'
        rows = [['Date' if key == 'date' else 'Day', 'Metric', 'Pond A Value', 'Pond B Value', 'Difference']]
        for metric, series in data['metrics'].items():
            for diff in series['differences']:
                point = diff[key]
                rows.append([
                    point.isoformat() if key == 'date' else point,
                    METRICS[metric],
                    diff['pond_a_value'],
                    diff['pond_b_value'],
                    diff['difference'],
                ])
        return rows
