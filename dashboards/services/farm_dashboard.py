"""
Farm Dashboard Service

Season-level analytics for a single farm:
1. KPIs - Ponds, feed, growth, water quality, FCR, harvests, utilization
2. Water Quality Trends - Daily averages and optimal-range indicators
3. Feed Consumption Trends - Daily quantities per feed item
4. Season Report - Summary, detailed analysis and recommendations
"""

import logging
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from typing import Dict, Any, List, Optional

from django.db.models import Sum, Count, Avg, Min, Max, Q
from django.utils import timezone

from events.models import Event, HARVEST_TYPES
from feeding.models import FeedInput
from farms.i18n import translate
from growth.models import GrowthSampling
from ponds.models import Pond, PondStatus
from water_quality.models import WaterQualityInput
from water_quality.scoring import optimal_q
from ..cache import get_cached_kpis, set_cached_kpis

logger = logging.getLogger(__name__)

TIME_RANGES = {
    'week': 7,
    'month': 30,
    'quarter': 90,
}
DEFAULT_TIME_RANGE = 'month'


def _round(value, places=2):
    return round(float(value), places) if value is not None else None


def _percentage(part, whole, places=1):
    if not whole:
        return 0.0
    return round(part / whole * 100, places)


def _detail_number(details, key):
    try:
        return float((details or {}).get(key))
    except (TypeError, ValueError):
        return None


class FarmDashboardService:
    """
    Dashboard analytics for one farm and season.

    Usage:
        from dashboards.services.farm_dashboard import FarmDashboardService

        service = FarmDashboardService(farm, season)
        kpis = service.get_kpis()
        trends = service.get_water_quality_trends('week')
        report = service.get_report(language='en', generated_by='admin')
    """

    def __init__(self, farm, season, use_cache: bool = True):
        self.farm = farm
        self.season = season
        self.use_cache = use_cache

    def _scoped(self, model):
        return model.objects.filter(farm=self.farm, season=self.season)

    def _period(self, time_range):
        days = TIME_RANGES.get(time_range, TIME_RANGES[DEFAULT_TIME_RANGE])
        end_date = timezone.localdate()
        return end_date - timedelta(days=days), end_date

    # =========================================================================
    # KPIs
    # =========================================================================

    def get_kpis(self) -> Dict[str, Any]:
        if self.use_cache:
            cached = get_cached_kpis(self.farm.id, self.season.id)
            if cached is not None:
                return cached

        kpis = self._compute_kpis()
        set_cached_kpis(self.farm.id, self.season.id, kpis)
        return kpis

    def _compute_kpis(self) -> Dict[str, Any]:
        ponds = self._scoped(Pond)
        pond_counts = ponds.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(status=PondStatus.ACTIVE)),
            completed=Count('id', filter=Q(status=PondStatus.COMPLETED)),
            total_capacity=Sum('capacity'),
            total_area=Sum('size'),
        )
        total_ponds = pond_counts['total']
        active_ponds = pond_counts['active']
        completed_ponds = pond_counts['completed']
        total_capacity = pond_counts['total_capacity'] or 0

        feed = self._scoped(FeedInput).aggregate(
            total=Sum('quantity'), entries=Count('id'), average=Avg('quantity')
        )
        total_feed = float(feed['total'] or Decimal('0'))

        samplings = list(self._scoped(GrowthSampling).values_list('total_weight', 'total_count'))
        total_biomass = float(sum((weight for weight, _ in samplings), Decimal('0')))
        total_count = sum(count for _, count in samplings)
        weights = [float(weight) / count for weight, count in samplings if count]
        avg_weight = sum(weights) / len(weights) if weights else 0

        water = self._scoped(WaterQualityInput).aggregate(
            avg_ph=Avg('ph'),
            avg_dissolved_oxygen=Avg('dissolved_oxygen'),
            avg_temperature=Avg('temperature'),
            avg_salinity=Avg('salinity'),
            total_readings=Count('id'),
        )

        harvests = self.get_harvest_summary()

        return {
            'season_id': str(self.season.id),
            'total_ponds': total_ponds,
            'active_ponds': active_ponds,
            'completed_ponds': completed_ponds,
            'inactive_ponds': total_ponds - active_ponds - completed_ponds,

            'total_feed_consumed': round(total_feed, 3),
            'total_feed_entries': feed['entries'],
            'avg_daily_feed': _round(feed['average'], 3) or 0,
            'average_fcr': round(total_feed / total_biomass, 2) if total_biomass > 0 else None,

            'total_samplings': len(samplings),
            'avg_shrimp_weight': round(avg_weight, 6),
            'total_biomass': round(total_biomass, 3),
            'total_shrimp_count': total_count,

            'water_quality': {
                'avg_ph': _round(water['avg_ph']),
                'avg_dissolved_oxygen': _round(water['avg_dissolved_oxygen']),
                'avg_temperature': _round(water['avg_temperature']),
                'avg_salinity': _round(water['avg_salinity']),
                'total_readings': water['total_readings'],
            },

            'total_capacity': total_capacity,
            'total_area': _round(pond_counts['total_area'] or 0),

            'total_harvests': harvests['count'],
            'total_harvest_weight': harvests['total_weight'],
            'avg_harvest_weight': harvests['average_weight'],

            'pond_utilization': _percentage(active_ponds, total_ponds),
            'survival_rate': (
                _percentage(total_count, total_capacity) if total_count and total_capacity else None
            ),
        }

    def get_harvest_summary(self) -> Dict[str, Any]:
        harvests = self._scoped(Event).filter(event_type__in=HARVEST_TYPES).only('details')
        weights, average_weights = [], []
        for event in harvests:
            weight = _detail_number(event.details, 'harvest_weight')
            if weight is not None:
                weights.append(weight)
            average_weight = _detail_number(event.details, 'average_weight')
            if average_weight is not None:
                average_weights.append(average_weight)

        return {
            'count': harvests.count(),
            'total_weight': round(sum(weights), 2),
            'average_weight': round(sum(average_weights) / len(average_weights), 2) if average_weights else 0,
        }

    # =========================================================================
    # TRENDS
    # =========================================================================

    def get_water_quality_trends(self, time_range: str = DEFAULT_TIME_RANGE) -> Dict[str, Any]:
        start_date, end_date = self._period(time_range)
        readings = self._scoped(WaterQualityInput).filter(date__gte=start_date, date__lte=end_date)

        aggregates = {}
        for name in ('ph', 'dissolved_oxygen', 'temperature', 'salinity'):
            aggregates[f'avg_{name}'] = Avg(name)
            aggregates[f'min_{name}'] = Min(name)
            aggregates[f'max_{name}'] = Max(name)

        daily = readings.values('date').annotate(reading_count=Count('id'), **aggregates).order_by('date')
        trends = [
            {
                'date': row['date'],
                **{
                    name: {
                        'avg': _round(row[f'avg_{name}']),
                        'min': _round(row[f'min_{name}']),
                        'max': _round(row[f'max_{name}']),
                    }
                    for name in ('ph', 'dissolved_oxygen', 'temperature', 'salinity')
                },
                'reading_count': row['reading_count'],
            }
            for row in daily
        ]

        overall = readings.aggregate(
            total=Count('id'),
            avg_ph=Avg('ph'),
            avg_dissolved_oxygen=Avg('dissolved_oxygen'),
            avg_temperature=Avg('temperature'),
            avg_salinity=Avg('salinity'),
            optimal_ph=Count('id', filter=optimal_q('ph')),
            optimal_do=Count('id', filter=optimal_q('dissolved_oxygen')),
            optimal_temperature=Count('id', filter=optimal_q('temperature')),
        )
        total = overall['total']

        return {
            'time_range': time_range if time_range in TIME_RANGES else DEFAULT_TIME_RANGE,
            'start_date': start_date,
            'end_date': end_date,
            'trends': trends,
            'summary': {
                'total_readings': total,
                'averages': {
                    'ph': _round(overall['avg_ph']),
                    'dissolved_oxygen': _round(overall['avg_dissolved_oxygen']),
                    'temperature': _round(overall['avg_temperature']),
                    'salinity': _round(overall['avg_salinity']),
                },
                'quality_indicators': {
                    'optimal_ph': {
                        'count': overall['optimal_ph'],
                        'percentage': _percentage(overall['optimal_ph'], total),
                    },
                    'optimal_dissolved_oxygen': {
                        'count': overall['optimal_do'],
                        'percentage': _percentage(overall['optimal_do'], total),
                    },
                    'optimal_temperature': {
                        'count': overall['optimal_temperature'],
                        'percentage': _percentage(overall['optimal_temperature'], total),
                    },
                },
            },
        }

    def get_feed_consumption_trends(self, time_range: str = DEFAULT_TIME_RANGE,
                                    language: str = 'en') -> Dict[str, Any]:
        start_date, end_date = self._period(time_range)
        feed_inputs = self._scoped(FeedInput).filter(
            date__gte=start_date, date__lte=end_date
        ).select_related('inventory_item')

        days = defaultdict(lambda: defaultdict(lambda: {'quantity': Decimal('0'), 'cost': Decimal('0'), 'feeding_count': 0}))
        for feed_input in feed_inputs:
            item = feed_input.inventory_item
            entry = days[feed_input.date][translate(item.item_name, language) or 'Unknown']
            entry['quantity'] += feed_input.quantity
            entry['cost'] += feed_input.quantity * item.cost_per_unit
            entry['feeding_count'] += 1

        trends = []
        total_quantity, total_cost, total_feedings = Decimal('0'), Decimal('0'), 0
        for day in sorted(days):
            feed_types = [
                {
                    'feed_type': name,
                    'quantity': _round(entry['quantity']),
                    'cost': _round(entry['cost']),
                    'feeding_count': entry['feeding_count'],
                    'avg_quantity_per_feeding': _round(entry['quantity'] / entry['feeding_count']),
                }
                for name, entry in days[day].items()
            ]
            day_quantity = sum((entry['quantity'] for entry in days[day].values()), Decimal('0'))
            day_cost = sum((entry['cost'] for entry in days[day].values()), Decimal('0'))
            day_feedings = sum(entry['feeding_count'] for entry in days[day].values())
            trends.append({
                'date': day,
                'total_quantity': _round(day_quantity),
                'total_cost': _round(day_cost),
                'total_feedings': day_feedings,
                'avg_feed_per_session': _round(day_quantity / day_feedings) if day_feedings else 0,
                'feed_types': feed_types,
            })
            total_quantity += day_quantity
            total_cost += day_cost
            total_feedings += day_feedings

        return {
            'time_range': time_range if time_range in TIME_RANGES else DEFAULT_TIME_RANGE,
            'start_date': start_date,
            'end_date': end_date,
            'trends': trends,
            'summary': {
                'total_quantity': _round(total_quantity),
                'total_cost': _round(total_cost),
                'total_feedings': total_feedings,
                'avg_quantity_per_feeding': _round(total_quantity / total_feedings) if total_feedings else 0,
                'avg_cost_per_kg': _round(total_cost / total_quantity) if total_quantity else 0,
            },
        }

    # =========================================================================
    # REPORT
    # =========================================================================

    def get_recommendations(self, kpis: Dict[str, Any]) -> List[Dict[str, Any]]:
        recommendations = []
        water = kpis['water_quality']

        avg_ph = water['avg_ph']
        if avg_ph is not None and (avg_ph < 7.5 or avg_ph > 8.5):
            recommendations.append({
                'category': 'Water Quality',
                'priority': 'High',
                'issue': 'pH levels outside optimal range (7.5-8.5)',
                'recommendation': 'Monitor and adjust pH levels using appropriate chemicals',
                'current_value': avg_ph,
                'target_range': '7.5-8.5',
            })

        avg_do = water['avg_dissolved_oxygen']
        if avg_do is not None and avg_do < 5:
            recommendations.append({
                'category': 'Water Quality',
                'priority': 'High',
                'issue': 'Low dissolved oxygen levels',
                'recommendation': 'Increase aeration or reduce stocking density',
                'current_value': avg_do,
                'target_range': '>5 mg/L',
            })

        fcr = kpis['average_fcr']
        if fcr is not None and fcr > 2.0:
            recommendations.append({
                'category': 'Feed Management',
                'priority': 'Medium',
                'issue': 'High Feed Conversion Ratio',
                'recommendation': 'Review feeding schedule and feed quality',
                'current_value': fcr,
                'target_range': '<1.8',
            })

        utilization = kpis['pond_utilization']
        if utilization < 80:
            recommendations.append({
                'category': 'Pond Management',
                'priority': 'Low',
                'issue': 'Low pond utilization rate',
                'recommendation': 'Consider activating more ponds or reassess pond capacity',
                'current_value': f'{utilization:.1f}%',
                'target_range': '>80%',
            })

        return recommendations

    def get_report(self, language: str = 'en', generated_by: Optional[str] = None) -> Dict[str, Any]:
        kpis = self._compute_kpis()
        ponds = list(self._scoped(Pond).order_by('created_at'))

        feed_by_item = [
            {
                'feed_type': translate(row['inventory_item__item_name'], language) or 'Unknown',
                'total_quantity': _round(row['total_quantity']),
                'total_cost': _round((row['total_quantity'] or 0) * (row['inventory_item__cost_per_unit'] or 0)),
                'feeding_count': row['feeding_count'],
            }
            for row in self._scoped(FeedInput)
            .values('inventory_item_id', 'inventory_item__item_name', 'inventory_item__cost_per_unit')
            .annotate(total_quantity=Sum('quantity'), feeding_count=Count('id'))
            .order_by('-total_quantity')
        ]
        total_feed_cost = round(sum(row['total_cost'] or 0 for row in feed_by_item), 2)

        events_by_type = list(
            self._scoped(Event).values('event_type').annotate(count=Count('id')).order_by('-count')
        )

        return {
            'report_metadata': {
                'generated_at': timezone.now(),
                'season_id': str(self.season.id),
                'season_name': translate(self.season.name, language),
                'generated_by': generated_by or 'System',
                'report_version': '1.0',
            },
            'executive_summary': {
                'season_period': f'{self.season.start_date} to {self.season.end_date}',
                'total_ponds': kpis['total_ponds'],
                'active_ponds': kpis['active_ponds'],
                'completion_rate': _percentage(kpis['completed_ponds'], kpis['total_ponds']),
                'total_investment': total_feed_cost,
                'total_production': kpis['total_harvest_weight'],
                'overall_fcr': kpis['average_fcr'],
            },
            'detailed_analysis': {
                'pond_management': {
                    'total_ponds': len(ponds),
                    'pond_distribution': {
                        'active': sum(1 for p in ponds if p.status == PondStatus.ACTIVE),
                        'completed': sum(1 for p in ponds if p.status == PondStatus.COMPLETED),
                        'inactive': sum(1 for p in ponds if p.status == PondStatus.INACTIVE),
                    },
                    'total_area': kpis['total_area'],
                    'total_capacity': kpis['total_capacity'],
                },
                'feed_management': {
                    'feed_types': feed_by_item,
                    'total_feed_consumed': kpis['total_feed_consumed'],
                    'total_feed_cost': total_feed_cost,
                    'total_feedings': kpis['total_feed_entries'],
                },
                'water_quality_management': {
                    'total_readings': kpis['water_quality']['total_readings'],
                    'average_parameters': {
                        'ph': kpis['water_quality']['avg_ph'],
                        'dissolved_oxygen': kpis['water_quality']['avg_dissolved_oxygen'],
                        'temperature': kpis['water_quality']['avg_temperature'],
                        'salinity': kpis['water_quality']['avg_salinity'],
                    },
                },
                'growth_performance': {
                    'total_samplings': kpis['total_samplings'],
                    'average_shrimp_weight': kpis['avg_shrimp_weight'],
                    'total_biomass': kpis['total_biomass'],
                },
                'events_summary': {
                    'event_types': events_by_type,
                    'total_events': sum(row['count'] for row in events_by_type),
                },
            },
            'recommendations': self.get_recommendations(kpis),
            'appendices': {
                'pond_details': [
                    {
                        'id': str(pond.id),
                        'name': translate(pond.name, language),
                        'size': float(pond.size),
                        'capacity': pond.capacity,
                        'status': pond.status,
                    }
                    for pond in ponds
                ],
            },
        }

    @staticmethod
    def flatten_report(report: Dict[str, Any]) -> List[List[Any]]:
        """Rows for the CSV rendition of a report."""
        meta = report['report_metadata']
        summary = report['executive_summary']
        rows = [
            ['Farm Report Summary'],
            ['Generated At', meta['generated_at'].isoformat()],
            ['Season', meta['season_name']],
            [],
            ['Executive Summary'],
            ['Total Ponds', summary['total_ponds']],
            ['Active Ponds', summary['active_ponds']],
            ['Completion Rate (%)', summary['completion_rate']],
            ['Total Investment', summary['total_investment']],
            ['Total Production', summary['total_production']],
            ['Overall FCR', summary['overall_fcr'] if summary['overall_fcr'] is not None else ''],
            [],
            ['Recommendations'],
        ]
        for rec in report['recommendations']:
            rows.append([rec['category'], rec['priority'], rec['issue'], rec['recommendation']])
        return rows
