"""
Farm Dashboard Integration Tests

SCENARIO:
=========
Mid-season the owner opens the dashboard for Season 2024: two active
ponds, a month of feeding and water tests, one growth sampling and a
partial harvest. KPIs are cached until the next record lands. At the end
of the week the owner downloads the season report as JSON and CSV.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework import status

from events.models import Event, EventType
from feeding.models import FeedInput
from growth.models import GrowthSampling
from water_quality.models import WaterQualityInput

pytestmark = pytest.mark.django_db


@pytest.fixture
def season_records(farm, season, pond, second_pond, feed_item, stocking_event, today):
    yesterday = today - timedelta(days=1)
    for day, time, quantity in ((yesterday, '07:00', '15'), (yesterday, '17:00', '15'), (today, '07:00', '10')):
        FeedInput.objects.create(
            farm=farm, season=season, pond=pond, inventory_item=feed_item,
            date=day, time=time, quantity=Decimal(quantity),
        )
    GrowthSampling.objects.create(
        farm=farm, season=season, pond=pond, date=today, time='09:00',
        total_weight=Decimal('1.000'), total_count=100,
    )
    for day, ph, do in ((yesterday, '7.00', '4.00'), (today, '7.20', '4.50')):
        WaterQualityInput.objects.create(
            farm=farm, season=season, pond=pond, date=day, time='06:00',
            ph=Decimal(ph), dissolved_oxygen=Decimal(do),
            temperature=Decimal('28.0'), salinity=Decimal('20.00'),
        )
    Event.objects.create(
        farm=farm, season=season, pond=pond, event_type=EventType.PARTIAL_HARVEST, date=today,
        details={'harvest_date': today.isoformat(), 'harvest_weight': 500, 'average_weight': 20},
    )


class TestKPIs:

    def test_season_id_required(self, admin_client):
        response = admin_client.get('/api/farm/kpis/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'season_id is required'}

    def test_unknown_or_foreign_season(self, admin_client, other_farm_client, season):
        assert admin_client.get('/api/farm/kpis/?season_id=nope').status_code == 404

        response = other_farm_client.get(f'/api/farm/kpis/?season_id={season.id}')
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Season not found'}

    def test_values(self, admin_client, season, season_records):
        data = admin_client.get(f'/api/farm/kpis/?season_id={season.id}').data

        assert data['total_ponds'] == 2
        assert data['active_ponds'] == 2
        assert data['inactive_ponds'] == 0
        assert data['pond_utilization'] == 100.0
        assert data['total_feed_consumed'] == 40.0
        assert data['total_feed_entries'] == 3
        assert data['total_biomass'] == 1.0
        assert data['average_fcr'] == 40.0
        assert data['avg_shrimp_weight'] == 0.01
        assert data['total_capacity'] == 18000
        assert data['survival_rate'] == 0.6
        assert data['water_quality']['avg_ph'] == 7.1
        assert data['water_quality']['total_readings'] == 2
        assert data['total_harvests'] == 1
        assert data['total_harvest_weight'] == 500.0
        assert data['avg_harvest_weight'] == 20.0

    def test_empty_season(self, admin_client, season):
        data = admin_client.get(f'/api/farm/kpis/?season_id={season.id}').data

        assert data['total_ponds'] == 0
        assert data['average_fcr'] is None
        assert data['survival_rate'] is None
        assert data['pond_utilization'] == 0.0

    def test_cache_refreshes_after_new_record(self, admin_client, farm, season, pond, feed_item,
                                              season_records, today):
        url = f'/api/farm/kpis/?season_id={season.id}'
        assert admin_client.get(url).data['total_feed_consumed'] == 40.0

        FeedInput.objects.create(
            farm=farm, season=season, pond=pond, inventory_item=feed_item,
            date=today, time='17:00', quantity=Decimal('5'),
        )
        assert admin_client.get(url).data['total_feed_consumed'] == 45.0

    def test_warm_task(self, season, season_records):
        from dashboards.cache import get_cached_kpis
        from dashboards.tasks import warm_farm_kpis

        result = warm_farm_kpis()

        assert result['status'] == 'success'
        assert result['seasons_warmed'] == 1
        assert get_cached_kpis(season.farm_id, season.id)['total_feed_consumed'] == 40.0


class TestTrends:

    def test_water_quality(self, admin_client, season, season_records, today):
        response = admin_client.get(
            f'/api/farm/trends/water-quality/?season_id={season.id}&time_range=week'
        )

        data = response.data
        assert data['time_range'] == 'week'
        assert data['end_date'] == today
        assert [row['reading_count'] for row in data['trends']] == [1, 1]
        assert data['trends'][0]['ph']['avg'] == 7.0
        indicators = data['summary']['quality_indicators']
        assert indicators['optimal_ph'] == {'count': 0, 'percentage': 0.0}
        assert indicators['optimal_temperature'] == {'count': 2, 'percentage': 100.0}

    def test_unknown_range_falls_back_to_month(self, admin_client, season, today):
        data = admin_client.get(
            f'/api/farm/trends/water-quality/?season_id={season.id}&time_range=decade'
        ).data

        assert data['time_range'] == 'month'
        assert data['start_date'] == today - timedelta(days=30)

    def test_feed_consumption(self, admin_client, season, season_records):
        data = admin_client.get(f'/api/farm/trends/feed-consumption/?season_id={season.id}').data

        first_day = data['trends'][0]
        assert first_day['total_quantity'] == 30.0
        assert first_day['total_feedings'] == 2
        assert first_day['feed_types'] == [{
            'feed_type': 'Grower Pellets',
            'quantity': 30.0,
            'cost': 75.0,
            'feeding_count': 2,
            'avg_quantity_per_feeding': 15.0,
        }]
        assert data['summary']['total_cost'] == 100.0
        assert data['summary']['avg_cost_per_kg'] == 2.5


class TestReport:

    def test_json_report(self, admin_client, season, season_records, farm_admin):
        response = admin_client.get(f'/api/farm/report/?season_id={season.id}')

        assert response.status_code == status.HTTP_200_OK
        report = response.data
        assert report['report_metadata']['season_name'] == 'Season 2024'
        assert report['report_metadata']['generated_by'] == farm_admin.username
        assert report['executive_summary']['total_investment'] == 100.0
        assert report['executive_summary']['total_production'] == 500.0
        assert [pond['name'] for pond in report['appendices']['pond_details']] == ['Pond A', 'Pond B']

        issues = {(rec['category'], rec['priority']) for rec in report['recommendations']}
        assert issues == {
            ('Water Quality', 'High'),
            ('Feed Management', 'Medium'),
        }
        assert len(report['recommendations']) == 3

    def test_csv_report(self, admin_client, season, season_records):
        response = admin_client.get(f'/api/farm/report/?season_id={season.id}&format=csv')

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'text/csv'
        assert f'farm_report_{season.id}_' in response['Content-Disposition']
        lines = response.content.decode().splitlines()
        assert lines[0] == 'Farm Report Summary'
        assert 'Total Ponds,2' in lines
        assert 'Recommendations' in lines

    def test_invalid_format(self, admin_client, season):
        response = admin_client.get(f'/api/farm/report/?season_id={season.id}&format=xml')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Invalid format. Use one of: json, csv'}

    def test_viewer_can_read(self, viewer_client, season):
        assert viewer_client.get(f'/api/farm/report/?season_id={season.id}').status_code == 200
