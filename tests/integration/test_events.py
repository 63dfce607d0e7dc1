"""
Farm Event Integration Tests

SCENARIO:
=========
Over a season the farm logs pond preparation, stocking from a nursery
batch, feeding and lime application, and finally a partial harvest that
the farm admin has to approve. Feeding and chemical events draw stock from
inventory just like feed inputs and water tests do.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework import status

pytestmark = pytest.mark.django_db


def event_payload(event_type, day, pond=None, nursery_batch=None, details=None, **extra):
    payload = {
        'event_type': event_type,
        'date': day.isoformat(),
        'details': details or {},
    }
    if pond is not None:
        payload['pond'] = str(pond.id)
    if nursery_batch is not None:
        payload['nursery_batch'] = str(nursery_batch.id)
    payload.update(extra)
    return payload


def stocking_details(batch, day, **overrides):
    details = {
        'stocking_date': day.isoformat(),
        'nursery_batch_id': str(batch.id),
        'species': batch.species,
        'initial_count': 12000,
    }
    details.update(overrides)
    return details


class TestEventValidation:

    def test_stocking_event(self, admin_client, pond, nursery_batch, today):
        response = admin_client.post('/api/events/', event_payload(
            'Stocking', today, pond=pond, details=stocking_details(nursery_batch, today),
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['season'] == pond.season_id
        assert response.data['target_name'] == 'Pond A'
        assert response.data['status'] == 'Planned'

    def test_missing_details(self, admin_client, pond, today):
        response = admin_client.post('/api/events/', event_payload(
            'Stocking', today, pond=pond, details={'stocking_date': today.isoformat(), 'initial_count': 10},
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Stocking: nursery_batch_id, species are required in details'}

    def test_stocking_unknown_batch(self, admin_client, pond, nursery_batch, today):
        import uuid

        details = stocking_details(nursery_batch, today, nursery_batch_id=str(uuid.uuid4()))
        response = admin_client.post(
            '/api/events/', event_payload('Stocking', today, pond=pond, details=details), format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Stocking: nursery batch not found'}

    def test_stocking_count_must_be_positive(self, admin_client, pond, nursery_batch, today):
        details = stocking_details(nursery_batch, today, initial_count=0)
        response = admin_client.post(
            '/api/events/', event_payload('Stocking', today, pond=pond, details=details), format='json'
        )
        assert response.data == {'error': 'Stocking: initial_count must be at least 1'}

    def test_stocking_needs_a_pond(self, admin_client, nursery_batch, today):
        response = admin_client.post('/api/events/', event_payload(
            'Stocking', today, nursery_batch=nursery_batch,
            details=stocking_details(nursery_batch, today),
        ), format='json')
        assert response.data == {'error': 'Stocking event requires a pond'}

    def test_pond_or_batch_not_both(self, admin_client, pond, nursery_batch, today):
        response = admin_client.post('/api/events/', event_payload(
            'Inspection', today, pond=pond, nursery_batch=nursery_batch,
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Only one of pond or nursery batch may be set'}

    def test_target_required(self, admin_client, season, today):
        response = admin_client.post(
            '/api/events/', event_payload('Inspection', today, season=str(season.id)), format='json'
        )
        assert response.data == {'error': 'Either pond or nursery batch is required'}

    def test_nursery_preparation(self, admin_client, nursery_batch, today):
        response = admin_client.post('/api/events/', event_payload(
            'NurseryPreparation', today, nursery_batch=nursery_batch,
            details={'preparation_method': 'Chlorination', 'preparation_date': today.isoformat()},
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['target_name'] == 'Batch 1'

    def test_types_without_rules_accept_any_details(self, admin_client, pond, today):
        response = admin_client.post('/api/events/', event_payload(
            'Maintenance', today, pond=pond, details={'equipment': 'aerator'}, labor_cost='150.00',
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_cost'] == '150.00'

    def test_date_too_far_ahead(self, admin_client, pond, today):
        response = admin_client.post('/api/events/', event_payload(
            'Inspection', today + timedelta(days=3 * 365), pond=pond,
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'date' in response.data

    @pytest.mark.parametrize('stocking_date', ['2024-02-30', 'next week'])
    def test_stocking_date_must_be_a_date(self, admin_client, pond, nursery_batch, today, stocking_date):
        from events.models import Event

        details = stocking_details(nursery_batch, today, stocking_date=stocking_date)
        response = admin_client.post(
            '/api/events/', event_payload('Stocking', today, pond=pond, details=details), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Stocking: stocking_date must be a valid date (YYYY-MM-DD)'}
        assert not Event.objects.filter(pond=pond).exists()

    def test_harvest_weight_must_be_positive_number(self, admin_client, pond, today):
        for weight in ('heavy', -5):
            response = admin_client.post('/api/events/', event_payload(
                'PartialHarvest', today, pond=pond,
                details={'harvest_date': today.isoformat(), 'harvest_weight': weight, 'average_weight': 18},
            ), format='json')

            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.data == {
                'error': 'PartialHarvest: harvest_weight must be a number greater than 0'
            }

    def test_growth_sampling_count_must_be_whole(self, admin_client, pond, today):
        response = admin_client.post('/api/events/', event_payload(
            'GrowthSampling', today, pond=pond,
            details={'sampling_time': '08:00', 'total_weight': 1.2, 'total_count': 12.5},
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'error': 'GrowthSampling: total_count must be a whole number of at least 1'
        }

    def test_manual_sampling_number_must_be_positive_integer(self, admin_client, pond, today):
        response = admin_client.post('/api/events/', event_payload(
            'Sampling', today, pond=pond, details={'sampling_number': 'first'},
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Sampling: sampling_number must be a whole number of at least 1'}

        numbered = admin_client.post('/api/events/', event_payload(
            'Sampling', today, pond=pond, details={'sampling_number': 4},
        ), format='json')
        assert numbered.status_code == status.HTTP_201_CREATED


class TestStoredDetailTolerance:
    """Records saved before detail checks existed must not break later requests."""

    def test_unreadable_stocking_date_falls_back_to_event_date(self, admin_client, farm, season, pond,
                                                               nursery_batch, feed_item, today):
        from events.models import Event, EventType, EventStatus

        Event.objects.create(
            farm=farm, season=season, pond=pond, event_type=EventType.STOCKING,
            date=today - timedelta(days=5), status=EventStatus.COMPLETED,
            details={
                'stocking_date': '2024-02-30',
                'nursery_batch_id': str(nursery_batch.id),
                'species': nursery_batch.species,
                'initial_count': 5000,
            },
        )

        feed = admin_client.post('/api/feed-inputs/', {
            'pond': str(pond.id),
            'inventory_item': str(feed_item.id),
            'date': today.isoformat(),
            'time': '07:00',
            'quantity': '5',
        }, format='json')
        assert feed.status_code == status.HTTP_201_CREATED

        kpis = admin_client.get(f'/api/ponds/{pond.id}/kpis/')
        assert kpis.status_code == status.HTTP_200_OK
        assert kpis.data['days_of_culture'] == 6

    def test_sampling_numbers_skip_unreadable_values(self, admin_client, farm, season, pond,
                                                     stocking_event, today):
        from events.models import Event, EventType

        for number in ('first', 3):
            Event.objects.create(
                farm=farm, season=season, pond=pond, event_type=EventType.SAMPLING,
                date=today - timedelta(days=3), details={'sampling_number': number},
            )

        response = admin_client.post('/api/growth-samplings/', {
            'pond': str(pond.id),
            'date': today.isoformat(),
            'time': '08:00',
            'total_weight': '0.500',
            'total_count': 40,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        latest = Event.objects.filter(pond=pond, event_type=EventType.SAMPLING, date=today).get()
        assert latest.details['sampling_number'] == 4


class TestEventInventory:

    def test_feeding_event_consumes_and_delete_restores(self, admin_client, pond, feed_item, today):
        response = admin_client.post('/api/events/', event_payload(
            'Feeding', today, pond=pond, status='Completed',
            details={'feed_time': '07:00', 'inventory_item_id': str(feed_item.id), 'quantity': 25},
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert feed_item.get_current_quantity() == Decimal('475')

        admin_client.delete(f"/api/events/{response.data['id']}/")
        assert feed_item.get_current_quantity() == Decimal('500')

    def test_chemical_application_quantity_change(self, admin_client, pond, chemical_item, today):
        details = {
            'application_date': today.isoformat(),
            'inventory_item_id': str(chemical_item.id),
            'quantity_applied': '10',
        }
        created = admin_client.post(
            '/api/events/', event_payload('ChemicalApplication', today, pond=pond, details=details),
            format='json'
        ).data
        assert chemical_item.get_current_quantity() == Decimal('90')

        response = admin_client.patch(
            f"/api/events/{created['id']}/", {'details': {**details, 'quantity_applied': '4'}}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert chemical_item.get_current_quantity() == Decimal('96')

    def test_feeding_with_chemical_item(self, admin_client, pond, chemical_item, today):
        response = admin_client.post('/api/events/', event_payload(
            'Feeding', today, pond=pond,
            details={'feed_time': '07:00', 'inventory_item_id': str(chemical_item.id), 'quantity': 5},
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Feeding: inventory item must be of type Feed'}
        assert chemical_item.get_current_quantity() == Decimal('100')

    def test_feeding_with_bad_quantity(self, admin_client, pond, feed_item, today):
        response = admin_client.post('/api/events/', event_payload(
            'Feeding', today, pond=pond,
            details={'feed_time': '07:00', 'inventory_item_id': str(feed_item.id), 'quantity': 'lots'},
        ), format='json')
        assert response.data == {'error': 'quantity must be a number'}


class TestHarvestAndApproval:

    def harvest(self, client, pond, day, **extra):
        return client.post('/api/events/', event_payload(
            'PartialHarvest', day, pond=pond,
            details={'harvest_date': day.isoformat(), 'harvest_weight': 420.5, 'average_weight': 18.2},
            **extra
        ), format='json')

    def test_harvest_with_weight_completes(self, admin_client, pond, today):
        response = self.harvest(admin_client, pond, today)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'Completed'

    def test_completion_needs_approval(self, admin_client, pond, today):
        response = self.harvest(admin_client, pond, today, requires_approval=True, status='Completed')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data

    def test_admin_approval_completes_harvest(self, admin_client, pond, farm_admin, today):
        created = self.harvest(admin_client, pond, today, requires_approval=True).data
        assert created['status'] == 'Planned'

        response = admin_client.post(f"/api/events/{created['id']}/approve/")

        assert response.status_code == status.HTTP_200_OK
        event = response.data['event']
        assert event['status'] == 'Completed'
        assert event['approved_by_name'] == farm_admin.username

        again = admin_client.post(f"/api/events/{created['id']}/approve/")
        assert again.data == {'error': 'Event is already approved'}

    def test_operator_cannot_approve(self, admin_client, client_for, operator, pond, today):
        created = self.harvest(admin_client, pond, today, requires_approval=True).data

        response = client_for(operator).post(f"/api/events/{created['id']}/approve/")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_approval_not_required(self, admin_client, pond, today):
        created = admin_client.post(
            '/api/events/', event_payload('Inspection', today, pond=pond), format='json'
        ).data
        response = admin_client.post(f"/api/events/{created['id']}/approve/")
        assert response.data == {'error': 'Event does not require approval'}

    def test_completed_event_is_locked(self, admin_client, pond, today):
        created = self.harvest(admin_client, pond, today).data

        locked = admin_client.patch(
            f"/api/events/{created['id']}/", {'date': (today - timedelta(days=1)).isoformat()}, format='json'
        )
        assert locked.status_code == status.HTTP_400_BAD_REQUEST

        notes = admin_client.patch(f"/api/events/{created['id']}/", {'notes': 'Sold to processor'}, format='json')
        assert notes.status_code == status.HTTP_200_OK


class TestEventQueries:

    @pytest.fixture
    def schedule(self, farm, season, pond, today):
        from events.models import Event, EventStatus

        def make(event_type, offset, event_status=EventStatus.PLANNED):
            return Event.objects.create(
                farm=farm, season=season, pond=pond, event_type=event_type,
                date=today + timedelta(days=offset), status=event_status,
            )

        return {
            'overdue': make('Maintenance', -3),
            'done': make('Cleaning', -2, EventStatus.COMPLETED),
            'soon': make('Inspection', 2),
            'later': make('WaterExchange', 20),
        }

    def test_upcoming(self, admin_client, schedule):
        response = admin_client.get('/api/events/upcoming/')
        assert [row['id'] for row in response.data['results']] == [str(schedule['soon'].id)]

        wider = admin_client.get('/api/events/upcoming/?days=30')
        assert wider.data['count'] == 2

    def test_overdue(self, admin_client, schedule):
        response = admin_client.get('/api/events/overdue/')

        assert [row['id'] for row in response.data['results']] == [str(schedule['overdue'].id)]
        assert response.data['results'][0]['is_overdue'] is True

    def test_statistics(self, admin_client, schedule, season):
        response = admin_client.get(f'/api/events/statistics/?season={season.id}')

        assert response.data['total_events'] == 4
        assert response.data['overdue'] == 1
        assert response.data['upcoming'] == 1
        assert {row['status']: row['count'] for row in response.data['by_status']} == {
            'Planned': 3, 'Completed': 1,
        }

    def test_filters(self, admin_client, schedule, today):
        by_type = admin_client.get('/api/events/?event_type=Cleaning')
        assert by_type.data['count'] == 1

        start, end = today.isoformat(), (today + timedelta(days=30)).isoformat()
        ranged = admin_client.get(f'/api/events/date-range/?start_date={start}&end_date={end}')
        assert ranged.data['count'] == 2

    def test_timeline_requires_pond(self, admin_client):
        response = admin_client.get('/api/events/timeline/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'pond is required'}

    def test_timeline_days_of_culture(self, admin_client, pond, stocking_event, farm, season, today):
        from events.models import Event, EventType

        Event.objects.create(
            farm=farm, season=season, pond=pond, event_type=EventType.FULL_HARVEST,
            date=today, details={'harvest_weight': 900},
        )
        response = admin_client.get(f'/api/events/timeline/?pond={pond.id}')

        timeline = response.data['timeline']
        assert [row['event_type'] for row in timeline] == ['Stocking', 'FullHarvest']
        assert [row['day_of_culture'] for row in timeline] == [1, 31]
        assert timeline[1]['status'] == 'Completed'

    def test_event_types(self, admin_client):
        response = admin_client.get('/api/events/types/')

        stocking = next(row for row in response.data['event_types'] if row['value'] == 'Stocking')
        assert stocking['target'] == 'pond'
        assert 'initial_count' in stocking['required_details']
