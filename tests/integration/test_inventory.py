"""
Inventory Ledger Integration Tests

SCENARIO:
=========
The store keeper registers feed and chemicals with opening stock, books a
purchase and writes off a spoiled bag. Stock on hand is always the sum of
the adjustment ledger; items are never hard-deleted.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework import status

from inventory.models import InventoryItem, ItemType

pytestmark = pytest.mark.django_db


class TestInventoryItems:

    def test_create_with_initial_quantity(self, admin_client):
        response = admin_client.post('/api/inventory/', {
            'item_name': {'en': 'Starter Crumble', 'ta': 'ஸ்டார்டர்'},
            'item_type': 'Feed',
            'unit': 'kg',
            'cost_per_unit': '3.10',
            'low_stock_threshold': '20',
            'initial_quantity': '250',
            'supplier': 'Aqua Feeds Ltd',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['current_quantity'] == 250.0
        assert response.data['is_low_stock'] is False

        item = InventoryItem.objects.get(pk=response.data['id'])
        initial = item.adjustments.get()
        assert initial.adjustment_type == 'Initial'
        assert initial.quantity_change == Decimal('250')

    def test_create_without_stock_is_low(self, admin_client):
        response = admin_client.post('/api/inventory/', {
            'item_name': 'Probiotic Mix',
            'item_type': 'Probiotic',
            'unit': 'litre',
            'cost_per_unit': '12.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['current_quantity'] == 0.0
        assert response.data['low_stock_threshold'] == '10.000'
        assert response.data['is_low_stock'] is True

    def test_list_filters(self, admin_client, feed_item, chemical_item):
        feeds = admin_client.get('/api/inventory/?item_type=Feed')
        assert [row['item_name'] for row in feeds.data['results']] == ['Grower Pellets']

        search = admin_client.get('/api/inventory/?search=lime')
        assert [row['id'] for row in search.data['results']] == [str(chemical_item.id)]

    def test_soft_delete(self, admin_client, feed_item):
        response = admin_client.delete(f'/api/inventory/{feed_item.id}/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        feed_item.refresh_from_db()
        assert feed_item.is_active is False
        assert feed_item.deleted_at is not None

        assert admin_client.get('/api/inventory/').data['count'] == 0
        assert admin_client.get('/api/inventory/?include_inactive=true').data['count'] == 1

    def test_tenant_isolation(self, other_farm_client, feed_item):
        assert other_farm_client.get(f'/api/inventory/{feed_item.id}/').status_code == 404


class TestAdjustments:

    def test_purchase_and_spoilage(self, admin_client, feed_item):
        purchase = admin_client.post('/api/inventory/adjustments/', {
            'inventory_item': str(feed_item.id),
            'adjustment_type': 'Purchase',
            'quantity_change': '100',
            'reason': 'Monthly order',
        }, format='json')

        assert purchase.status_code == status.HTTP_201_CREATED
        assert purchase.data['current_quantity'] == 600.0

        spoilage = admin_client.post('/api/inventory/adjustments/', {
            'inventory_item': str(feed_item.id),
            'adjustment_type': 'Spoilage',
            'quantity_change': '-25',
            'reason': 'Wet bag',
        }, format='json')
        assert spoilage.data['current_quantity'] == 575.0

        ledger = admin_client.get(f'/api/inventory/{feed_item.id}/adjustments/')
        assert [row['adjustment_type'] for row in ledger.data['results']] == [
            'Spoilage', 'Purchase', 'Initial',
        ]

        spoiled_only = admin_client.get(f'/api/inventory/{feed_item.id}/adjustments/?adjustment_type=Spoilage')
        assert spoiled_only.data['count'] == 1

    def test_zero_change_rejected(self, admin_client, feed_item):
        response = admin_client.post('/api/inventory/adjustments/', {
            'inventory_item': str(feed_item.id),
            'adjustment_type': 'Correction',
            'quantity_change': '0',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'quantity_change' in response.data

    def test_inactive_item(self, admin_client, feed_item):
        feed_item.is_active = False
        feed_item.save()

        response = admin_client.post('/api/inventory/adjustments/', {
            'inventory_item': str(feed_item.id),
            'adjustment_type': 'Purchase',
            'quantity_change': '10',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Inventory item not found or is inactive'}

    def test_adjustments_of_unknown_item(self, admin_client):
        import uuid

        response = admin_client.get(f'/api/inventory/{uuid.uuid4()}/adjustments/')
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAggregate:

    def test_stock_and_usage(self, admin_client, farm, pond, season, feed_item, chemical_item,
                             stocking_event, today):
        from feeding.models import FeedInput
        from water_quality.models import WaterQualityInput

        FeedInput.objects.create(
            farm=farm, pond=pond, season=season, inventory_item=feed_item,
            date=today, time='07:00', quantity=Decimal('30'),
        )
        FeedInput.objects.create(
            farm=farm, pond=pond, season=season, inventory_item=feed_item,
            date=today, time='17:00', quantity=Decimal('10'),
        )
        WaterQualityInput.objects.create(
            farm=farm, pond=pond, season=season, date=today, time='06:00',
            ph=Decimal('7.9'), dissolved_oxygen=Decimal('5.5'), temperature=Decimal('28'),
            salinity=Decimal('18'), chemical_used=chemical_item, chemical_quantity_used=Decimal('5'),
        )

        response = admin_client.get('/api/inventory/aggregate/')

        assert response.status_code == status.HTTP_200_OK
        assert {row['item_name'] for row in response.data['current_stock']} == {'Grower Pellets', 'Lime'}
        usage = {row['item_name']: row for row in response.data['usage_summary']}
        assert usage['Grower Pellets']['total_used'] == 40.0
        assert usage['Grower Pellets']['entries'] == 2
        assert usage['Grower Pellets']['total_cost'] == 100.0
        assert usage['Lime']['source'] == 'water_quality'
        assert usage['Lime']['total_cost'] == 6.0
        assert response.data['total_usage_cost'] == 106.0

        yesterday = (today - timedelta(days=1)).isoformat()
        earlier = admin_client.get(f'/api/inventory/aggregate/?end_date={yesterday}')
        assert earlier.data['usage_summary'] == []


class TestScheduledChecks:

    def test_low_stock_task(self, farm, feed_item, inventory_item_factory):
        from inventory.tasks import check_low_stock

        inventory_item_factory(ItemType.CHEMICAL, 'Chlorine', quantity='4')
        inventory_item_factory(ItemType.OTHER, 'Nets')

        assert check_low_stock() == {'low_stock_items': 2}

    def test_overdue_events_task(self, farm, season, pond, today):
        from events.models import Event
        from events.tasks import flag_overdue_events

        Event.objects.create(
            farm=farm, season=season, pond=pond, event_type='Maintenance',
            date=today - timedelta(days=2),
        )

        assert flag_overdue_events() == {'overdue_events': 1, 'farms': 1}
