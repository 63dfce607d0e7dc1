"""
Shared pytest fixtures.

Every test gets a farm administered by ``farm_admin`` with one active season,
one pond stocked 30 days ago and a stocked feed item. ``other_farm_client``
belongs to a second farm and is used to check tenant isolation.
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def today():
    return timezone.localdate()


def make_farm_user(role='admin', farm=None, **extra):
    from farms.models import Farm

    unique_id = uuid.uuid4().hex[:8]
    user = User.objects.create_user(
        username=f'{role}_{unique_id}',
        email=f'{role}_{unique_id}@example.com',
        password='Shr1mp-Pass-2024',
        role=role,
        **extra
    )
    if farm is None:
        farm = Farm.objects.create(name=f'Farm {unique_id}', owner=user)
    user.farm = farm
    user.save(update_fields=['farm'])
    return user


@pytest.fixture
def farm_admin(db):
    return make_farm_user('admin')


@pytest.fixture
def farm(farm_admin):
    return farm_admin.farm


@pytest.fixture
def viewer(farm):
    return make_farm_user('viewer', farm=farm)


@pytest.fixture
def operator(farm):
    return make_farm_user('operator', farm=farm)


@pytest.fixture
def other_farm_admin(db):
    return make_farm_user('admin')


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client


@pytest.fixture
def admin_client(client_for, farm_admin):
    return client_for(farm_admin)


@pytest.fixture
def viewer_client(client_for, viewer):
    return client_for(viewer)


@pytest.fixture
def other_farm_client(client_for, other_farm_admin):
    return client_for(other_farm_admin)


@pytest.fixture
def season(farm, today):
    from ponds.models import Season, SeasonStatus

    return Season.objects.create(
        farm=farm,
        name={'en': 'Season 2024', 'ta': 'பருவம் 2024'},
        start_date=today - timedelta(days=60),
        end_date=today + timedelta(days=60),
        status=SeasonStatus.ACTIVE,
    )


@pytest.fixture
def pond(farm, season):
    from ponds.models import Pond, PondStatus

    return Pond.objects.create(
        farm=farm,
        season=season,
        name={'en': 'Pond A', 'ta': 'குளம் A'},
        size=Decimal('500.00'),
        capacity=10000,
        status=PondStatus.ACTIVE,
    )


@pytest.fixture
def second_pond(farm, season):
    from ponds.models import Pond, PondStatus

    return Pond.objects.create(
        farm=farm,
        season=season,
        name={'en': 'Pond B'},
        size=Decimal('400.00'),
        capacity=8000,
        status=PondStatus.ACTIVE,
    )


@pytest.fixture
def nursery_batch(farm, season):
    from ponds.models import NurseryBatch

    return NurseryBatch.objects.create(
        farm=farm,
        season=season,
        batch_name={'en': 'Batch 1'},
        start_date=season.start_date,
        initial_count=20000,
        species='Litopenaeus vannamei',
        source='Coastal Hatchery',
        size=Decimal('50.00'),
        capacity=25000,
    )


def stock_pond(pond, nursery_batch, day, count=10000, user=None):
    from events.models import Event, EventType, EventStatus

    return Event.objects.create(
        farm=pond.farm,
        season=pond.season,
        pond=pond,
        event_type=EventType.STOCKING,
        date=day,
        status=EventStatus.COMPLETED,
        details={
            'stocking_date': day.isoformat(),
            'nursery_batch_id': str(nursery_batch.id),
            'species': nursery_batch.species,
            'initial_count': count,
        },
        created_by=user,
    )


@pytest.fixture
def stocking_event(pond, nursery_batch, farm_admin, today):
    return stock_pond(pond, nursery_batch, today - timedelta(days=30), user=farm_admin)


def make_item(farm, item_type, name, quantity=None, cost='2.50', unit='kg', threshold='10'):
    from inventory.models import InventoryItem, AdjustmentType
    from inventory.services import InventoryLedger

    item = InventoryItem.objects.create(
        farm=farm,
        item_name={'en': name},
        item_type=item_type,
        unit=unit,
        cost_per_unit=Decimal(cost),
        low_stock_threshold=Decimal(threshold),
    )
    if quantity:
        InventoryLedger.record(item, Decimal(quantity), AdjustmentType.INITIAL, reason='Initial stock')
    return item


@pytest.fixture
def feed_item(farm):
    from inventory.models import ItemType

    return make_item(farm, ItemType.FEED, 'Grower Pellets', quantity='500')


@pytest.fixture
def chemical_item(farm):
    from inventory.models import ItemType

    return make_item(farm, ItemType.CHEMICAL, 'Lime', quantity='100', cost='1.20')


@pytest.fixture
def stock(nursery_batch, farm_admin):
    """Stock a pond on a given day: ``stock(pond, day, count=10000)``."""
    def _stock(target_pond, day, count=10000):
        return stock_pond(target_pond, nursery_batch, day, count=count, user=farm_admin)
    return _stock


@pytest.fixture
def inventory_item_factory(farm):
    def _make(item_type, name, **kwargs):
        return make_item(farm, item_type, name, **kwargs)
    return _make
