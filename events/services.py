"""
Event Service

Business rules around farm events:
1. Type-specific validation of the ``details`` payload
2. Inventory deductions for feeding and chemical application events
3. Stocking checks used by feed inputs and growth samplings
4. Automatic Sampling events for growth samplings
5. Approval, statistics and production timeline
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, Sum, F
from django.utils import timezone
from django.utils.dateparse import parse_date

from farms.exceptions import FarmOperationError, RecordNotFound
from inventory.services import InventoryLedger, FEED_TYPES, CHEMICAL_TYPES
from .models import Event, EventType, EventStatus

logger = logging.getLogger(__name__)


# required detail keys and the target each event type must point at
DETAIL_RULES = {
    EventType.POND_PREPARATION: {
        'required': ['method', 'preparation_date'],
        'target': 'pond',
    },
    EventType.STOCKING: {
        'required': ['stocking_date', 'nursery_batch_id', 'species', 'initial_count'],
        'target': 'pond',
    },
    EventType.CHEMICAL_APPLICATION: {
        'required': ['application_date', 'inventory_item_id', 'quantity_applied'],
    },
    EventType.PARTIAL_HARVEST: {
        'required': ['harvest_date', 'harvest_weight', 'average_weight'],
        'target': 'pond',
    },
    EventType.FULL_HARVEST: {
        'required': ['harvest_date', 'harvest_weight', 'average_weight'],
        'target': 'pond',
    },
    EventType.NURSERY_PREPARATION: {
        'required': ['preparation_method', 'preparation_date'],
        'target': 'nursery_batch',
    },
    EventType.WATER_QUALITY_TESTING: {
        'required': ['ph', 'dissolved_oxygen', 'temperature', 'salinity', 'test_time'],
    },
    EventType.GROWTH_SAMPLING: {
        'required': ['sampling_time', 'total_weight', 'total_count'],
    },
    EventType.FEEDING: {
        'required': ['feed_time', 'inventory_item_id', 'quantity'],
    },
}

# (item key, quantity key, allowed item types, label) for stock-moving events
INVENTORY_EFFECTS = {
    EventType.CHEMICAL_APPLICATION: ('inventory_item_id', 'quantity_applied', CHEMICAL_TYPES, 'chemical application'),
    EventType.FEEDING: ('inventory_item_id', 'quantity', FEED_TYPES, 'feeding'),
}

# detail values checked whenever present, whatever the event type
DATE_DETAIL_KEYS = ('preparation_date', 'stocking_date', 'application_date', 'harvest_date')
POSITIVE_DETAIL_KEYS = ('harvest_weight', 'average_weight', 'total_weight')
NUMERIC_DETAIL_KEYS = ('ph', 'dissolved_oxygen', 'temperature', 'salinity')
COUNT_DETAIL_KEYS = ('total_count', 'sampling_number')

TIMELINE_TYPES = [
    EventType.POND_PREPARATION,
    EventType.STOCKING,
    EventType.SAMPLING,
    EventType.GROWTH_SAMPLING,
    EventType.PARTIAL_HARVEST,
    EventType.FULL_HARVEST,
]


def _missing(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _as_decimal(value):
    """Finite Decimal for ``value`` or None."""
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return number if number.is_finite() else None


def _as_whole_number(value):
    number = _as_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def _to_decimal(value, field):
    number = _as_decimal(value)
    if number is None:
        raise FarmOperationError(f'{field} must be a number')
    if number <= 0:
        raise FarmOperationError(f'{field} must be greater than 0')
    return number


def parse_detail_date(value):
    """
    Parse 'YYYY-MM-DD' (optionally followed by a time) from event details.

    Returns None for missing, malformed or impossible dates.
    """
    if not value:
        return None
    try:
        return parse_date(str(value)[:10])
    except ValueError:
        return None


def has_stocking_on_or_before(pond, season, day) -> bool:
    """True when the pond was stocked in ``season`` on or before ``day``."""
    stockings = Event.objects.filter(
        pond=pond, season=season, event_type=EventType.STOCKING
    ).only('date', 'details')
    for event in stockings:
        stocked_on = parse_detail_date((event.details or {}).get('stocking_date')) or event.date
        if stocked_on <= day:
            return True
    return False


def require_stocking(pond, season, day, record='record'):
    if not has_stocking_on_or_before(pond, season, day):
        logger.warning(f"Rejected {record} for pond {pond.id} on {day}: pond not stocked")
        raise FarmOperationError(
            f'Cannot add {record}: pond has not been stocked on or before this date'
        )


def stocking_date_for(pond) -> Optional[Any]:
    """Earliest stocking date of a pond in its current season."""
    dates = [
        parse_detail_date((e.details or {}).get('stocking_date')) or e.date
        for e in Event.objects.filter(
            pond=pond, season_id=pond.season_id, event_type=EventType.STOCKING
        ).only('date', 'details')
    ]
    return min(dates) if dates else None


class EventService:
    """
    Event business rules for one farm.

    Usage:
        service = EventService(farm, user)
        service.validate_details(event_type, details, pond, nursery_batch)
        event = service.create(serializer)
    """

    def __init__(self, farm, user=None):
        self.farm = farm
        self.user = user

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_details(self, event_type, details, pond=None, nursery_batch=None):
        """
        Check the ``details`` payload for ``event_type``.

        Raises FarmOperationError (400) or RecordNotFound (404).
        """
        if event_type not in EventType.values:
            raise FarmOperationError('Invalid event type')

        if pond is None and nursery_batch is None:
            raise FarmOperationError('Either pond or nursery batch is required')
        if pond is not None and nursery_batch is not None:
            raise FarmOperationError('Only one of pond or nursery batch may be set')

        details = details or {}
        if not isinstance(details, dict):
            raise FarmOperationError('Event details must be an object')

        self._validate_detail_values(event_type, details)

        rules = DETAIL_RULES.get(event_type)
        if rules is None:
            return details

        missing = [key for key in rules['required'] if _missing(details.get(key))]
        if missing:
            raise FarmOperationError(
                f"{event_type}: {', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required in details"
            )

        target = rules.get('target')
        if target == 'pond' and pond is None:
            raise FarmOperationError(f'{event_type} event requires a pond')
        if target == 'nursery_batch' and nursery_batch is None:
            raise FarmOperationError(f'{event_type} event requires a nursery batch')

        if event_type == EventType.STOCKING:
            self._validate_stocking(details)

        if event_type in INVENTORY_EFFECTS:
            item_key, quantity_key, allowed_types, label = INVENTORY_EFFECTS[event_type]
            InventoryLedger.get_active_item(
                self.farm, details[item_key], allowed_types,
                label=f'{event_type}: inventory item'
            )
            _to_decimal(details[quantity_key], quantity_key)

        return details

    def _validate_detail_values(self, event_type, details):
        """Format checks for well-known detail keys; absent or blank keys are left to the rules."""
        for key, value in details.items():
            if _missing(value):
                continue
            if key in DATE_DETAIL_KEYS and parse_detail_date(value) is None:
                raise FarmOperationError(f'{event_type}: {key} must be a valid date (YYYY-MM-DD)')
            if key in POSITIVE_DETAIL_KEYS:
                number = _as_decimal(value)
                if number is None or number <= 0:
                    raise FarmOperationError(f'{event_type}: {key} must be a number greater than 0')
            if key in NUMERIC_DETAIL_KEYS and _as_decimal(value) is None:
                raise FarmOperationError(f'{event_type}: {key} must be a number')
            if key in COUNT_DETAIL_KEYS:
                number = _as_whole_number(value)
                if number is None or number < 1:
                    raise FarmOperationError(f'{event_type}: {key} must be a whole number of at least 1')

    def _validate_stocking(self, details):
        from ponds.models import NurseryBatch

        try:
            exists = NurseryBatch.objects.filter(
                pk=details['nursery_batch_id'], farm=self.farm
            ).exists()
        except (ValueError, TypeError, DjangoValidationError):
            exists = False
        if not exists:
            raise RecordNotFound('Stocking: nursery batch not found')

        initial_count = _as_whole_number(details['initial_count'])
        if initial_count is None:
            raise FarmOperationError('Stocking: initial_count must be a whole number')
        if initial_count < 1:
            raise FarmOperationError('Stocking: initial_count must be at least 1')

    # =========================================================================
    # INVENTORY SIDE EFFECTS
    # =========================================================================

    def _usage_for(self, event_type, details):
        """Return (item, quantity, label) for stock-moving events, else None."""
        effect = INVENTORY_EFFECTS.get(event_type)
        if effect is None:
            return None
        item_key, quantity_key, _, label = effect
        details = details or {}
        if _missing(details.get(item_key)) or _missing(details.get(quantity_key)):
            return None
        from inventory.models import InventoryItem

        item = InventoryItem.objects.filter(pk=details[item_key], farm=self.farm).first()
        if item is None:
            return None
        return item, Decimal(str(details[quantity_key])), label

    def apply_inventory_effects(self, event):
        usage = self._usage_for(event.event_type, event.details)
        if usage is None:
            return
        item, quantity, label = usage
        InventoryLedger.consume(
            item, quantity, related=event, user=self.user,
            reason=f'Usage for {label} event {event.id}'
        )

    def reverse_inventory_effects(self, event):
        usage = self._usage_for(event.event_type, event.details)
        if usage is None:
            return
        item, quantity, label = usage
        InventoryLedger.restore(
            item, quantity, related=event, user=self.user,
            reason=f'Reversal of {label} due to deletion of event {event.id}'
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @transaction.atomic
    def create(self, serializer):
        event = serializer.save(farm=self.farm, created_by=self.user)
        self.apply_inventory_effects(event)
        logger.info(f"Event {event.event_type} created: {event.id} (farm {self.farm.id})")
        return event

    @transaction.atomic
    def update(self, serializer):
        previous = serializer.instance
        old_type, old_details = previous.event_type, dict(previous.details or {})
        old_usage = self._usage_for(old_type, old_details)

        event = serializer.save()
        new_usage = self._usage_for(event.event_type, event.details)

        InventoryLedger.replace_usage(
            old_usage[0] if old_usage else None,
            old_usage[1] if old_usage else 0,
            new_usage[0] if new_usage else None,
            new_usage[1] if new_usage else 0,
            related=event, user=self.user, label=f'event {event.id}',
        )
        logger.info(f"Event {event.id} updated")
        return event

    @transaction.atomic
    def delete(self, event):
        self.reverse_inventory_effects(event)
        logger.info(f"Event {event.event_type} deleted: {event.id}")
        event.delete()

    def approve(self, event):
        if not event.requires_approval:
            raise FarmOperationError('Event does not require approval')
        if event.approved_at:
            raise FarmOperationError('Event is already approved')
        event.approved_by = self.user
        event.approved_at = timezone.now()
        event.save(update_fields=['approved_by', 'approved_at', 'status', 'updated_at'])
        logger.info(f"Event {event.id} approved by {self.user}")
        return event

    # =========================================================================
    # AUTOMATIC SAMPLING EVENTS
    # =========================================================================

    def next_sampling_number(self, pond, season) -> int:
        numbers = []
        for details in Event.objects.filter(
            pond=pond, season=season, event_type=EventType.SAMPLING
        ).values_list('details', flat=True):
            if not isinstance(details, dict):
                continue
            number = _as_whole_number(details.get('sampling_number'))
            if number is not None:
                numbers.append(number)
        return max(numbers, default=0) + 1

    def ensure_sampling_event(self, sampling) -> Optional[Event]:
        """
        Create a Sampling event for the sampling's pond and day unless one exists.
        """
        exists = Event.objects.filter(
            pond=sampling.pond,
            event_type=EventType.SAMPLING,
            date=sampling.date,
        ).exists()
        if exists:
            return None

        event = Event.objects.create(
            farm=self.farm,
            season=sampling.season,
            pond=sampling.pond,
            event_type=EventType.SAMPLING,
            date=sampling.date,
            status=EventStatus.COMPLETED,
            details={
                'sampling_number': self.next_sampling_number(sampling.pond, sampling.season),
                'sampling_time': sampling.time,
                'total_weight': float(sampling.total_weight),
                'total_count': sampling.total_count,
                'average_weight_grams': sampling.average_weight_grams,
                'growth_sampling_id': str(sampling.id),
            },
            created_by=self.user,
        )
        logger.info(f"Sampling event {event.id} auto-created for pond {sampling.pond_id} on {sampling.date}")
        return event

    # =========================================================================
    # REPORTING
    # =========================================================================

    def statistics(self, season=None) -> Dict[str, Any]:
        events = Event.objects.filter(farm=self.farm)
        if season is not None:
            events = events.filter(season=season)

        by_type = list(
            events.values('event_type').annotate(count=Count('id')).order_by('-count')
        )
        by_status = list(
            events.values('status').annotate(count=Count('id')).order_by('-count')
        )
        costs = events.aggregate(
            total=Sum(F('labor_cost') + F('material_cost') + F('equipment_cost') + F('other_cost'))
        )

        return {
            'total_events': events.count(),
            'by_type': by_type,
            'by_status': by_status,
            'overdue': events.overdue().count(),
            'upcoming': events.upcoming().count(),
            'total_cost': float(costs['total'] or 0),
        }

    def timeline(self, pond) -> List[Dict[str, Any]]:
        """Key production events of a pond in chronological order."""
        events = Event.objects.filter(
            farm=self.farm, pond=pond, event_type__in=TIMELINE_TYPES
        ).order_by('date', 'created_at')
        stocked_on = stocking_date_for(pond)

        return [
            {
                'id': str(event.id),
                'event_type': event.event_type,
                'date': event.date,
                'status': event.status,
                'day_of_culture': (event.date - stocked_on).days + 1 if stocked_on else None,
                'details': event.details,
            }
            for event in events
        ]
