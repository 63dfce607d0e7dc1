"""
Farm Event Model

Events record everything that happens to a pond or a nursery batch during a
season: preparation, stocking, treatments, samplings and harvests. The
``details`` JSON holds the fields specific to each event type; they are
validated per type in ``events/services.py``.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


class EventType(models.TextChoices):
    POND_PREPARATION = 'PondPreparation', 'Pond Preparation'
    STOCKING = 'Stocking', 'Stocking'
    CHEMICAL_APPLICATION = 'ChemicalApplication', 'Chemical Application'
    PARTIAL_HARVEST = 'PartialHarvest', 'Partial Harvest'
    FULL_HARVEST = 'FullHarvest', 'Full Harvest'
    SAMPLING = 'Sampling', 'Sampling'
    WATER_EXCHANGE = 'WaterExchange', 'Water Exchange'
    CLEANING = 'Cleaning', 'Cleaning'
    MAINTENANCE = 'Maintenance', 'Maintenance'
    INSPECTION = 'Inspection', 'Inspection'
    NURSERY_PREPARATION = 'NurseryPreparation', 'Nursery Preparation'
    WATER_QUALITY_TESTING = 'WaterQualityTesting', 'Water Quality Testing'
    GROWTH_SAMPLING = 'GrowthSampling', 'Growth Sampling'
    FEEDING = 'Feeding', 'Feeding'
    NURSERY_INSPECTION = 'NurseryInspection', 'Nursery Inspection'
    TRANSFER = 'Transfer', 'Transfer'
    DISEASE = 'Disease', 'Disease'
    MORTALITY = 'Mortality', 'Mortality'
    EMERGENCY = 'Emergency', 'Emergency'


HARVEST_TYPES = [EventType.PARTIAL_HARVEST, EventType.FULL_HARVEST]


class EventStatus(models.TextChoices):
    PLANNED = 'Planned', 'Planned'
    IN_PROGRESS = 'InProgress', 'In Progress'
    COMPLETED = 'Completed', 'Completed'
    CANCELLED = 'Cancelled', 'Cancelled'
    ON_HOLD = 'OnHold', 'On Hold'


OPEN_STATUSES = [EventStatus.PLANNED, EventStatus.IN_PROGRESS]
CLOSED_STATUSES = [EventStatus.COMPLETED, EventStatus.CANCELLED]


class EventPriority(models.TextChoices):
    LOW = 'Low', 'Low'
    MEDIUM = 'Medium', 'Medium'
    HIGH = 'High', 'High'
    CRITICAL = 'Critical', 'Critical'


class EventCurrency(models.TextChoices):
    USD = 'USD', 'US Dollar'
    LKR = 'LKR', 'Sri Lankan Rupee'
    EUR = 'EUR', 'Euro'
    INR = 'INR', 'Indian Rupee'


def validate_event_date(value):
    """Events may be planned up to 2 years ahead and recorded up to 5 years back."""
    today = timezone.localdate()
    if value < today - timedelta(days=5 * 365):
        raise ValidationError('Event date cannot be more than 5 years in the past')
    if value > today + timedelta(days=2 * 365):
        raise ValidationError('Event date cannot be more than 2 years in the future')


class EventQuerySet(models.QuerySet):

    def upcoming(self, days=7):
        today = timezone.localdate()
        return self.filter(
            date__gte=today,
            date__lte=today + timedelta(days=days),
            status__in=OPEN_STATUSES,
        ).order_by('date')

    def overdue(self):
        return self.filter(
            date__lt=timezone.localdate(),
            status__in=OPEN_STATUSES,
        ).order_by('date')

    def harvests(self):
        return self.filter(event_type__in=HARVEST_TYPES)


class Event(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='events')
    season = models.ForeignKey('ponds.Season', on_delete=models.CASCADE, related_name='events')
    pond = models.ForeignKey(
        'ponds.Pond',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='events'
    )
    nursery_batch = models.ForeignKey(
        'ponds.NurseryBatch',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='events'
    )

    event_type = models.CharField(max_length=30, choices=EventType.choices, db_index=True)
    date = models.DateField(validators=[validate_event_date])
    details = models.JSONField(default=dict, blank=True)

    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PLANNED,
        db_index=True
    )
    priority = models.CharField(
        max_length=20,
        choices=EventPriority.choices,
        default=EventPriority.MEDIUM
    )

    # Costs
    labor_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    material_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    equipment_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    other_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    currency = models.CharField(max_length=3, choices=EventCurrency.choices, default=EventCurrency.LKR)

    notes = models.TextField(max_length=2000, blank=True)
    observations = models.TextField(max_length=2000, blank=True)

    # Follow-up chain
    parent_event = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='follow_up_events'
    )

    # Approval
    requires_approval = models.BooleanField(default=False)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_events'
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_events'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        db_table = 'events'
        ordering = ['-date', '-created_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(pond__isnull=False, nursery_batch__isnull=True) |
                    Q(pond__isnull=True, nursery_batch__isnull=False)
                ),
                name='event_targets_pond_or_nursery_batch'
            ),
        ]
        indexes = [
            models.Index(fields=['farm', 'season', 'event_type']),
            models.Index(fields=['pond', '-date']),
            models.Index(fields=['nursery_batch', '-date']),
            models.Index(fields=['status', 'date']),
        ]

    def __str__(self):
        target = self.pond or self.nursery_batch
        return f"{self.get_event_type_display()} - {target} ({self.date})"

    def clean(self):
        if not self.pond_id and not self.nursery_batch_id:
            raise ValidationError('Either pond or nursery batch is required')
        if self.pond_id and self.nursery_batch_id:
            raise ValidationError('Only one of pond or nursery batch may be set')
        if (self.status == EventStatus.COMPLETED and self.requires_approval
                and not self.approved_at):
            raise ValidationError({'status': 'Event requires approval before it can be completed'})

    def save(self, *args, **kwargs):
        """A planned harvest that already carries a harvest weight is complete."""
        if (self.event_type in HARVEST_TYPES and self.status == EventStatus.PLANNED
                and (self.details or {}).get('harvest_weight') not in (None, '')
                and not (self.requires_approval and not self.approved_at)):
            self.status = EventStatus.COMPLETED
        super().save(*args, **kwargs)

    @property
    def total_cost(self):
        return sum(
            (self.labor_cost or 0, self.material_cost or 0,
             self.equipment_cost or 0, self.other_cost or 0),
            Decimal('0.00')
        )

    @property
    def is_overdue(self):
        return self.date < timezone.localdate() and self.status in OPEN_STATUSES

    @property
    def days_until_due(self):
        return (self.date - timezone.localdate()).days

    @property
    def can_be_modified(self):
        return self.status not in CLOSED_STATUSES
