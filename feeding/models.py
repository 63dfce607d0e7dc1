"""
Feed Input Model

One row per feeding of a pond. Each feeding draws the fed quantity from a
Feed inventory item.
"""

import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from farms.validators import validate_time_of_day, validate_recent_record_date, parse_hour


class FeedType(models.TextChoices):
    STARTER = 'Starter', 'Starter'
    GROWER = 'Grower', 'Grower'
    FINISHER = 'Finisher', 'Finisher'
    SUPPLEMENT = 'Supplement', 'Supplement'
    MEDICATION = 'Medication', 'Medication'
    OTHER = 'Other', 'Other'


class FeedingMethod(models.TextChoices):
    MANUAL = 'Manual', 'Manual'
    AUTOMATIC = 'Automatic', 'Automatic'
    BROADCAST = 'Broadcast', 'Broadcast'
    TARGETED = 'Targeted', 'Targeted'


class FeedInput(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='feed_inputs')
    pond = models.ForeignKey('ponds.Pond', on_delete=models.CASCADE, related_name='feed_inputs')
    season = models.ForeignKey('ponds.Season', on_delete=models.CASCADE, related_name='feed_inputs')
    inventory_item = models.ForeignKey(
        'inventory.InventoryItem',
        on_delete=models.PROTECT,
        related_name='feed_inputs'
    )

    date = models.DateField(validators=[validate_recent_record_date])
    time = models.CharField(max_length=5, validators=[validate_time_of_day], help_text="HH:MM (24h)")
    quantity = models.DecimalField(
        max_digits=8,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001')), MaxValueValidator(Decimal('10000'))],
        help_text="Quantity fed (kg)"
    )
    feed_type = models.CharField(max_length=20, choices=FeedType.choices, default=FeedType.OTHER)
    feeding_method = models.CharField(
        max_length=20,
        choices=FeedingMethod.choices,
        default=FeedingMethod.MANUAL
    )
    water_temperature = models.DecimalField(
        max_digits=4,
        decimal_places=1,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('50'))]
    )
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    total_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Auto-calculated: unit_cost × quantity when not supplied"
    )
    notes = models.TextField(max_length=500, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='feed_inputs'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'feed_inputs'
        ordering = ['-date', '-time']
        constraints = [
            models.UniqueConstraint(
                fields=['pond', 'date', 'time', 'inventory_item'],
                name='unique_feed_input_per_pond_time_item'
            ),
        ]
        indexes = [
            models.Index(fields=['pond', '-date']),
            models.Index(fields=['season', '-date']),
            models.Index(fields=['farm', 'season', 'date']),
        ]

    def __str__(self):
        return f"{self.pond} - {self.date} {self.time} ({self.quantity} kg)"

    def clean(self):
        if self.quantity is not None and self.quantity.as_tuple().exponent < -3:
            raise ValidationError({'quantity': 'Quantity can have at most 3 decimal places'})

    def save(self, *args, **kwargs):
        """Auto-calculate total cost from unit cost when it was not given."""
        if self.total_cost is None and self.unit_cost is not None and self.quantity is not None:
            self.total_cost = (self.unit_cost * self.quantity).quantize(
                Decimal('0.01'), rounding=ROUND_HALF_UP
            )
        super().save(*args, **kwargs)

    @property
    def feeding_window(self):
        hour = parse_hour(self.time)
        if 6 <= hour < 12:
            return 'Morning'
        if 12 <= hour < 18:
            return 'Afternoon'
        if 18 <= hour < 22:
            return 'Evening'
        return 'Night'
