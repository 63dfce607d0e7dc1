"""
Water Quality Models

One row per water test of a pond. The quality score and rating are derived
from the four core parameters on every save.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from farms.validators import validate_time_of_day
from . import scoring


def _range(low, high):
    return [MinValueValidator(Decimal(str(low))), MaxValueValidator(Decimal(str(high)))]


class TestingMethod(models.TextChoices):
    DIGITAL_METER = 'Digital Meter', 'Digital Meter'
    TEST_KIT = 'Test Kit', 'Test Kit'
    LABORATORY = 'Laboratory', 'Laboratory'
    PROBE = 'Probe', 'Probe'
    OTHER = 'Other', 'Other'


class WeatherCondition(models.TextChoices):
    SUNNY = 'Sunny', 'Sunny'
    CLOUDY = 'Cloudy', 'Cloudy'
    RAINY = 'Rainy', 'Rainy'
    STORMY = 'Stormy', 'Stormy'
    FOGGY = 'Foggy', 'Foggy'
    OTHER = 'Other', 'Other'


class QualityRating(models.TextChoices):
    EXCELLENT = 'Excellent', 'Excellent'
    GOOD = 'Good', 'Good'
    FAIR = 'Fair', 'Fair'
    POOR = 'Poor', 'Poor'
    CRITICAL = 'Critical', 'Critical'


# Parameters that may be filtered, projected and exported
WATER_PARAMETERS = [
    'ph', 'dissolved_oxygen', 'temperature', 'salinity', 'ammonia',
    'nitrite', 'nitrate', 'alkalinity', 'hardness', 'turbidity',
]
CORE_PARAMETERS = ['ph', 'dissolved_oxygen', 'temperature', 'salinity']


class WaterQualityInput(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='water_quality_inputs')
    pond = models.ForeignKey('ponds.Pond', on_delete=models.CASCADE, related_name='water_quality_inputs')
    season = models.ForeignKey('ponds.Season', on_delete=models.CASCADE, related_name='water_quality_inputs')

    date = models.DateField()
    time = models.CharField(max_length=5, validators=[validate_time_of_day], help_text="HH:MM (24h)")

    # Core parameters
    ph = models.DecimalField(max_digits=4, decimal_places=2, validators=_range(0, 14))
    dissolved_oxygen = models.DecimalField(
        max_digits=5, decimal_places=2, validators=_range(0, 50), help_text="mg/L"
    )
    temperature = models.DecimalField(
        max_digits=4, decimal_places=1, validators=_range(-10, 60), help_text="°C"
    )
    salinity = models.DecimalField(
        max_digits=5, decimal_places=2, validators=_range(0, 100), help_text="ppt"
    )

    # Optional parameters
    ammonia = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=_range(0, 100)
    )
    nitrite = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=_range(0, 100)
    )
    nitrate = models.DecimalField(
        max_digits=6, decimal_places=2, null=True, blank=True, validators=_range(0, 200)
    )
    alkalinity = models.DecimalField(
        max_digits=6, decimal_places=2, null=True, blank=True, validators=_range(0, 500)
    )
    hardness = models.DecimalField(
        max_digits=7, decimal_places=2, null=True, blank=True, validators=_range(0, 1000)
    )
    turbidity = models.DecimalField(
        max_digits=7, decimal_places=2, null=True, blank=True, validators=_range(0, 1000)
    )

    # Treatment applied at test time
    chemical_used = models.ForeignKey(
        'inventory.InventoryItem',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='water_quality_inputs'
    )
    chemical_quantity_used = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.001'))]
    )

    testing_method = models.CharField(max_length=20, choices=TestingMethod.choices, blank=True)
    testing_depth = models.DecimalField(
        max_digits=4, decimal_places=2, null=True, blank=True, validators=_range(0, 50),
        help_text="Sampling depth (m)"
    )
    weather_condition = models.CharField(max_length=20, choices=WeatherCondition.choices, blank=True)
    notes = models.TextField(max_length=1000, blank=True)

    # Derived on save
    quality_score = models.PositiveSmallIntegerField(default=0, editable=False)
    overall_quality = models.CharField(
        max_length=20,
        choices=QualityRating.choices,
        blank=True,
        editable=False,
        db_index=True
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='water_quality_inputs'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'water_quality_inputs'
        ordering = ['-date', '-time']
        constraints = [
            models.UniqueConstraint(
                fields=['pond', 'date', 'time'],
                name='unique_water_quality_per_pond_time'
            ),
        ]
        indexes = [
            models.Index(fields=['pond', '-date']),
            models.Index(fields=['season', '-date']),
            models.Index(fields=['farm', 'date']),
        ]

    def __str__(self):
        return f"{self.pond} - {self.date} {self.time}"

    def clean(self):
        if self.chemical_used_id and not self.chemical_quantity_used:
            raise ValidationError({
                'chemical_quantity_used': 'Chemical quantity is required when a chemical is used'
            })

    def save(self, *args, **kwargs):
        self.quality_score = scoring.quality_score(
            self.ph, self.dissolved_oxygen, self.temperature, self.salinity
        )
        self.overall_quality = scoring.quality_rating(self.quality_score)
        super().save(*args, **kwargs)

    @property
    def alerts(self):
        return scoring.parameter_alerts(
            self.ph, self.dissolved_oxygen, self.temperature, self.ammonia, self.nitrite
        )
