import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from farms.validators import validate_time_of_day


class GrowthSampling(models.Model):
    """
    A cast-net sample: total weight (kg) of ``total_count`` shrimp.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='growth_samplings')
    pond = models.ForeignKey('ponds.Pond', on_delete=models.CASCADE, related_name='growth_samplings')
    season = models.ForeignKey('ponds.Season', on_delete=models.CASCADE, related_name='growth_samplings')

    date = models.DateField()
    time = models.CharField(max_length=5, validators=[validate_time_of_day], help_text="HH:MM (24h)")
    total_weight = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))],
        help_text="Total weight of the sample (kg)"
    )
    total_count = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of shrimp in the sample"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='growth_samplings'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'growth_samplings'
        ordering = ['-date', '-time']
        indexes = [
            models.Index(fields=['pond', '-date']),
            models.Index(fields=['season', '-date']),
        ]

    def __str__(self):
        return f"{self.pond} - {self.date} ({self.total_count} pcs)"

    @property
    def average_weight(self):
        """Average body weight in kg."""
        if not self.total_count:
            return Decimal('0')
        return Decimal(self.total_weight) / Decimal(self.total_count)

    @property
    def average_weight_grams(self):
        return round(float(self.average_weight) * 1000, 2)
