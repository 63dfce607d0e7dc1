"""
Seasons, Ponds and Nursery Batches.

A season is one culture cycle of the farm. Ponds and nursery batches are
registered per season; feed, water quality, growth and event records all
point at a pond (or batch) and the season it was recorded in.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from farms.i18n import translate


class SeasonStatus(models.TextChoices):
    PLANNING = 'Planning', 'Planning'
    ACTIVE = 'Active', 'Active'
    COMPLETED = 'Completed', 'Completed'


class PondStatus(models.TextChoices):
    PLANNING = 'Planning', 'Planning'
    ACTIVE = 'Active', 'Active'
    INACTIVE = 'Inactive', 'Inactive'
    COMPLETED = 'Completed', 'Completed'


class Season(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='seasons')

    name = models.JSONField(help_text="Language map, e.g. {'en': 'Season 2024'}")
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=SeasonStatus.choices,
        default=SeasonStatus.PLANNING,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'seasons'
        ordering = ['-start_date']
        indexes = [
            models.Index(fields=['farm', 'status']),
            models.Index(fields=['farm', '-start_date']),
        ]

    def __str__(self):
        return translate(self.name, 'en')

    def clean(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': 'End date must be after start date'})

    def contains(self, day):
        return self.start_date <= day <= self.end_date


class Pond(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='ponds')
    season = models.ForeignKey(Season, on_delete=models.CASCADE, related_name='ponds')

    name = models.JSONField(help_text="Language map of the pond name")
    size = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.1')), MaxValueValidator(Decimal('10000'))],
        help_text="Water surface area (m²)"
    )
    capacity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Stocking capacity (number of shrimp)"
    )
    status = models.CharField(
        max_length=20,
        choices=PondStatus.choices,
        default=PondStatus.PLANNING,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ponds'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['farm', 'season', 'status']),
        ]

    def __str__(self):
        return translate(self.name, 'en')


class NurseryBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='nursery_batches')
    season = models.ForeignKey(Season, on_delete=models.CASCADE, related_name='nursery_batches')

    batch_name = models.JSONField(help_text="Language map of the batch name")
    start_date = models.DateField()
    initial_count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    species = models.CharField(max_length=100)
    source = models.CharField(max_length=200, help_text="Hatchery or supplier")
    size = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Nursery tank/pond area (m²)"
    )
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=PondStatus.choices,
        default=PondStatus.PLANNING,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'nursery_batches'
        ordering = ['-start_date']
        verbose_name_plural = 'Nursery batches'
        indexes = [
            models.Index(fields=['farm', 'season']),
        ]

    def __str__(self):
        return translate(self.batch_name, 'en')
