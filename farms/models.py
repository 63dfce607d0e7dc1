"""
Farm (tenant) model.

Every operational record in the system belongs to exactly one farm, and a
user only ever reads or writes the records of the farm they belong to.
"""

import uuid

from django.conf import settings
from django.db import models


class Farm(models.Model):
    """
    A shrimp farm. The user who registers it becomes its owner and admin.
    """

    class Currency(models.TextChoices):
        LKR = 'LKR', 'Sri Lankan Rupee'
        USD = 'USD', 'US Dollar'
        EUR = 'EUR', 'Euro'
        INR = 'INR', 'Indian Rupee'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='owned_farms',
        help_text="User who registered the farm"
    )
    currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.LKR,
        help_text="Default currency for expenses and event costs"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farms'
        ordering = ['name']

    def __str__(self):
        return self.name
