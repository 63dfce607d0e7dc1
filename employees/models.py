import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class EmployeeStatus(models.TextChoices):
    ACTIVE = 'Active', 'Active'
    INACTIVE = 'Inactive', 'Inactive'


class Employee(models.Model):
    """Farm worker. Salary expenses are booked against an employee."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='employees')

    name = models.CharField(max_length=200)
    role = models.CharField(max_length=100, help_text="e.g. Pond technician, Feeder, Guard")
    hire_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=EmployeeStatus.choices,
        default=EmployeeStatus.ACTIVE,
        db_index=True
    )
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Monthly salary"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employees'
        ordering = ['name']
        indexes = [
            models.Index(fields=['farm', 'status']),
        ]

    def __str__(self):
        return f"{self.name} ({self.role})"
