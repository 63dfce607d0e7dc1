"""
Expense Tracking Models

Expense tracking for shrimp farm operations, booked per season.

TRACKED EXPENSE CATEGORIES:
===========================
1. CULTURE - Seed, feed, chemicals, probiotics, harvest costs
2. FARM - Electricity, fuel, repairs, equipment, land lease
3. SALARY - Wages of farm employees

Each expense can be:
- Linked to a specific pond (for per-pond costing)
- Season-level (general overhead, not tied to a pond)
- Linked to an employee (salary)
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class ExpenseCategory(models.TextChoices):
    """Main expense categories."""
    CULTURE = 'Culture', 'Culture'
    FARM = 'Farm', 'Farm'
    SALARY = 'Salary', 'Salary'


# Suggested sub-categories per main category (free text is also accepted)
SUGGESTED_SUB_CATEGORIES = {
    ExpenseCategory.CULTURE: [
        'Seed', 'Feed', 'Chemicals', 'Probiotics', 'Lab Tests', 'Harvest',
    ],
    ExpenseCategory.FARM: [
        'Electricity', 'Fuel', 'Repairs', 'Equipment', 'Land Lease', 'Transport',
    ],
    ExpenseCategory.SALARY: [
        'Monthly Salary', 'Daily Wages', 'Bonus', 'Overtime',
    ],
}


class Expense(models.Model):
    """
    Individual expense record.

    Examples:
    - Post-larvae purchase: CULTURE / Seed, pond-linked
    - Monthly electricity bill: FARM / Electricity, season-level
    - Technician wage: SALARY / Monthly Salary, employee-linked
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Ownership
    farm = models.ForeignKey(
        'farms.Farm',
        on_delete=models.CASCADE,
        related_name='expenses',
        help_text="Farm incurring this expense"
    )
    season = models.ForeignKey(
        'ponds.Season',
        on_delete=models.CASCADE,
        related_name='expenses',
        help_text="Season the expense is booked against"
    )
    pond = models.ForeignKey(
        'ponds.Pond',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses',
        help_text="Pond this expense is for (leave empty for season-level expenses)"
    )
    employee = models.ForeignKey(
        'employees.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses',
        help_text="Employee paid (salary expenses)"
    )

    # Classification
    main_category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        db_index=True
    )
    sub_category = models.CharField(max_length=100)

    # Details
    date = models.DateField(db_index=True)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField(blank=True)
    receipt_url = models.URLField(max_length=500, blank=True)

    # Audit
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='expenses_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['farm', 'season', 'main_category']),
            models.Index(fields=['farm', '-date']),
            models.Index(fields=['pond', '-date']),
        ]

    def __str__(self):
        return f"{self.date} - {self.main_category}/{self.sub_category}: {self.amount}"

    def clean(self):
        errors = {}
        if self.pond_id and self.season_id and self.pond.season_id != self.season_id:
            errors['pond'] = 'Pond does not belong to the selected season'
        if self.main_category == ExpenseCategory.SALARY and not self.employee_id:
            errors['employee'] = 'Salary expenses must reference an employee'
        if errors:
            raise ValidationError(errors)
