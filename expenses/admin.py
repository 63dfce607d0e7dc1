"""
Admin configuration for Expense Tracking models.
"""

from django.contrib import admin

from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin for expense records"""
    list_display = [
        'date', 'farm', 'main_category', 'sub_category', 'amount',
        'season', 'pond', 'employee', 'created_at'
    ]
    list_filter = ['main_category', 'date']
    search_fields = ['sub_category', 'description']
    raw_id_fields = ['farm', 'season', 'pond', 'employee', 'created_by']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'
    list_per_page = 50

    fieldsets = (
        ('Basic Information', {
            'fields': ('farm', 'season', 'pond', 'employee')
        }),
        ('Classification', {
            'fields': ('main_category', 'sub_category')
        }),
        ('Amount', {
            'fields': ('date', 'amount', 'description', 'receipt_url')
        }),
        ('Audit', {
            'fields': ('created_by', 'created_at', 'updated_at')
        }),
    )
