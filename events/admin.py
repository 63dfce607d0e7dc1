from django.contrib import admin

from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = [
        'date', 'event_type', 'pond', 'nursery_batch', 'status', 'priority',
        'requires_approval', 'approved_at', 'farm',
    ]
    list_filter = ['event_type', 'status', 'priority', 'requires_approval']
    search_fields = ['notes', 'observations']
    raw_id_fields = ['farm', 'season', 'pond', 'nursery_batch', 'parent_event', 'approved_by', 'created_by']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'

    fieldsets = (
        ('Event', {
            'fields': ('farm', 'season', 'pond', 'nursery_batch', 'event_type', 'date', 'details')
        }),
        ('Status', {
            'fields': ('status', 'priority', 'parent_event')
        }),
        ('Costs', {
            'fields': ('labor_cost', 'material_cost', 'equipment_cost', 'other_cost', 'currency')
        }),
        ('Notes', {
            'fields': ('notes', 'observations')
        }),
        ('Approval', {
            'fields': ('requires_approval', 'approved_by', 'approved_at')
        }),
        ('Audit', {
            'fields': ('created_by', 'created_at', 'updated_at')
        }),
    )
