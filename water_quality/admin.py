from django.contrib import admin

from .models import WaterQualityInput


@admin.register(WaterQualityInput)
class WaterQualityInputAdmin(admin.ModelAdmin):
    list_display = [
        'date', 'time', 'pond', 'ph', 'dissolved_oxygen', 'temperature',
        'salinity', 'quality_score', 'overall_quality', 'farm',
    ]
    list_filter = ['overall_quality', 'testing_method', 'weather_condition', 'date']
    raw_id_fields = ['farm', 'pond', 'season', 'chemical_used', 'created_by']
    readonly_fields = ['quality_score', 'overall_quality', 'created_at', 'updated_at']

    fieldsets = (
        ('Reading', {
            'fields': ('farm', 'pond', 'season', 'date', 'time')
        }),
        ('Core Parameters', {
            'fields': ('ph', 'dissolved_oxygen', 'temperature', 'salinity')
        }),
        ('Additional Parameters', {
            'fields': ('ammonia', 'nitrite', 'nitrate', 'alkalinity', 'hardness', 'turbidity'),
            'classes': ('collapse',)
        }),
        ('Treatment', {
            'fields': ('chemical_used', 'chemical_quantity_used')
        }),
        ('Conditions', {
            'fields': ('testing_method', 'testing_depth', 'weather_condition', 'notes')
        }),
        ('Score', {
            'fields': ('quality_score', 'overall_quality', 'created_by', 'created_at', 'updated_at')
        }),
    )
