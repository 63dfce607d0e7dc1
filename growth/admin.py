from django.contrib import admin

from .models import GrowthSampling


@admin.register(GrowthSampling)
class GrowthSamplingAdmin(admin.ModelAdmin):
    list_display = ['date', 'time', 'pond', 'total_weight', 'total_count', 'average_weight_display', 'farm']
    list_filter = ['date']
    raw_id_fields = ['farm', 'pond', 'season', 'created_by']
    readonly_fields = ['created_at', 'updated_at']

    def average_weight_display(self, obj):
        return f"{obj.average_weight_grams} g"
    average_weight_display.short_description = 'Avg Weight'
