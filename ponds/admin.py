from django.contrib import admin

from .models import Season, Pond, NurseryBatch


class PondInline(admin.TabularInline):
    model = Pond
    extra = 0
    fields = ['name', 'size', 'capacity', 'status']


@admin.register(Season)
class SeasonAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'farm', 'start_date', 'end_date', 'status']
    list_filter = ['status']
    raw_id_fields = ['farm']
    inlines = [PondInline]
    ordering = ['-start_date']


@admin.register(Pond)
class PondAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'farm', 'season', 'size', 'capacity', 'status']
    list_filter = ['status']
    raw_id_fields = ['farm', 'season']


@admin.register(NurseryBatch)
class NurseryBatchAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'farm', 'season', 'species', 'initial_count', 'start_date', 'status']
    list_filter = ['status', 'species']
    search_fields = ['species', 'source']
    raw_id_fields = ['farm', 'season']
