from django.contrib import admin

from .models import Farm


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'location', 'currency', 'created_at']
    search_fields = ['name', 'location', 'owner__username']
    list_filter = ['currency']
