from django.contrib import admin

from .models import FeedInput


@admin.register(FeedInput)
class FeedInputAdmin(admin.ModelAdmin):
    list_display = ['date', 'time', 'pond', 'inventory_item', 'quantity', 'feed_type', 'total_cost', 'farm']
    list_filter = ['feed_type', 'feeding_method', 'date']
    search_fields = ['notes']
    raw_id_fields = ['farm', 'pond', 'season', 'inventory_item', 'created_by']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-date', '-time']
