from rest_framework import serializers

from farms.i18n import get_request_language, translate
from farms.serializers import FarmScopedRelatedField, TimeOfDayField
from inventory.models import InventoryItem, ItemType
from ponds.models import Pond, Season
from .models import FeedInput


class FeedInputSerializer(serializers.ModelSerializer):
    time = TimeOfDayField()
    pond = FarmScopedRelatedField(queryset=Pond.objects.all())
    season = FarmScopedRelatedField(queryset=Season.objects.all(), required=False)
    inventory_item = FarmScopedRelatedField(queryset=InventoryItem.objects.all())

    pond_name = serializers.SerializerMethodField()
    inventory_item_name = serializers.SerializerMethodField()
    feed_type_display = serializers.CharField(source='get_feed_type_display', read_only=True)
    feeding_method_display = serializers.CharField(source='get_feeding_method_display', read_only=True)
    feeding_window = serializers.CharField(read_only=True)

    class Meta:
        model = FeedInput
        fields = [
            'id', 'date', 'time', 'pond', 'pond_name', 'season',
            'inventory_item', 'inventory_item_name', 'quantity',
            'feed_type', 'feed_type_display', 'feeding_method', 'feeding_method_display',
            'feeding_window', 'water_temperature', 'unit_cost', 'total_cost', 'notes',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def _language(self):
        return get_request_language(self.context.get('request'))

    def get_pond_name(self, obj):
        return translate(obj.pond.name, self._language())

    def get_inventory_item_name(self, obj):
        return translate(obj.inventory_item.item_name, self._language())

    def validate(self, attrs):
        pond = attrs.get('pond', getattr(self.instance, 'pond', None))
        season = attrs.get('season')
        if season is None:
            season = getattr(self.instance, 'season', None) if 'pond' not in attrs else pond.season
            attrs['season'] = season
        if pond is not None and season is not None and pond.season_id != season.id:
            raise serializers.ValidationError({'pond': 'Pond does not belong to this season'})

        item = attrs.get('inventory_item')
        if item is not None:
            if not item.is_active:
                raise serializers.ValidationError({'inventory_item': 'Inventory item not found or is inactive'})
            if item.item_type != ItemType.FEED:
                raise serializers.ValidationError({'inventory_item': 'Inventory item must be of type Feed'})

        return attrs
