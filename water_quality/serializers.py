from rest_framework import serializers

from farms.i18n import get_request_language, translate
from farms.serializers import FarmScopedRelatedField, TimeOfDayField
from inventory.models import InventoryItem
from inventory.services import CHEMICAL_TYPES
from ponds.models import Pond, Season
from .models import WaterQualityInput


class WaterQualityInputSerializer(serializers.ModelSerializer):
    time = TimeOfDayField()
    pond = FarmScopedRelatedField(queryset=Pond.objects.all())
    season = FarmScopedRelatedField(queryset=Season.objects.all(), required=False)
    chemical_used = FarmScopedRelatedField(
        queryset=InventoryItem.objects.all(), required=False, allow_null=True
    )
    pond_name = serializers.SerializerMethodField()
    chemical_name = serializers.SerializerMethodField()
    alerts = serializers.ListField(read_only=True)

    class Meta:
        model = WaterQualityInput
        fields = [
            'id', 'date', 'time', 'pond', 'pond_name', 'season',
            'ph', 'dissolved_oxygen', 'temperature', 'salinity',
            'ammonia', 'nitrite', 'nitrate', 'alkalinity', 'hardness', 'turbidity',
            'chemical_used', 'chemical_name', 'chemical_quantity_used',
            'testing_method', 'testing_depth', 'weather_condition', 'notes',
            'quality_score', 'overall_quality', 'alerts',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'quality_score', 'overall_quality', 'created_by', 'created_at', 'updated_at',
        ]

    def _language(self):
        return get_request_language(self.context.get('request'))

    def get_pond_name(self, obj):
        return translate(obj.pond.name, self._language())

    def get_chemical_name(self, obj):
        if obj.chemical_used is None:
            return None
        return translate(obj.chemical_used.item_name, self._language())

    def validate(self, attrs):
        pond = attrs.get('pond', getattr(self.instance, 'pond', None))
        if 'season' not in attrs:
            attrs['season'] = pond.season if 'pond' in attrs else self.instance.season
        if pond.season_id != attrs['season'].id:
            raise serializers.ValidationError({'pond': 'Pond does not belong to this season'})

        chemical = attrs.get('chemical_used', getattr(self.instance, 'chemical_used', None))
        quantity = attrs.get('chemical_quantity_used', getattr(self.instance, 'chemical_quantity_used', None))
        if chemical is not None:
            if not quantity:
                raise serializers.ValidationError({
                    'chemical_quantity_used': 'Chemical quantity is required when a chemical is used'
                })
            if 'chemical_used' in attrs:
                if not chemical.is_active:
                    raise serializers.ValidationError({'chemical_used': 'Inventory item not found or is inactive'})
                if chemical.item_type not in CHEMICAL_TYPES:
                    raise serializers.ValidationError({
                        'chemical_used': 'Inventory item must be of type Chemical or Probiotic'
                    })

        return attrs


class WaterQualitySyncRowSerializer(serializers.Serializer):
    """Bookkeeping fields of one offline-sync row."""
    id = serializers.UUIDField(required=False)
    updated_at = serializers.DateTimeField(required=False)
