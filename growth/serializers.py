from rest_framework import serializers

from farms.i18n import get_request_language, translate
from farms.serializers import FarmScopedRelatedField, TimeOfDayField
from ponds.models import Pond, Season
from .models import GrowthSampling


class GrowthSamplingSerializer(serializers.ModelSerializer):
    time = TimeOfDayField()
    pond = FarmScopedRelatedField(queryset=Pond.objects.all())
    season = FarmScopedRelatedField(queryset=Season.objects.all(), required=False)
    pond_name = serializers.SerializerMethodField()
    average_weight = serializers.DecimalField(max_digits=12, decimal_places=6, read_only=True)
    average_weight_grams = serializers.FloatField(read_only=True)

    class Meta:
        model = GrowthSampling
        fields = [
            'id', 'date', 'time', 'pond', 'pond_name', 'season',
            'total_weight', 'total_count', 'average_weight', 'average_weight_grams',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_pond_name(self, obj):
        return translate(obj.pond.name, get_request_language(self.context.get('request')))

    def validate(self, attrs):
        pond = attrs.get('pond', getattr(self.instance, 'pond', None))
        if 'season' not in attrs:
            attrs['season'] = pond.season if 'pond' in attrs else self.instance.season
        if pond.season_id != attrs['season'].id:
            raise serializers.ValidationError({'pond': 'Pond does not belong to this season'})
        return attrs
