"""
Serializers for seasons, ponds and nursery batches.
"""

from rest_framework import serializers

from farms.i18n import MultilingualField, get_request_language, translate
from farms.serializers import FarmScopedRelatedField
from .models import Season, Pond, NurseryBatch


class SeasonSerializer(serializers.ModelSerializer):
    name = MultilingualField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Season
        fields = [
            'id', 'name', 'start_date', 'end_date', 'status', 'status_display',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})

        name = attrs.get('name')
        request = self.context.get('request')
        if name and request is not None:
            english = translate(name, 'en').lower()
            clashes = Season.objects.filter(farm_id=request.user.farm_id)
            if self.instance is not None:
                clashes = clashes.exclude(pk=self.instance.pk)
            if english and any(translate(s.name, 'en').lower() == english for s in clashes.only('name')):
                raise serializers.ValidationError({'name': 'A season with this name already exists'})

        return attrs


class SeasonSummarySerializer(serializers.ModelSerializer):
    name = MultilingualField(read_only=True)

    class Meta:
        model = Season
        fields = ['id', 'name', 'start_date', 'end_date', 'status']


class PondSerializer(serializers.ModelSerializer):
    name = MultilingualField()
    season = FarmScopedRelatedField(queryset=Season.objects.all())
    season_name = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Pond
        fields = [
            'id', 'name', 'size', 'capacity', 'season', 'season_name',
            'status', 'status_display', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_season_name(self, obj):
        return translate(obj.season.name, get_request_language(self.context.get('request')))


class NurseryBatchSerializer(serializers.ModelSerializer):
    batch_name = MultilingualField()
    season = FarmScopedRelatedField(queryset=Season.objects.all())
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = NurseryBatch
        fields = [
            'id', 'batch_name', 'start_date', 'initial_count', 'species', 'source',
            'season', 'size', 'capacity', 'status', 'status_display',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PondCopySerializer(serializers.Serializer):
    source_season_id = serializers.UUIDField()
    target_season_id = serializers.UUIDField()

    def validate(self, attrs):
        if attrs['source_season_id'] == attrs['target_season_id']:
            raise serializers.ValidationError('Source and target seasons must be different')
        return attrs
