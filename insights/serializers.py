"""
Request bodies for pond comparisons.
"""

from rest_framework import serializers

from .services import METRICS


class PondComparisonSerializer(serializers.Serializer):
    pond_a_id = serializers.UUIDField()
    pond_b_id = serializers.UUIDField()
    metrics = serializers.ListField(
        child=serializers.ChoiceField(choices=list(METRICS)),
        allow_empty=False
    )

    def validate(self, attrs):
        if attrs['pond_a_id'] == attrs['pond_b_id']:
            raise serializers.ValidationError('Cannot compare a pond with itself')
        return attrs


class DateRangeComparisonSerializer(PondComparisonSerializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError('start_date must be on or before end_date')
        return attrs


class ComparisonExportSerializer(PondComparisonSerializer):
    format = serializers.ChoiceField(choices=['csv'], default='csv')
    mode = serializers.ChoiceField(choices=['current', 'historical'], default='historical')
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs['mode'] == 'current':
            if not attrs.get('start_date') or not attrs.get('end_date'):
                raise serializers.ValidationError(
                    'start_date and end_date are required for current season exports'
                )
            if attrs['start_date'] > attrs['end_date']:
                raise serializers.ValidationError('start_date must be on or before end_date')
        return attrs
