import re

from rest_framework import serializers

from .models import Farm
from .validators import TIME_PATTERN, normalize_time_of_day


class FarmSerializer(serializers.ModelSerializer):
    owner_username = serializers.CharField(source='owner.username', read_only=True)
    currency_display = serializers.CharField(source='get_currency_display', read_only=True)

    class Meta:
        model = Farm
        fields = [
            'id', 'name', 'location', 'currency', 'currency_display',
            'owner', 'owner_username', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']


class FarmScopedRelatedField(serializers.PrimaryKeyRelatedField):
    """
    Primary key field limited to records of the requesting user's farm.
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        request = self.context.get('request')
        if request is None or not getattr(request.user, 'farm_id', None):
            return queryset.none()
        return queryset.filter(farm_id=request.user.farm_id)


class TimeOfDayField(serializers.CharField):
    """
    24h ``HH:MM`` time stored as text.

    Accepts a single-digit hour and stores it zero-padded, so times sort
    and compare correctly as strings.
    """
    default_error_messages = {
        'invalid_time': 'Invalid time format (HH:MM)',
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data).strip()
        if not re.match(TIME_PATTERN, value):
            self.fail('invalid_time')
        return normalize_time_of_day(value)
