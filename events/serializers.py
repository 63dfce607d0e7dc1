from rest_framework import serializers

from farms.i18n import get_request_language, translate
from farms.serializers import FarmScopedRelatedField
from ponds.models import Pond, Season, NurseryBatch
from .models import Event, EventStatus
from .services import EventService


class EventSerializer(serializers.ModelSerializer):
    """
    Farm events. Type-specific ``details`` are checked by EventService;
    business rule failures surface as ``{'error': ...}`` responses.
    """
    season = FarmScopedRelatedField(queryset=Season.objects.all(), required=False)
    pond = FarmScopedRelatedField(queryset=Pond.objects.all(), required=False, allow_null=True)
    nursery_batch = FarmScopedRelatedField(
        queryset=NurseryBatch.objects.all(), required=False, allow_null=True
    )
    parent_event = FarmScopedRelatedField(
        queryset=Event.objects.all(), required=False, allow_null=True
    )

    target_name = serializers.SerializerMethodField()
    season_name = serializers.SerializerMethodField()
    event_type_display = serializers.CharField(source='get_event_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    priority_display = serializers.CharField(source='get_priority_display', read_only=True)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    days_until_due = serializers.IntegerField(read_only=True)
    can_be_modified = serializers.BooleanField(read_only=True)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, allow_null=True)
    approved_by_name = serializers.CharField(source='approved_by.username', read_only=True, allow_null=True)

    class Meta:
        model = Event
        fields = [
            'id', 'event_type', 'event_type_display', 'date', 'season', 'season_name',
            'pond', 'nursery_batch', 'target_name', 'details',
            'status', 'status_display', 'priority', 'priority_display',
            'labor_cost', 'material_cost', 'equipment_cost', 'other_cost', 'currency', 'total_cost',
            'notes', 'observations', 'parent_event',
            'requires_approval', 'approved_by', 'approved_by_name', 'approved_at',
            'is_overdue', 'days_until_due', 'can_be_modified',
            'created_by', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'approved_by', 'approved_at', 'created_by', 'created_at', 'updated_at',
        ]

    def _language(self):
        return get_request_language(self.context.get('request'))

    def get_target_name(self, obj):
        if obj.pond_id:
            return translate(obj.pond.name, self._language())
        if obj.nursery_batch_id:
            return translate(obj.nursery_batch.batch_name, self._language())
        return None

    def get_season_name(self, obj):
        return translate(obj.season.name, self._language())

    def validate(self, attrs):
        instance = self.instance
        if instance is not None and not instance.can_be_modified:
            changes = set(attrs) - {'status', 'notes', 'observations'}
            if changes:
                raise serializers.ValidationError(
                    'Completed or cancelled events can only change status, notes and observations'
                )

        def current(field):
            if field in attrs:
                return attrs[field]
            return getattr(instance, field, None) if instance is not None else None

        pond = current('pond')
        nursery_batch = current('nursery_batch')
        event_type = current('event_type')

        target = pond or nursery_batch
        season = attrs.get('season') or getattr(instance, 'season', None)
        if season is None and target is not None:
            season = target.season
        if season is None:
            raise serializers.ValidationError({'season': 'This field is required.'})
        if target is not None and target.season_id != season.id:
            raise serializers.ValidationError('Pond or nursery batch does not belong to this season')
        attrs['season'] = season

        status = current('status') or EventStatus.PLANNED
        requires_approval = current('requires_approval')
        approved_at = getattr(instance, 'approved_at', None)
        if status == EventStatus.COMPLETED and requires_approval and not approved_at:
            raise serializers.ValidationError({
                'status': 'Event requires approval before it can be completed'
            })

        if instance is None or {'event_type', 'details', 'pond', 'nursery_batch'} & set(attrs):
            request = self.context['request']
            EventService(request.user.farm, request.user).validate_details(
                event_type, current('details'), pond, nursery_batch
            )
        return attrs
