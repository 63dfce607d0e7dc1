"""
Serializers for Expense Tracking.
"""

from rest_framework import serializers

from employees.models import Employee
from farms.i18n import get_request_language, translate
from farms.serializers import FarmScopedRelatedField
from ponds.models import Pond, Season
from .models import Expense, ExpenseCategory


# =============================================================================
# EXPENSE SERIALIZERS
# =============================================================================

class ExpenseListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for expense lists"""
    main_category_display = serializers.CharField(source='get_main_category_display', read_only=True)
    pond_name = serializers.SerializerMethodField()
    employee_name = serializers.CharField(source='employee.name', read_only=True, allow_null=True)

    class Meta:
        model = Expense
        fields = [
            'id', 'date', 'amount', 'main_category', 'main_category_display',
            'sub_category', 'description', 'season', 'pond', 'pond_name',
            'employee', 'employee_name', 'created_at',
        ]
        read_only_fields = fields

    def get_pond_name(self, obj):
        if obj.pond is None:
            return None
        return translate(obj.pond.name, get_request_language(self.context.get('request')))


class ExpenseSerializer(ExpenseListSerializer):
    """Create, update and detail serializer"""
    season = FarmScopedRelatedField(queryset=Season.objects.all())
    pond = FarmScopedRelatedField(queryset=Pond.objects.all(), required=False, allow_null=True)
    employee = FarmScopedRelatedField(queryset=Employee.objects.all(), required=False, allow_null=True)
    season_name = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, allow_null=True)

    class Meta(ExpenseListSerializer.Meta):
        fields = ExpenseListSerializer.Meta.fields + [
            'season_name', 'receipt_url', 'created_by', 'created_by_name', 'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_season_name(self, obj):
        return translate(obj.season.name, get_request_language(self.context.get('request')))

    def validate_sub_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Sub-category is required')
        return value

    def validate(self, attrs):
        def current(field):
            if field in attrs:
                return attrs[field]
            return getattr(self.instance, field, None)

        season = current('season')
        pond = current('pond')
        if pond is not None and season is not None and pond.season_id != season.id:
            raise serializers.ValidationError({'pond': 'Pond does not belong to the selected season'})

        if current('main_category') == ExpenseCategory.SALARY and current('employee') is None:
            raise serializers.ValidationError({'employee': 'Salary expenses must reference an employee'})

        return attrs
