"""
Views for Employees.

API Endpoints:
- /api/employees/ - List/create employees (filters: status, role, search, ordering)
- /api/employees/{id}/ - Retrieve/update/delete employee
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, filters

from farms.permissions import FarmScopedMixin
from .models import Employee
from .serializers import EmployeeSerializer

logger = logging.getLogger(__name__)


class EmployeeListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/employees/
    POST /api/employees/

    Query Parameters:
    - status: Active, Inactive
    - role: Exact role
    - search: Name, role or email
    - ordering: name, hire_date, salary (prefix with - for descending)
    """
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'role']
    search_fields = ['name', 'role', 'email']
    ordering_fields = ['name', 'hire_date', 'salary', 'created_at']
    ordering = ['name']

    def perform_create(self, serializer):
        employee = serializer.save(farm=self.get_farm())
        logger.info(f"Employee added: {employee.name} ({employee.id}) to farm {employee.farm_id}")


class EmployeeDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer

    def perform_destroy(self, instance):
        logger.info(f"Employee removed: {instance.name} ({instance.id})")
        instance.delete()
