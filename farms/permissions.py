"""
Tenant isolation for farm-scoped API views.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.shortcuts import get_object_or_404
from rest_framework import permissions
from rest_framework.response import Response

from .exceptions import FarmOperationError


class HasFarm(permissions.BasePermission):
    """
    Permission check for farm members.
    Ensures the user belongs to a farm before touching farm records.
    """
    message = "You must belong to a farm to access farm records."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            getattr(request.user, 'farm_id', None) is not None
        )


class IsFarmAdmin(permissions.BasePermission):
    """Only the farm's admin users may manage other users."""
    message = "Only farm administrators can manage users."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            getattr(request.user, 'farm_id', None) is not None and
            request.user.role == 'admin'
        )


class CanWriteFarmRecords(permissions.BasePermission):
    """Viewers have read-only access."""
    message = "Your role only allows read access."

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return getattr(request.user, 'role', None) != 'viewer'


class FarmScopedMixin:
    """
    Mixin that filters querysets to only include data belonging to the user's farm.

    Records of other farms are never visible, so cross-farm lookups 404.
    """
    permission_classes = [permissions.IsAuthenticated, HasFarm, CanWriteFarmRecords]

    def get_farm(self):
        """Get the authenticated user's farm."""
        return self.request.user.farm

    def get_queryset(self):
        """Filter queryset to only include records from the user's farm."""
        queryset = super().get_queryset()
        return queryset.filter(farm=self.get_farm())

    def get_farm_object(self, model, pk, **filters):
        """Fetch a record of ``model`` owned by the user's farm or 404."""
        try:
            return get_object_or_404(model, pk=pk, farm=self.get_farm(), **filters)
        except (DjangoValidationError, ValueError):
            raise Http404(f"{model._meta.verbose_name.capitalize()} not found")

    def perform_create(self, serializer):
        serializer.save(farm=self.get_farm())

    def handle_exception(self, exc):
        if isinstance(exc, FarmOperationError):
            return Response({'error': exc.message}, status=exc.status_code)
        return super().handle_exception(exc)
