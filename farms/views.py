"""
Farm profile endpoint.

GET   /api/farm/   - Current user's farm
PATCH /api/farm/   - Update farm name, location or currency (admin only)
"""

import logging

from rest_framework import generics, permissions

from .permissions import HasFarm, IsFarmAdmin
from .serializers import FarmSerializer

logger = logging.getLogger(__name__)


class FarmDetailView(generics.RetrieveUpdateAPIView):
    serializer_class = FarmSerializer
    http_method_names = ['get', 'patch', 'put', 'head', 'options']

    def get_permissions(self):
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated(), HasFarm()]
        return [permissions.IsAuthenticated(), IsFarmAdmin()]

    def get_object(self):
        return self.request.user.farm

    def perform_update(self, serializer):
        farm = serializer.save()
        logger.info(f"Farm {farm.id} updated by {self.request.user.username}")
