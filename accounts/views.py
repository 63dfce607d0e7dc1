import logging

from django.contrib.auth import get_user_model
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from farms.permissions import IsFarmAdmin
from .serializers import (
    UserRegistrationSerializer,
    UserSerializer,
    CustomTokenObtainPairSerializer,
    ChangePasswordSerializer,
    LanguageSerializer,
    FarmUserSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


class UserRegistrationView(generics.CreateAPIView):
    """
    API endpoint for user registration.
    No authentication required. The new user administers a new farm.
    """
    queryset = User.objects.all()
    serializer_class = UserRegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered user {user.username} with farm {user.farm_id}")

        refresh = RefreshToken.for_user(user)

        return Response({
            'message': 'User registered successfully',
            'user': UserSerializer(user).data,
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token),
            }
        }, status=status.HTTP_201_CREATED)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Custom JWT token obtain view with additional user information.
    """
    serializer_class = CustomTokenObtainPairSerializer


class UserProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for retrieving and updating user profile.
    """
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


class ChangePasswordView(APIView):
    """
    API endpoint for changing user password.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={'request': request}
        )
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save()
        logger.info(f"Password changed for {user.username}")

        return Response({
            'message': 'Password changed successfully'
        }, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """
    API endpoint for user logout.
    Blacklists the refresh token.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh_token')
        if not refresh_token:
            return Response(
                {'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            'message': 'Logout successful'
        }, status=status.HTTP_200_OK)


class LanguageSettingView(APIView):
    """
    PUT /api/settings/language/

    Update the authenticated user's preferred language.
    """
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request):
        serializer = LanguageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.language = serializer.validated_data['language']
        user.save(update_fields=['language'])

        return Response({
            'message': 'Language updated successfully',
            'language': user.language,
        })

    patch = put


class FarmUserListCreateView(generics.ListCreateAPIView):
    """
    GET  /api/auth/users/  - Users of the admin's farm (filters: role, is_active)
    POST /api/auth/users/  - Add a user to the admin's farm
    """
    serializer_class = FarmUserSerializer
    permission_classes = [permissions.IsAuthenticated, IsFarmAdmin]

    def get_queryset(self):
        users = User.objects.filter(farm=self.request.user.farm)

        role = self.request.query_params.get('role')
        if role:
            users = users.filter(role=role)

        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            users = users.filter(is_active=is_active.lower() == 'true')

        return users.order_by('username')

    def perform_create(self, serializer):
        user = serializer.save(farm=self.request.user.farm)
        logger.info(f"User {user.username} added to farm {user.farm_id} as {user.role}")


class FarmUserDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/auth/users/<uuid>/
    """
    serializer_class = FarmUserSerializer
    permission_classes = [permissions.IsAuthenticated, IsFarmAdmin]

    def get_queryset(self):
        return User.objects.filter(farm=self.request.user.farm)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {'error': 'You cannot delete your own account'},
                status=status.HTTP_400_BAD_REQUEST
            )
        logger.info(f"User {user.username} removed from farm {user.farm_id}")
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
