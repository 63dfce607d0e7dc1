from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from farms.i18n import supported_languages
from farms.models import Farm

User = get_user_model()


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.
    Creates the user together with the farm they will administer.
    """
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    farm_name = serializers.CharField(write_only=True, required=False, max_length=200)
    farm_location = serializers.CharField(write_only=True, required=False, allow_blank=True, max_length=255)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'password', 'password_confirm',
            'first_name', 'last_name', 'language', 'farm_name', 'farm_location',
        )
        read_only_fields = ('id',)

    def validate(self, attrs):
        """Validate that passwords match."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError(
                {"password": "Password fields didn't match."}
            )
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        """Create a new user, their farm, and make them its admin."""
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        farm_name = validated_data.pop('farm_name', None) or f"{validated_data['username']}'s Farm"
        farm_location = validated_data.pop('farm_location', '')

        user = User(**validated_data)
        user.role = User.UserRole.ADMIN
        user.set_password(password)
        user.save()

        farm = Farm.objects.create(name=farm_name, location=farm_location, owner=user)
        user.farm = farm
        user.save(update_fields=['farm'])

        return user


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for user details.
    Used for retrieving and updating the user's own profile.
    """
    full_name = serializers.CharField(source='get_full_name', read_only=True)
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    farm_name = serializers.CharField(source='farm.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'full_name',
            'role', 'role_display', 'language', 'farm', 'farm_name',
            'is_active', 'date_joined', 'last_login',
        )
        read_only_fields = (
            'id', 'username', 'full_name', 'role', 'role_display', 'farm',
            'farm_name', 'is_active', 'date_joined', 'last_login',
        )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom JWT token serializer that includes additional user information.
    """
    def validate(self, attrs):
        data = super().validate(attrs)

        data['user'] = {
            'id': str(self.user.id),
            'username': self.user.username,
            'email': self.user.email,
            'role': self.user.role,
            'language': self.user.language,
            'farm': str(self.user.farm_id) if self.user.farm_id else None,
            'full_name': self.user.get_full_name(),
        }

        return data


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for password change endpoint."""
    old_password = serializers.CharField(required=True, write_only=True)
    new_password = serializers.CharField(
        required=True,
        write_only=True,
        validators=[validate_password]
    )
    new_password_confirm = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        """Validate that new passwords match."""
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError(
                {"new_password": "New password fields didn't match."}
            )
        return attrs

    def validate_old_password(self, value):
        """Validate that old password is correct."""
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError("Old password is incorrect.")
        return value


class LanguageSerializer(serializers.Serializer):
    language = serializers.CharField()

    def validate_language(self, value):
        languages = supported_languages()
        if value not in languages:
            raise serializers.ValidationError(
                f"Invalid language. Supported languages: {', '.join(languages)}"
            )
        return value


class FarmUserSerializer(serializers.ModelSerializer):
    """
    Farm admins create and edit the other users of their farm.
    """
    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'password',
            'role', 'role_display', 'language', 'is_active', 'date_joined',
        )
        read_only_fields = ('id', 'role_display', 'date_joined')

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required.'})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
