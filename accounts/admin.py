from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

User = get_user_model()


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for the custom User model."""

    list_display = ('username', 'email', 'farm', 'role', 'language', 'is_active', 'date_joined')
    list_filter = ('role', 'language', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'first_name', 'last_name', 'farm__name')
    ordering = ('-date_joined',)

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Farm', {'fields': ('farm', 'role', 'language')}),
    )
