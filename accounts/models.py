import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Each user belongs to one farm and reads names in their preferred language.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        MANAGER = 'manager', 'Farm Manager'
        OPERATOR = 'operator', 'Operator'
        VIEWER = 'viewer', 'Viewer'

    class Language(models.TextChoices):
        ENGLISH = 'en', 'English'
        HINDI = 'hi', 'Hindi'
        TAMIL = 'ta', 'Tamil'
        KANNADA = 'kn', 'Kannada'
        TELUGU = 'te', 'Telugu'

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.VIEWER,
        db_index=True,
        help_text="User's role within their farm"
    )

    language = models.CharField(
        max_length=5,
        choices=Language.choices,
        default=Language.ENGLISH,
        help_text="Preferred language for multilingual names"
    )

    farm = models.ForeignKey(
        'farms.Farm',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='members',
        help_text="Farm this user belongs to"
    )

    class Meta:
        db_table = 'users'
        ordering = ['username']

    def __str__(self):
        return self.username
