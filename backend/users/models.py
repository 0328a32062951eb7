"""
User models for the Taskboard application.

This module defines the CustomUser model which extends Django's AbstractUser
with a UUID identity, a display name and the system-wide access level that
tokens carry as a claim.
"""

import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

from .access_levels import AccessLevel


class CustomUserManager(UserManager):
    """User manager that gives superusers the Admin system level."""

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("access_level", AccessLevel.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom user model extending Django's AbstractUser.

    ``access_level`` is the system-wide tier. Only Admin has meaning beyond
    per-workspace membership: it bypasses membership checks.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Email field - unique and required for all users
    email = models.EmailField(
        unique=True,
        blank=False,
        help_text="User's unique email address, required for all accounts",
    )

    name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name shown on boards and comments",
    )

    access_level = models.IntegerField(
        choices=AccessLevel.choices,
        default=AccessLevel.GUEST,
        help_text="System-wide access level; Admin bypasses membership checks",
    )

    created_date = models.DateTimeField(auto_now_add=True)

    objects = CustomUserManager()

    class Meta:
        ordering = ["username"]

    @property
    def access_level_name(self):
        return AccessLevel(self.access_level).label

    def __str__(self):
        return self.username or f"User {self.id} ({self.email})"
