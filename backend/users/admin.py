"""
Django admin configuration for CustomUser model.

Extends the default UserAdmin with the display name and the system-wide
access level.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Admin for CustomUser with access level management."""

    list_display = ("username", "email", "name", "access_level", "is_active", "created_date")
    list_filter = UserAdmin.list_filter + ("access_level",)
    search_fields = ("username", "email", "name")

    fieldsets = UserAdmin.fieldsets + (
        ("Taskboard Profile", {"fields": ("name", "access_level")}),
    )

    add_fieldsets = UserAdmin.add_fieldsets + (
        ("Taskboard Profile", {"fields": ("email", "name", "access_level")}),
    )
