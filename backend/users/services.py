"""
User account service.

Registration, profile management and system role changes. Profile access
is limited to the user themself or a system Admin.
"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from .access_levels import AccessLevel, is_admin

logger = logging.getLogger(__name__)
User = get_user_model()


class UserService:
    """Account lifecycle operations with self-or-Admin authorization."""

    PROFILE_FIELDS = ("username", "email", "name", "password", "access_level")

    @transaction.atomic
    def register_user(self, username: str, email: str, password: str, name: str = ""):
        """
        Create a Guest-level account.

        Raises:
            ValidationError: Username or email already taken
        """
        logger.info(
            "User registration initiated",
            extra={
                "username": username,
                "action": "user_registration_start",
                "component": "UserService",
            },
        )

        if User.objects.filter(username=username).exists():
            logger.warning(
                "User registration failed - duplicate username",
                extra={
                    "username": username,
                    "action": "user_registration_duplicate_username",
                    "component": "UserService",
                    "severity": "medium",
                },
            )
            raise ValidationError({"username": "Username already exists"})

        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError({"email": "Email already exists"})

        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            name=name or username,
            access_level=AccessLevel.GUEST,
        )

        logger.info(
            "User registered successfully",
            extra={
                "user_id": str(user.id),
                "username": username,
                "action": "user_registration_success",
                "component": "UserService",
            },
        )
        return user

    def get_user(self, user_id, acting_user_id, system_access_level):
        self._ensure_self_or_admin(user_id, acting_user_id, system_access_level, "view")
        return self._get_user_or_404(user_id)

    def list_users(self, acting_user_id, system_access_level):
        if not is_admin(system_access_level):
            logger.warning(
                "User listing denied",
                extra={
                    "user_id": str(acting_user_id),
                    "action": "user_list_denied",
                    "component": "UserService",
                    "severity": "high",
                },
            )
            raise PermissionDenied("Only administrators can list users")
        return User.objects.all()

    @transaction.atomic
    def update_user(self, user_id, data: dict, acting_user_id, system_access_level):
        """
        Update profile fields.

        Only an Admin may change ``access_level``; everyone else gets it
        silently dropped from ``data``.

        Raises:
            PermissionDenied: Not the profile owner and not Admin
            NotFound: Unknown user
            ValidationError: Username or email collides with another account
        """
        self._ensure_self_or_admin(user_id, acting_user_id, system_access_level, "update")
        user = self._get_user_or_404(user_id)

        changes = {key: value for key, value in data.items() if key in self.PROFILE_FIELDS}
        if not is_admin(system_access_level):
            changes.pop("access_level", None)

        username = changes.get("username")
        if username and User.objects.filter(username=username).exclude(id=user.id).exists():
            raise ValidationError({"username": "Username already exists"})

        email = changes.get("email")
        if email and User.objects.filter(email__iexact=email).exclude(id=user.id).exists():
            raise ValidationError({"email": "Email already exists"})

        password = changes.pop("password", None)
        for field, value in changes.items():
            setattr(user, field, value)
        if password:
            user.set_password(password)
        user.save()

        logger.info(
            "User updated successfully",
            extra={
                "user_id": str(acting_user_id),
                "target_user_id": str(user.id),
                "updated_fields": sorted(changes.keys()) + (["password"] if password else []),
                "action": "user_update_success",
                "component": "UserService",
            },
        )
        return user

    @transaction.atomic
    def delete_user(self, user_id, acting_user_id, system_access_level):
        self._ensure_self_or_admin(user_id, acting_user_id, system_access_level, "delete")
        user = self._get_user_or_404(user_id)
        user.delete()

        logger.warning(
            "User deleted",
            extra={
                "user_id": str(acting_user_id),
                "target_user_id": str(user_id),
                "action": "user_deleted",
                "component": "UserService",
                "severity": "high",
            },
        )

    @transaction.atomic
    def set_system_access_level(self, user_id, new_level, acting_user_id, system_access_level):
        """
        Change a user's system-wide level. Admin only.

        The new level takes effect on the user's next issued token.
        """
        if not is_admin(system_access_level):
            raise PermissionDenied("Only administrators can change system roles")

        user = self._get_user_or_404(user_id)
        old_level = user.access_level
        user.access_level = AccessLevel(new_level)
        user.save(update_fields=["access_level"])

        logger.warning(
            "System access level changed",
            extra={
                "user_id": str(acting_user_id),
                "target_user_id": str(user.id),
                "old_access_level": AccessLevel(old_level).label,
                "new_access_level": AccessLevel(new_level).label,
                "action": "system_access_level_changed",
                "component": "UserService",
                "severity": "high",
            },
        )
        return user

    def _ensure_self_or_admin(self, user_id, acting_user_id, system_access_level, verb):
        if is_admin(system_access_level) or str(user_id) == str(acting_user_id):
            return

        logger.warning(
            "Profile access denied",
            extra={
                "user_id": str(acting_user_id),
                "target_user_id": str(user_id),
                "operation": verb,
                "action": "profile_access_denied",
                "component": "UserService",
                "severity": "medium",
            },
        )
        raise PermissionDenied(f"You can only {verb} your own profile")

    def _get_user_or_404(self, user_id):
        try:
            return User.objects.get(id=user_id)
        except (User.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound("User not found")
