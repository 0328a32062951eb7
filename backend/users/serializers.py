"""
Serializers for user registration, login and profile management.

Access levels travel over the API by name ("Guest", "Member", "Owner",
"Admin"); ordinals are accepted on input as well.
"""

import logging
import re

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import (TokenObtainPairSerializer,
                                                  TokenRefreshSerializer)

from .access_levels import AccessLevel
from .claims import AccessLevelRefreshToken

logger = logging.getLogger(__name__)
User = get_user_model()


class AccessLevelField(serializers.Field):
    """Access level rendered by name, parsed from name or ordinal."""

    default_error_messages = {
        "invalid": "Invalid access level. Expected one of: Guest, Member, Owner, Admin.",
    }

    def to_representation(self, value):
        return AccessLevel(value).label

    def to_internal_value(self, data):
        level = AccessLevel.parse(data)
        if level is None:
            self.fail("invalid")
        return level


class UserSerializer(serializers.ModelSerializer):
    access_level = AccessLevelField(read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "name", "access_level", "created_date")
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=150)
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_username(self, value):
        value = value.strip()
        if not re.match(r"^[a-zA-Z0-9_\.]+$", value):
            raise serializers.ValidationError(
                "Username can only contain letters, numbers, underscores and dots."
            )
        return value


class AccessLevelTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Login: token pair plus the user and its access level name."""

    token_class = AccessLevelRefreshToken

    def validate(self, attrs):
        try:
            data = super().validate(attrs)
        except AuthenticationFailed:
            logger.warning(
                "Login failed - invalid credentials",
                extra={
                    "username": attrs.get(self.username_field),
                    "action": "login_failed",
                    "component": "AccessLevelTokenObtainPairSerializer",
                    "severity": "medium",
                },
            )
            raise

        data["access_level"] = AccessLevel(self.user.access_level).label
        data["user"] = UserSerializer(self.user).data

        logger.info(
            "Login successful",
            extra={
                "user_id": str(self.user.id),
                "action": "login_success",
                "component": "AccessLevelTokenObtainPairSerializer",
            },
        )
        return data


class AccessLevelTokenRefreshSerializer(TokenRefreshSerializer):
    token_class = AccessLevelRefreshToken


class UserUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=150, required=False)
    email = serializers.EmailField(required=False)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    password = serializers.CharField(
        write_only=True, required=False, validators=[validate_password]
    )
    access_level = AccessLevelField(required=False)


class RoleUpdateSerializer(serializers.Serializer):
    access_level = AccessLevelField()
