"""
Identity extraction from verified JWT payloads and token issuing.

Parsing never raises: a missing or malformed claim yields ``None`` and the
caller decides whether that is fatal.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from .access_levels import AccessLevel, is_admin

logger = logging.getLogger(__name__)


def _access_level_claim():
    return getattr(settings, "ACCESS_LEVEL_CLAIM", "access_level")


@dataclass(frozen=True)
class Principal:
    """Acting identity for one request."""

    user_id: uuid.UUID
    system_access_level: Optional[AccessLevel] = None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.system_access_level)


def get_user_id(payload) -> Optional[uuid.UUID]:
    if not payload:
        return None

    raw = payload.get(api_settings.USER_ID_CLAIM)
    if raw is None:
        return None

    try:
        return raw if isinstance(raw, uuid.UUID) else uuid.UUID(str(raw))
    except (TypeError, ValueError, AttributeError):
        logger.warning(
            "Unparseable user id claim",
            extra={
                "claim": api_settings.USER_ID_CLAIM,
                "action": "user_id_claim_invalid",
                "component": "claims",
                "severity": "medium",
            },
        )
        return None


def get_system_access_level(payload) -> Optional[AccessLevel]:
    if not payload:
        return None
    return AccessLevel.parse(payload.get(_access_level_claim()))


def principal_from_payload(payload) -> Optional[Principal]:
    user_id = get_user_id(payload)
    if user_id is None:
        return None
    return Principal(user_id=user_id, system_access_level=get_system_access_level(payload))


def principal_from_request(request) -> Optional[Principal]:
    """
    Build the principal for a DRF request.

    Token-authenticated requests are read from the token claims. Requests
    authenticated another way (session, ``force_authenticate``) fall back to
    the user record.
    """
    payload = getattr(getattr(request, "auth", None), "payload", None)
    if payload is not None:
        return principal_from_payload(payload)

    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return Principal(
            user_id=user.id,
            system_access_level=AccessLevel.parse(getattr(user, "access_level", None)),
        )
    return None


class AccessLevelRefreshToken(RefreshToken):
    """
    Refresh token carrying the system access level claim.

    The level is read from the user record every time an access token is
    derived, so a role change applies from the next refresh onwards.
    """

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token[_access_level_claim()] = AccessLevel(user.access_level).label
        return token

    @property
    def access_token(self):
        level = _current_access_level(self.payload.get(api_settings.USER_ID_CLAIM))
        self[_access_level_claim()] = level.label

        logger.info(
            "Access token issued",
            extra={
                "user_id": str(self.payload.get(api_settings.USER_ID_CLAIM)),
                "access_level": level.label,
                "action": "access_token_issued",
                "component": "AccessLevelRefreshToken",
            },
        )
        return super().access_token


def _current_access_level(user_id) -> AccessLevel:
    """
    Raises:
        AuthenticationFailed: The token's user is gone or inactive
    """
    User = get_user_model()
    level = (
        User.objects.filter(**{api_settings.USER_ID_FIELD: user_id}, is_active=True)
        .values_list("access_level", flat=True)
        .first()
    )
    if level is None:
        logger.warning(
            "Token refused - no active account",
            extra={
                "user_id": str(user_id),
                "action": "token_user_inactive",
                "component": "AccessLevelRefreshToken",
                "severity": "medium",
            },
        )
        raise AuthenticationFailed("No active account found for the given token", code="no_active_account")
    return AccessLevel(level)
