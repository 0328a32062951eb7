# users/permissions.py
import logging

from rest_framework import permissions

from .claims import principal_from_request

logger = logging.getLogger(__name__)


def _principal(request):
    principal = getattr(request, "principal", None)
    return principal if principal is not None else principal_from_request(request)


class HasIdentityClaim(permissions.BasePermission):
    """
    Authenticated request whose token resolves to a user id.

    A token without a parseable user id is treated as unauthenticated.
    """

    message = "User ID is missing or invalid"

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False

        has_identity = _principal(request) is not None
        if not has_identity:
            logger.warning(
                "Identity claim missing",
                extra={
                    "request_path": request.path,
                    "action": "identity_claim_missing",
                    "component": "HasIdentityClaim",
                    "severity": "medium",
                },
            )
        return has_identity


class IsSystemAdmin(permissions.BasePermission):
    """
    System-wide Admin authorization.

    Authorization granted to principals whose token carries the Admin level.
    """

    message = "Only administrators can perform this action"

    def has_permission(self, request, view):
        principal = _principal(request)
        is_authorized = principal is not None and principal.is_admin

        if is_authorized:
            logger.debug(
                "System admin access granted",
                extra={
                    "user_id": str(principal.user_id),
                    "action": "system_admin_access_granted",
                    "component": "IsSystemAdmin",
                },
            )
        else:
            logger.warning(
                "System admin access denied",
                extra={
                    "user_id": str(principal.user_id) if principal else None,
                    "request_path": request.path,
                    "action": "system_admin_access_denied",
                    "component": "IsSystemAdmin",
                    "severity": "high",
                },
            )

        return is_authorized
