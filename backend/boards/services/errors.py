"""
Typed failures raised by the boards service layer.

Each kind is a DRF ``APIException`` so the view layer maps it to its HTTP
status without inspecting messages.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class ResourceNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"
    default_code = "not_found"


class AccessForbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions to perform this action"
    default_code = "forbidden"


class InvalidAssignment(AccessForbidden):
    """An elevation request broke the actor ceiling or the workspace ceiling."""

    default_detail = "Cannot assign access level higher than your own"
    default_code = "invalid_assignment"


class MembershipConflict(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Membership already exists"
    default_code = "conflict"


class MissingIdentity(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "User ID is missing or invalid"
    default_code = "missing_identity"


def require_identity(user_id):
    """Mutating operations need an acting user id."""
    if user_id is None:
        raise MissingIdentity()
    return user_id
