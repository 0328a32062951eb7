# core/mixins/principal_context.py
"""
Principal context mixin.

Resolves the acting identity from the verified token before permission
checks run, so permission classes and services see the same principal.
"""

import logging

from rest_framework.exceptions import NotAuthenticated

from users.claims import principal_from_request

logger = logging.getLogger(__name__)


class PrincipalContextMixin:
    """Attach ``request.principal`` during ``initial``."""

    def initial(self, request, *args, **kwargs):
        request.principal = principal_from_request(request)

        logger.debug(
            "Principal context initialized",
            extra={
                "user_id": str(request.principal.user_id) if request.principal else None,
                "system_access_level": (
                    request.principal.system_access_level.label
                    if request.principal and request.principal.system_access_level is not None
                    else None
                ),
                "action": "principal_context_initialized",
                "component": "PrincipalContextMixin",
            },
        )

        super().initial(request, *args, **kwargs)

    def get_principal(self):
        """
        Return the request principal or fail with 401.

        Raises:
            NotAuthenticated: The token carries no usable user id
        """
        principal = getattr(self.request, "principal", None)
        if principal is None:
            logger.warning(
                "Request without usable identity",
                extra={
                    "request_path": self.request.path,
                    "action": "principal_missing",
                    "component": "PrincipalContextMixin",
                    "severity": "medium",
                },
            )
            raise NotAuthenticated("User ID is missing or invalid")
        return principal
