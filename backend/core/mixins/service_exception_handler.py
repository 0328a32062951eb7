"""
Service exception handler mixin.

Provides unified exception handling for service layer calls made from views:
structured audit logging plus translation of non-DRF errors into DRF
exceptions with proper HTTP status codes.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

logger = logging.getLogger(__name__)


class ServiceExceptionHandlerMixin:
    """
    Mixin for handling service layer exceptions in views.

    Service errors are DRF ``APIException`` subclasses already carrying their
    status code, so they are logged and re-raised unchanged. Django and Python
    exceptions are converted; anything unexpected becomes a generic 500 so no
    internals leak to the client.

    Usage:
        workspace = self.handle_service_call(
            self.workspace_service.get_workspace,
            workspace_id, principal.user_id, principal.system_access_level,
        )
    """

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute service call with exception handling and logging.

        Args:
            service_call: Service method to execute
            *args: Positional arguments for service call
            **kwargs: Keyword arguments for service call

        Returns:
            Any: Result from service call

        Raises:
            APIException: Service errors with their own status code
            DRFValidationError: For Django validation failures
            DRFPermissionDenied: For Django/Python permission failures
            NotFound: For unhandled ``DoesNotExist`` lookups
        """
        service_name = getattr(service_call, "__self__", self).__class__.__name__
        method_name = getattr(service_call, "__name__", str(service_call))
        request = getattr(self, "request", None)
        principal = getattr(request, "principal", None) if request else None
        user_id = str(principal.user_id) if principal else None

        log_context = {
            "service_name": service_name,
            "method_name": method_name,
            "user_id": user_id,
        }

        logger.debug(
            "Service call execution initiated",
            extra={
                **log_context,
                "args_count": len(args),
                "kwargs_keys": list(kwargs.keys()),
                "action": "service_call_start",
                "component": "ServiceExceptionHandlerMixin",
            },
        )

        try:
            result = service_call(*args, **kwargs)

            logger.debug(
                "Service call completed successfully",
                extra={
                    **log_context,
                    "result_type": type(result).__name__,
                    "action": "service_call_success",
                    "component": "ServiceExceptionHandlerMixin",
                },
            )

            return result

        except APIException as e:
            logger.warning(
                "Service call rejected",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_detail": e.detail,
                    "status_code": e.status_code,
                    "action": "service_call_rejected",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high" if e.status_code in (401, 403) else "medium",
                },
            )
            raise

        except DjangoValidationError as e:
            error_messages = e.messages if hasattr(e, "messages") else [str(e)]

            logger.warning(
                "Service validation error (Django)",
                extra={
                    **log_context,
                    "error_type": "DjangoValidationError",
                    "error_messages": error_messages,
                    "action": "service_validation_error_django",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )
            raise DRFValidationError(error_messages)

        except (DjangoPermissionDenied, PermissionError) as e:
            logger.warning(
                "Service permission denied",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_permission_denied",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )
            raise DRFPermissionDenied(str(e) or None)

        except ObjectDoesNotExist as e:
            logger.warning(
                "Service lookup failed",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_lookup_failed",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )
            raise NotFound()

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                    "action": "service_unexpected_error",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "critical",
                },
                exc_info=True,
            )

            # Generic error to prevent information leakage
            raise APIException(detail="Service operation failed", code="service_error")
