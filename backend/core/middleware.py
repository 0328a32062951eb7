import logging
import time

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class RequestAuditMiddleware:
    """
    Audit log for API requests.

    Every request under /api/ is logged with its status and duration. In DEBUG
    mode the number of executed database queries is attached as well.
    """

    QUERY_THRESHOLDS = {"HIGH": 50, "MEDIUM": 25, "LOW": 10}

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api/"):
            return self.get_response(request)

        started = time.monotonic()
        initial_queries = len(connection.queries) if settings.DEBUG else 0

        response = self.get_response(request)

        duration_ms = round((time.monotonic() - started) * 1000, 2)
        user = getattr(request, "user", None)
        user_id = str(user.id) if user is not None and user.is_authenticated else None

        extra_context = {
            "request_path": request.path,
            "request_method": request.method,
            "status_code": response.status_code,
            "user_id": user_id,
            "duration_ms": duration_ms,
            "action": "api_request_completed",
            "component": "RequestAuditMiddleware",
        }

        if response.status_code >= 500:
            logger.error("API request failed", extra={**extra_context, "severity": "critical"})
        elif response.status_code in (401, 403):
            logger.warning("API request denied", extra={**extra_context, "severity": "medium"})
        else:
            logger.info("API request completed", extra=extra_context)

        if settings.DEBUG:
            self._log_query_metrics(request, len(connection.queries) - initial_queries)

        return response

    def _log_query_metrics(self, request, query_count):
        """Log query count with severity depending on thresholds."""
        thresholds = self.QUERY_THRESHOLDS

        extra_context = {
            "request_path": request.path,
            "request_method": request.method,
            "query_count": query_count,
            "action": "query_count_monitoring",
            "component": "RequestAuditMiddleware",
        }

        if query_count >= thresholds["HIGH"]:
            logger.warning(
                "HIGH query count detected",
                extra={
                    **extra_context,
                    "severity": "high",
                    "threshold": thresholds["HIGH"],
                    "recommendation": "Check for N+1 queries in membership lookups",
                },
            )
        elif query_count >= thresholds["MEDIUM"]:
            logger.info(
                "Medium query count",
                extra={**extra_context, "severity": "medium", "threshold": thresholds["MEDIUM"]},
            )
        elif query_count >= thresholds["LOW"]:
            logger.debug(
                "Normal query count",
                extra={**extra_context, "severity": "low", "threshold": thresholds["LOW"]},
            )
