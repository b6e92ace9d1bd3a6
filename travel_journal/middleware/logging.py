"""
Travel Journal Backend — Request Logging Middleware
=====================================================

What:  One access-log line per HTTP request.
How:   Measures the time spent downstream and logs method, path, status,
       duration, request id, caller and client IP on the
       "travel_journal.access" logger.

Level by status class: 5xx ERROR, 4xx WARNING, everything else INFO.
Request bodies and Authorization headers are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from travel_journal.middleware.request_id import request_id_var

logger = logging.getLogger("travel_journal.access")

SKIPPED_PATHS = {"/api/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    The caller's user id is read from request.state.user_id, which the
    authentication gate sets; anonymous requests log "-".
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # Probes run every few seconds
        if path in SKIPPED_PATHS:
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        user_id = getattr(request.state, "user_id", None)

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            user_id if user_id is not None else "-",
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "user_id": user_id,
                "client_ip": client_ip,
            },
        )

        return response
