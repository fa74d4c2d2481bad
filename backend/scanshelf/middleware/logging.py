"""
ScanShelf Backend: Request Logging Middleware
==============================================

What:  One access log line per HTTP request.
How:   Measures time from middleware entry to response and logs method,
       path, status, duration and request ID. Level follows the status:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.
When:  After RequestIDMiddleware (uses request ID for correlation).

Request bodies are never logged: scanned codes and imported files stay out
of the access log.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from scanshelf.middleware.request_id import request_id_var

logger = logging.getLogger("scanshelf.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
        )

        return response
