"""
ScanShelf Backend: Request ID Middleware
=========================================

What:  Assigns an ID to each incoming request and returns it in a header.
How:   Reuses the client's X-Request-ID when it is a short token, otherwise
       generates a short UUID; stores it in a ContextVar for loggers and error handlers.
When:  Runs before the logging middleware so access logs carry the ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs are echoed into log lines; anything else is replaced
VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adds X-Request-ID to every response and exposes it via request_id_var."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", "")
        if not VALID_REQUEST_ID.fullmatch(rid):
            rid = uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
