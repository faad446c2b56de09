"""
NotesVault Backend: Access Log Middleware
=========================================

What:  One access-log line per HTTP request on logger `notesvault.access`.
How:   Times the downstream call and logs request id, method, path, status,
       duration and client address at a level chosen from the status code.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, IP, request ID
    ❌ Don't log: request or response bodies (note text), Authorization header
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notesvault.middleware.request_id import request_id_var

access_logger = logging.getLogger("notesvault.access")

# Probed every few seconds by load balancers
QUIET_PATHS = frozenset({"/health", "/favicon.ico"})


def level_for_status(status_code: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else INFO."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client = request.client.host if request.client else "-"
        access_logger.log(
            level_for_status(response.status_code),
            "[%s] %s %s -> %d (%.1fms) client=%s",
            request_id_var.get("") or "-",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            client,
        )
        return response
