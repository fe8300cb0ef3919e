"""
Tareas Backend: Request Logging Middleware
==========================================

What:  One access log line per request: method, path, status, duration, request ID.
How:   Level follows the status class: 5xx ERROR, 4xx WARNING, rest INFO.
       Auth redirects (303 to the login page) are logged at INFO.

What we log vs what we DON'T log (privacy):
    Log:       method, path, status, duration, client IP, request ID
    Don't log: request bodies (passwords, task text), cookies, query strings
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tareas.middleware.request_id import request_id_var

logger = logging.getLogger("tareas.access")

QUIET_PATHS = frozenset({"/health"})


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        ip = client_ip(request)
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": ip,
            },
        )
        return response
