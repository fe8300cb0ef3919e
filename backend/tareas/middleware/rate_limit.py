"""
Tareas Backend: Auth Rate Limiting Middleware
=============================================

What:  Per-IP sliding window limit on login and registration form posts.
Why:   Every attempt costs a round trip to the identity service; the limit
       slows down password guessing and sign-up spam from one address.
How:   Keeps request timestamps per IP in memory, drops those older than
       the window, and answers 429 once the window is full.

Only single-process deployments share one counter; each worker process
counts on its own.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from tareas.config import settings
from tareas.exceptions import RateLimitExceededError
from tareas.middleware.logging import client_ip
from tareas.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

LIMITED_PATHS: FrozenSet[str] = frozenset({"/login", "/register"})


class AuthRateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter for credential-bearing posts.

    Configuration (from settings unless given explicitly):
        auth_rate_limit_requests: Max attempts per window (default: 20)
        auth_rate_limit_window: Window duration in seconds (default: 300)
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        paths: FrozenSet[str] = LIMITED_PATHS,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.auth_rate_limit_requests
        self.window_seconds = window_seconds or settings.auth_rate_limit_window
        self.paths = paths
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path not in self.paths:
            return await call_next(request)

        ip = client_ip(request)
        now = time.time()
        window_start = now - self.window_seconds

        recent = [ts for ts in self._requests[ip] if ts > window_start]
        self._requests[ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning(
                "Auth rate limit exceeded for IP %s on %s: %d attempts in %ds",
                ip,
                request.url.path,
                len(recent),
                self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        recent.append(now)
        self._forget_idle(window_start)
        return await call_next(request)

    def _forget_idle(self, window_start: float) -> None:
        """Drop IPs whose last attempt fell out of the window."""
        idle = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in idle:
            del self._requests[ip]
