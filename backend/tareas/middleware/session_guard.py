"""
Tareas Backend: Edge Session Guard Middleware
=============================================

What:  Redirects unauthenticated requests for protected pages to the login page.
How:   For paths equal to or under the protected prefix (default /dashboard)
       the session cookie is validated through the same AccessGate the route
       guards use. No principal → 303 to the login page. Otherwise the
       request passes through unmodified.

The prefix match is coarse (an allow-list of one prefix). Route handlers
under the prefix still depend on require_page_principal.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER
from starlette.types import ASGIApp

from tareas.config import settings
from tareas.services.access_gate import AccessGate

logger = logging.getLogger(__name__)


def is_protected(path: str, prefix: str) -> bool:
    """`/dashboard` and `/dashboard/...` match; `/dashboards` does not."""
    return path == prefix or path.startswith(prefix + "/")


class SessionGuardMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app: ASGIApp,
        prefix: Optional[str] = None,
        login_path: Optional[str] = None,
    ):
        super().__init__(app)
        self.prefix = prefix or settings.protected_path_prefix
        self.login_path = login_path or settings.login_path

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not is_protected(request.url.path, self.prefix):
            return await call_next(request)

        gate = AccessGate(request.app.state.identity, settings.session_cookie_name)
        principal = await gate.resolve(request.cookies)
        if principal is None:
            logger.info("No session for %s; redirecting to %s", request.url.path, self.login_path)
            return RedirectResponse(self.login_path, status_code=HTTP_303_SEE_OTHER)

        return await call_next(request)
