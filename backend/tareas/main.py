"""
Tareas Backend: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires the identity provider, middleware, exception
       handlers and routers; uvicorn serves the module-level `app`
       (uvicorn tareas.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Req ID → Logging → Auth Rate Limit → Session Guard │
    │                                                     │
    │  Routes:                                            │
    │  /api/tareas   /login /register /dashboard /logout  │
    │  /health                                            │
    │                                                     │
    │  Exception Handlers:                                │
    │  LoginRequired→303 │ Auth→401 │ Validation→400      │
    │  NotFound→404 │ Identity→502 │ Store→500            │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from tareas import __version__
from tareas.config import settings
from tareas.database import dispose_engine
from tareas.exceptions import (
    AuthenticationError,
    IdentityServiceError,
    LoginRequiredError,
    NotFoundError,
    TareasError,
    TaskStoreError,
    ValidationError,
)
from tareas.middleware.logging import RequestLoggingMiddleware
from tareas.middleware.rate_limit import AuthRateLimitMiddleware
from tareas.middleware.request_id import RequestIDMiddleware, request_id_var
from tareas.middleware.session_guard import SessionGuardMiddleware
from tareas.routes import health, pages, tasks
from tareas.services.identity import IdentityProvider
from tareas.services.supabase_identity import SupabaseIdentityProvider

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once from the lifespan startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every request / statement at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Tareas backend %s starting up", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: /health reports the identity service as unconfigured
        logger.error("Configuration error: %s", str(e))

    logger.info("Protected prefix: %s, login page: %s", settings.protected_path_prefix, settings.login_path)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Tareas backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(code: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": code, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        LoginRequiredError   → 303 redirect to the login page
        AuthenticationError  → 401 Unauthorized
        ValidationError      → 400 Bad Request
        NotFoundError        → 404 Not Found
        IdentityServiceError → 502 Bad Gateway
        TaskStoreError       → 500 (generic message, details logged)
        TareasError (base)   → 500
        Exception (fallback) → 500 (stack trace logged, never returned)
    """

    @app.exception_handler(LoginRequiredError)
    async def handle_login_required(request: Request, exc: LoginRequiredError):
        return RedirectResponse(exc.login_path, status_code=HTTP_303_SEE_OTHER)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=error_body("not_authenticated", exc.message),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_body("not_found", exc.message),
        )

    @app.exception_handler(IdentityServiceError)
    async def handle_identity_error(request: Request, exc: IdentityServiceError):
        logger.error("[%s] Identity service error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content=error_body("identity_service_error", exc.message),
        )

    @app.exception_handler(TaskStoreError)
    async def handle_store_error(request: Request, exc: TaskStoreError):
        logger.error("[%s] Task store error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("store_error", exc.message),
        )

    @app.exception_handler(TareasError)
    async def handle_app_error(request: Request, exc: TareasError):
        logger.error("[%s] Application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(identity: Optional[IdentityProvider] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        identity: Identity provider to authenticate against. Defaults to
            Supabase Auth configured from settings; tests pass an in-memory one.
    """
    app = FastAPI(
        title="Tareas API",
        description="Multi-user to-do list backed by Supabase Auth and Postgres.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.identity = identity or SupabaseIdentityProvider()

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → RateLimit → SessionGuard → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(SessionGuardMiddleware)
    app.add_middleware(AuthRateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(tasks.router)
    app.include_router(health.router)

    return app


app = create_app()
