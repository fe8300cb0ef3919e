"""
Tareas Backend: Page Route Handlers
===================================

What:  Server-rendered login, register and dashboard pages plus the form
       actions behind them.
How:   Jinja2 templates; forms post back here and successful posts answer
       with a 303 redirect (post/redirect/get) so a reload never re-submits.
       Failed posts re-render the same page with the error message inline.

Guarding:
    /dashboard/** handlers depend on require_page_principal. The edge
    SessionGuardMiddleware has normally redirected an anonymous request
    already; the dependency is the check that always applies.
"""

import logging
from pathlib import Path
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from tareas.config import settings
from tareas.dependencies import Credential, Identity, OptionalPrincipal, PagePrincipal, Store
from tareas.exceptions import IdentityServiceError, TaskStoreError, ValidationError
from tareas.schemas.task import Principal
from tareas.services.auth_service import auth_service
from tareas.services.task_service import task_service
from tareas.services.task_store import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], default_response_class=HTMLResponse)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

DASHBOARD_PATH = "/dashboard"


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def set_session_cookie(response: Response, access_token: str, max_age: Optional[int] = None) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        access_token,
        max_age=max_age or settings.session_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


# ══════════════════════════════════════════════════════════════════════════
# Root router
# ══════════════════════════════════════════════════════════════════════════


@router.get("/", summary="Send the visitor to the dashboard or the login page")
async def home(principal: OptionalPrincipal) -> RedirectResponse:
    if principal is not None:
        return redirect(DASHBOARD_PATH)
    return redirect(settings.login_path)


# ══════════════════════════════════════════════════════════════════════════
# Login / Register
# ══════════════════════════════════════════════════════════════════════════


@router.get("/login", summary="Login form")
async def login_page(request: Request, principal: OptionalPrincipal) -> Response:
    if principal is not None:
        return redirect(DASHBOARD_PATH)
    return templates.TemplateResponse(request, "login.html", {"error": None, "email": ""})


@router.post("/login", summary="Open a session with email and password")
async def login(
    request: Request,
    identity: Identity,
    email: str = Form(""),
    password: str = Form(""),
) -> Response:
    try:
        session = await auth_service.login(identity, email, password)
    except (ValidationError, IdentityServiceError) as e:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": e.message, "email": email},
            status_code=status.HTTP_400_BAD_REQUEST
            if isinstance(e, ValidationError)
            else status.HTTP_401_UNAUTHORIZED,
        )

    response = redirect(DASHBOARD_PATH)
    set_session_cookie(response, session.access_token, session.expires_in)
    return response


@router.get("/register", summary="Registration form")
async def register_page(request: Request) -> Response:
    return templates.TemplateResponse(
        request, "register.html", {"error": None, "success": False, "email": ""}
    )


@router.post("/register", summary="Create an account")
async def register(
    request: Request,
    identity: Identity,
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
) -> Response:
    try:
        await auth_service.register(identity, email, password, confirm_password)
    except (ValidationError, IdentityServiceError) as e:
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error": e.message, "success": False, "email": email},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return templates.TemplateResponse(
        request,
        "register.html",
        {"error": None, "success": True, "email": email},
        status_code=status.HTTP_201_CREATED,
    )


# ══════════════════════════════════════════════════════════════════════════
# Dashboard
# ══════════════════════════════════════════════════════════════════════════


async def render_dashboard(
    request: Request,
    principal: Principal,
    store: TaskStore,
    error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    tasks = await task_service.list_tasks(store, principal)
    response = templates.TemplateResponse(
        request,
        "dashboard.html",
        {"principal": principal, "tasks": tasks, "error": error},
        status_code=status_code,
    )
    response.headers["Cache-Control"] = "private, no-store"
    return response


@router.get(DASHBOARD_PATH, summary="The caller's task list")
async def dashboard(request: Request, principal: PagePrincipal, store: Store) -> Response:
    return await render_dashboard(request, principal, store)


@router.post(DASHBOARD_PATH + "/tasks", summary="Create a task from the dashboard form")
async def dashboard_create_task(
    request: Request,
    principal: PagePrincipal,
    store: Store,
    text: str = Form(""),
) -> Response:
    try:
        await task_service.create_task(store, principal, text)
    except ValidationError as e:
        return await render_dashboard(
            request, principal, store, error=e.message, status_code=status.HTTP_400_BAD_REQUEST
        )
    except TaskStoreError as e:
        return await render_dashboard(
            request, principal, store, error=e.message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return redirect(DASHBOARD_PATH)


@router.post(DASHBOARD_PATH + "/tasks/{task_id}/delete", summary="Delete a task from the dashboard")
async def dashboard_delete_task(
    request: Request,
    task_id: UUID,
    principal: PagePrincipal,
    store: Store,
) -> Response:
    try:
        await task_service.delete_task(store, principal, task_id)
    except TaskStoreError as e:
        return await render_dashboard(
            request, principal, store, error=e.message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return redirect(DASHBOARD_PATH)


# ══════════════════════════════════════════════════════════════════════════
# Logout
# ══════════════════════════════════════════════════════════════════════════


@router.post("/logout", summary="Close the session and return to the login page")
async def logout(identity: Identity, credential: Credential) -> RedirectResponse:
    await auth_service.logout(identity, credential)
    response = redirect(settings.login_path)
    clear_session_cookie(response)
    return response
