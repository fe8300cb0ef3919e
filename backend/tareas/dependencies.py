"""
Tareas Backend: FastAPI Dependencies
====================================

What:  Request-scoped collaborators injected into route handlers.
How:   The session cookie is read exactly once, by session_credential(), and
       passed on explicitly. Handlers never reach into the request for it;
       they receive either the raw credential (logout) or the resolved
       Principal (everything else).

Guards:
    require_page_principal → raises LoginRequiredError (redirect to /login)
    require_api_principal  → raises AuthenticationError (401)
    optional_principal     → None when there is no valid session
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tareas.config import settings
from tareas.database import get_db_session
from tareas.exceptions import AuthenticationError, LoginRequiredError
from tareas.schemas.task import Principal
from tareas.services.access_gate import AccessGate, extract_credential
from tareas.services.identity import IdentityProvider
from tareas.services.task_store import SqlTaskStore, TaskStore


def get_identity(request: Request) -> IdentityProvider:
    """The identity provider chosen by create_app()."""
    return request.app.state.identity


def get_access_gate(identity: IdentityProvider = Depends(get_identity)) -> AccessGate:
    return AccessGate(identity, settings.session_cookie_name)


def session_credential(request: Request) -> Optional[str]:
    """The raw session cookie value, or None."""
    return extract_credential(request.cookies, settings.session_cookie_name)


async def optional_principal(
    credential: Optional[str] = Depends(session_credential),
    gate: AccessGate = Depends(get_access_gate),
) -> Optional[Principal]:
    return await gate.resolve_credential(credential)


async def require_page_principal(
    principal: Optional[Principal] = Depends(optional_principal),
) -> Principal:
    if principal is None:
        raise LoginRequiredError(login_path=settings.login_path)
    return principal


async def require_api_principal(
    principal: Optional[Principal] = Depends(optional_principal),
) -> Principal:
    if principal is None:
        raise AuthenticationError()
    return principal


async def get_task_store(db: AsyncSession = Depends(get_db_session)) -> TaskStore:
    return SqlTaskStore(db)


# Type aliases for cleaner dependency injection
Identity = Annotated[IdentityProvider, Depends(get_identity)]
Credential = Annotated[Optional[str], Depends(session_credential)]
OptionalPrincipal = Annotated[Optional[Principal], Depends(optional_principal)]
PagePrincipal = Annotated[Principal, Depends(require_page_principal)]
ApiPrincipal = Annotated[Principal, Depends(require_api_principal)]
Store = Annotated[TaskStore, Depends(get_task_store)]
