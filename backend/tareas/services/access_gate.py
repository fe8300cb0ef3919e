"""
Tareas Backend: Access Gate
===========================

What:  Decides whether a request belongs to an authenticated principal.
How:   extract_credential() reads the session cookie; AccessGate.resolve()
       hands it to the identity provider. The three surfaces (page guard,
       API guard, edge middleware) all call resolve() and differ only in
       what they do with "no principal":

    ┌──────────────────────┬──────────────────────┬─────────────────────────┐
    │ Surface              │ No principal         │ Principal               │
    ├──────────────────────┼──────────────────────┼─────────────────────────┤
    │ Page guard           │ 303 → /login         │ handler gets Principal  │
    │ API guard            │ 401 + JSON error     │ handler gets Principal  │
    │ Edge middleware      │ 303 → /login         │ request passes through  │
    └──────────────────────┴──────────────────────┴─────────────────────────┘

There is no session cache: every request is validated again.
"""

import logging
from typing import Mapping, Optional

from tareas.schemas.task import Principal
from tareas.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


def extract_credential(cookies: Mapping[str, str], cookie_name: str) -> Optional[str]:
    """Return the session cookie value, or None when it is absent or empty."""
    value = cookies.get(cookie_name)
    if not value:
        return None
    return value


class AccessGate:
    """Composes credential extraction and credential validation."""

    def __init__(self, identity: IdentityProvider, cookie_name: str):
        self.identity = identity
        self.cookie_name = cookie_name

    def credential_from(self, cookies: Mapping[str, str]) -> Optional[str]:
        return extract_credential(cookies, self.cookie_name)

    async def resolve(self, cookies: Mapping[str, str]) -> Optional[Principal]:
        return await self.resolve_credential(self.credential_from(cookies))

    async def resolve_credential(self, credential: Optional[str]) -> Optional[Principal]:
        if credential is None:
            return None
        principal = await self.identity.validate_credential(credential)
        if principal is None:
            logger.debug("Session cookie present but not valid")
        return principal
