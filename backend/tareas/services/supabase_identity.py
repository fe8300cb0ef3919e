"""
Tareas Backend: Supabase Auth Identity Provider
===============================================

What:  IdentityProvider implementation backed by Supabase Auth (GoTrue).
How:   Uses the async `supabase` client. The client is created lazily on
       first use and shared by all requests; it is configured with
       persist_session=False and auto_refresh_token=False so no principal's
       session is ever held inside the shared client. Every call passes the
       caller's own access token explicitly.

Calls made (one network round trip each, no retries):
    validate_credential → auth.get_user(jwt)
    sign_up             → auth.sign_up({email, password})
    sign_in_with_password → auth.sign_in_with_password({email, password})
    sign_out            → auth.admin.sign_out(jwt)
"""

import asyncio
import logging
from typing import Optional

import httpx
from supabase import AsyncClient, AuthError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from tareas.config import settings
from tareas.exceptions import IdentityServiceError
from tareas.schemas.task import AuthSession, Principal
from tareas.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


class SupabaseIdentityProvider(IdentityProvider):
    """Supabase Auth wrapper used by the access gate and account flows."""

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        self.url = url if url is not None else settings.supabase_url
        self.key = key if key is not None else settings.supabase_anon_key
        self._client: Optional[AsyncClient] = None
        self._client_lock = asyncio.Lock()

    def is_configured(self) -> bool:
        return bool(self.url and self.key)

    async def _get_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client
        if not self.is_configured():
            raise IdentityServiceError(
                message="The authentication service is not configured",
                context={"missing": "SUPABASE_URL / SUPABASE_ANON_KEY"},
            )
        async with self._client_lock:
            if self._client is None:
                self._client = await acreate_client(
                    self.url,
                    self.key,
                    options=AsyncClientOptions(
                        persist_session=False,
                        auto_refresh_token=False,
                    ),
                )
                logger.info("Supabase client initialized for %s", self.url)
        return self._client

    async def validate_credential(self, credential: Optional[str]) -> Optional[Principal]:
        if not credential:
            return None

        try:
            client = await self._get_client()
            response = await client.auth.get_user(credential)
        except AuthError as e:
            # Expired, malformed or revoked token: not an error for the caller
            logger.debug("Credential rejected by identity service: %s", e)
            return None
        except (httpx.HTTPError, IdentityServiceError) as e:
            logger.warning("Credential validation failed: %s", e)
            return None

        user = response.user if response else None
        if user is None:
            return None
        return Principal(id=str(user.id), email=user.email)

    async def sign_up(self, email: str, password: str) -> Principal:
        client = await self._get_client()
        try:
            response = await client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            logger.info("Sign-up refused: %s", e.message)
            raise IdentityServiceError(message=e.message, context={"code": getattr(e, "code", None)})
        except httpx.HTTPError as e:
            logger.error("Sign-up request failed: %s", e)
            raise IdentityServiceError(context={"error_type": type(e).__name__})

        if response.user is None:
            raise IdentityServiceError(message="Failed to create account")

        logger.info("Account created: %s", response.user.id)
        return Principal(id=str(response.user.id), email=response.user.email)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        client = await self._get_client()
        try:
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.info("Sign-in refused: %s", e.message)
            raise IdentityServiceError(message=e.message, context={"code": getattr(e, "code", None)})
        except httpx.HTTPError as e:
            logger.error("Sign-in request failed: %s", e)
            raise IdentityServiceError(context={"error_type": type(e).__name__})

        if response.user is None or response.session is None:
            raise IdentityServiceError(message="Invalid login credentials")

        logger.info("Session opened for %s", response.user.id)
        return AuthSession(
            access_token=response.session.access_token,
            principal=Principal(id=str(response.user.id), email=response.user.email),
            expires_in=response.session.expires_in,
        )

    async def sign_out(self, credential: str) -> None:
        client = await self._get_client()
        try:
            await client.auth.admin.sign_out(credential)
        except AuthError as e:
            raise IdentityServiceError(message=e.message, context={"code": getattr(e, "code", None)})
        except httpx.HTTPError as e:
            raise IdentityServiceError(context={"error_type": type(e).__name__})

    async def health_check(self) -> str:
        if not self.is_configured():
            return "unconfigured"
        try:
            await self._get_client()
        except Exception as e:
            logger.warning("Identity service health check failed: %s", e)
            return "unavailable"
        return "configured"
