"""
Tareas Backend: Account Service
===============================

What:  Register, log in and log out through the identity provider.
Why:   Keeps the form rules (password confirmation, minimum length) out of the
       route handlers and in one testable place.
"""

import logging
from typing import Optional

from tareas.config import settings
from tareas.exceptions import IdentityServiceError, ValidationError
from tareas.schemas.task import AuthSession, Principal
from tareas.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, min_password_length: int = settings.min_password_length):
        self.min_password_length = min_password_length

    async def register(
        self,
        identity: IdentityProvider,
        email: str,
        password: str,
        confirm_password: str,
    ) -> Principal:
        """
        Create an account.

        Raises:
            ValidationError: missing email, mismatched or too-short password
                (checked before the identity service is called)
            IdentityServiceError: the identity service refused the sign-up
        """
        email = (email or "").strip()
        if not email:
            raise ValidationError(message="Email is required", field="email")
        if password != confirm_password:
            raise ValidationError(message="Passwords do not match", field="confirm_password")
        if len(password) < self.min_password_length:
            raise ValidationError(
                message=f"Password must be at least {self.min_password_length} characters",
                field="password",
            )
        return await identity.sign_up(email, password)

    async def login(self, identity: IdentityProvider, email: str, password: str) -> AuthSession:
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError(message="Email and password are required")
        return await identity.sign_in_with_password(email, password)

    async def logout(self, identity: IdentityProvider, credential: Optional[str]) -> None:
        """
        Revoke the session with the identity service.

        Failures are logged and swallowed: the caller clears the cookie and
        redirects to the login page regardless.
        """
        if not credential:
            return
        try:
            await identity.sign_out(credential)
        except IdentityServiceError as e:
            logger.warning("Sign-out was not confirmed by the identity service: %s", e.message)


auth_service = AuthService()
