"""
Tareas Backend: Abstract Identity Provider Interface
====================================================

What:  Abstract base class defining the contract with the identity service.
Why:   The access gate and the account flows only need these five calls.
       Keeping them behind an interface lets the gate be tested without the
       hosted platform and keeps SDK objects out of route handlers.
How:   SupabaseIdentityProvider implements it against Supabase Auth; tests
       use an in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tareas.schemas.task import AuthSession, Principal


class IdentityProvider(ABC):
    """
    Contract:
        - validate_credential() never raises; any failure means "no principal"
        - sign_up() / sign_in_with_password() raise IdentityServiceError with a
          user-facing message when the service refuses the request
        - sign_out() revokes the session named by the credential
    """

    @abstractmethod
    async def validate_credential(self, credential: Optional[str]) -> Optional[Principal]:
        """
        Resolve a raw session credential to the principal it belongs to.

        Args:
            credential: The session cookie value, or None when absent.

        Returns:
            The Principal for an active session, otherwise None. Malformed,
            expired and revoked credentials all return None.
        """
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Principal:
        """Create an account. Raises IdentityServiceError when refused."""
        ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Open a session. Raises IdentityServiceError on bad credentials."""
        ...

    @abstractmethod
    async def sign_out(self, credential: str) -> None:
        """Revoke the session named by the credential."""
        ...

    @abstractmethod
    async def health_check(self) -> str:
        """Return 'configured', 'unconfigured' or 'unavailable'."""
        ...
