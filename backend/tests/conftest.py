"""
Tareas Backend: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `tareas` import so the
       settings singleton is built from them. The app is created with an
       in-memory identity provider and its task store dependency is
       overridden with an in-memory store; no network or database is needed.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── identity:    FakeIdentityProvider with no accounts
    ├── task_store:  InMemoryTaskStore shared by every request of one test
    ├── alice / bob: Principals registered in `identity`
    ├── db_session:  AsyncSession on in-memory SQLite (aiosqlite)
    ├── app:         FastAPI app wired to the two fakes
    └── test_client: HTTPX AsyncClient for endpoint testing
"""

import os

# Must run before tareas.config is imported
os.environ["SUPABASE_URL"] = "https://example.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key-not-real"
os.environ["SESSION_COOKIE_SECURE"] = "false"  # cookies travel over http://test
os.environ["LOG_LEVEL"] = "WARNING"

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tareas.config import settings
from tareas.database import Base
from tareas.dependencies import get_task_store
from tareas.exceptions import IdentityServiceError
from tareas.main import create_app
from tareas.schemas.task import AuthSession, Principal, TaskResponse
from tareas.services.identity import IdentityProvider
from tareas.services.task_store import TaskStore


# ══════════════════════════════════════════════════════════════════════════
# In-memory collaborators
# ══════════════════════════════════════════════════════════════════════════


class FakeIdentityProvider(IdentityProvider):
    """Accounts and sessions kept in dicts; tokens are opaque random strings."""

    def __init__(self):
        self.accounts: Dict[str, tuple] = {}  # email -> (password, Principal)
        self.sessions: Dict[str, Principal] = {}  # token -> Principal
        self.validate_calls = 0
        self.signed_out: List[str] = []

    def add_account(self, email: str, password: str = "secret123") -> Principal:
        principal = Principal(id=str(uuid.uuid4()), email=email)
        self.accounts[email] = (password, principal)
        return principal

    def issue_token(self, principal: Principal) -> str:
        token = f"tok-{uuid.uuid4().hex}"
        self.sessions[token] = principal
        return token

    async def validate_credential(self, credential: Optional[str]) -> Optional[Principal]:
        self.validate_calls += 1
        if not credential:
            return None
        return self.sessions.get(credential)

    async def sign_up(self, email: str, password: str) -> Principal:
        if email in self.accounts:
            raise IdentityServiceError(message="User already registered")
        return self.add_account(email, password)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise IdentityServiceError(message="Invalid login credentials")
        principal = account[1]
        return AuthSession(access_token=self.issue_token(principal), principal=principal, expires_in=3600)

    async def sign_out(self, credential: str) -> None:
        self.signed_out.append(credential)
        self.sessions.pop(credential, None)

    async def health_check(self) -> str:
        return "configured"


class InMemoryTaskStore(TaskStore):
    """
    TaskStore over a list.

    created_at advances one second per insert so newest-first ordering does
    not depend on clock resolution.
    """

    def __init__(self):
        self.rows: List[TaskResponse] = []
        self._clock = itertools.count()
        self._epoch = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def list_owned(self, owner_id: str) -> List[TaskResponse]:
        owned = [t for t in self.rows if t.user_id == owner_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    async def insert_owned(self, owner_id: str, text: str) -> TaskResponse:
        task = TaskResponse(
            id=uuid.uuid4(),
            user_id=owner_id,
            text=text,
            done=False,
            created_at=self._epoch + timedelta(seconds=next(self._clock)),
        )
        self.rows.append(task)
        return task

    async def delete_owned(self, owner_id: str, task_id: uuid.UUID) -> bool:
        before = len(self.rows)
        self.rows = [t for t in self.rows if not (t.id == task_id and t.user_id == owner_id)]
        return len(self.rows) < before


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def alice(identity) -> Principal:
    return identity.add_account("alice@example.com")


@pytest.fixture
def bob(identity) -> Principal:
    return identity.add_account("bob@example.com")


@pytest_asyncio.fixture
async def db_session():
    """
    AsyncSession on a fresh in-memory SQLite database.

    The schema comes from the ORM metadata; StaticPool keeps the single
    in-memory connection alive for the whole test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def mock_store():
    """
    A TaskStore mock for service tests.

    Usage:
        mock_store.list_owned.return_value = [task]
        await task_service.list_tasks(mock_store, principal)
    """
    store = AsyncMock(spec=TaskStore)
    store.list_owned = AsyncMock(return_value=[])
    store.insert_owned = AsyncMock()
    store.delete_owned = AsyncMock(return_value=True)
    return store


@pytest.fixture
def app(identity, task_store):
    application = create_app(identity=identity)
    application.dependency_overrides[get_task_store] = lambda: task_store
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app through ASGITransport.

    Redirects are not followed so tests can assert on 303 responses.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def login_as(client: AsyncClient, identity: FakeIdentityProvider, principal: Principal) -> str:
    """Put a valid session cookie for `principal` into the client's jar."""
    token = identity.issue_token(principal)
    client.cookies.set(settings.session_cookie_name, token)
    return token


@pytest.fixture
def login(test_client, identity):
    """Returns login_as bound to the test client and identity provider."""
    return lambda principal: login_as(test_client, identity, principal)
