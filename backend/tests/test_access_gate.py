"""
Tareas Backend: Access Gate Unit Tests
======================================

What:  Credential extraction, validation composition and the path matcher
       used by the edge session guard.
"""

import pytest

from tareas.middleware.session_guard import is_protected
from tareas.services.access_gate import AccessGate, extract_credential

COOKIE = "sb-access-token"


class TestExtractCredential:

    def test_present(self):
        assert extract_credential({COOKIE: "abc"}, COOKIE) == "abc"

    def test_absent(self):
        assert extract_credential({"other": "abc"}, COOKIE) is None

    def test_empty_value_counts_as_absent(self):
        assert extract_credential({COOKIE: ""}, COOKIE) is None


class TestAccessGate:

    @pytest.mark.asyncio
    async def test_valid_session_resolves_principal(self, identity, alice):
        token = identity.issue_token(alice)
        gate = AccessGate(identity, COOKIE)

        assert await gate.resolve({COOKIE: token}) == alice

    @pytest.mark.asyncio
    async def test_no_cookie_skips_identity_service(self, identity):
        gate = AccessGate(identity, COOKIE)

        assert await gate.resolve({}) is None
        assert identity.validate_calls == 0

    @pytest.mark.asyncio
    async def test_unknown_token(self, identity):
        gate = AccessGate(identity, COOKIE)
        assert await gate.resolve({COOKIE: "forged"}) is None

    @pytest.mark.asyncio
    async def test_revoked_token(self, identity, alice):
        token = identity.issue_token(alice)
        await identity.sign_out(token)
        gate = AccessGate(identity, COOKIE)

        assert await gate.resolve({COOKIE: token}) is None

    @pytest.mark.asyncio
    async def test_every_call_validates_again(self, identity, alice):
        token = identity.issue_token(alice)
        gate = AccessGate(identity, COOKIE)

        await gate.resolve({COOKIE: token})
        await gate.resolve({COOKIE: token})

        assert identity.validate_calls == 2


class TestIsProtected:

    @pytest.mark.parametrize("path", ["/dashboard", "/dashboard/", "/dashboard/tasks/1/delete"])
    def test_protected(self, path):
        assert is_protected(path, "/dashboard")

    @pytest.mark.parametrize("path", ["/", "/login", "/dashboards", "/api/tareas"])
    def test_not_protected(self, path):
        assert not is_protected(path, "/dashboard")
