"""
Tareas Backend: Middleware Tests
================================

What:  Request ID propagation and the auth form rate limit.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tareas.middleware.rate_limit import AuthRateLimitMiddleware
from tareas.middleware.request_id import RequestIDMiddleware


def limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()

    @app.post("/login")
    async def login():
        return {"ok": True}

    @app.get("/login")
    async def login_page():
        return {"ok": True}

    app.add_middleware(AuthRateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    app.add_middleware(RequestIDMiddleware)
    return app


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_when_missing(self, test_client):
        response = await test_client.get("/login")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/login", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unsafe_client_value_replaced(self, test_client):
        response = await test_client.get("/login", headers={"X-Request-ID": "bad id with spaces"})
        assert response.headers["X-Request-ID"] != "bad id with spaces"


class TestAuthRateLimit:

    @pytest.mark.asyncio
    async def test_blocks_after_limit(self):
        transport = ASGITransport(app=limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.post("/login")).status_code == 200
            assert (await client.post("/login")).status_code == 200

            blocked = await client.post("/login")

        assert blocked.status_code == 429
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert int(blocked.headers["Retry-After"]) > 0
        assert blocked.json()["request_id"] == blocked.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_get_requests_not_counted(self):
        transport = ASGITransport(app=limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(3):
                assert (await client.get("/login")).status_code == 200
            assert (await client.post("/login")).status_code == 200
