# -*- coding: utf-8 -*-

"""
AV Tournament Admin test fixtures.

Provides a fake platform API (httpx.MockTransport), API clients, session
stores and a configured FastAPI test client.
"""

import json
import os
from typing import Any, Dict, List, Optional

# Environment must be set before the application modules are imported
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["DASHBOARD_POLL_INTERVAL"] = "3600"
os.environ["LOGOUT_ON_UNAUTHORIZED"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from av_admin.http_client import AdminApiClient
from av_admin.session import MemoryCredentialStorage, SessionContext, SessionStore

BACKEND_ORIGIN = "http://backend.test"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"
ADMIN_TOKEN = "test-access-token"


def make_user(index: int) -> Dict[str, Any]:
    """Platform user #index; every third user is suspended, user 5 has no email."""
    return {
        "_id": f"64b7f0c2a1{index:04d}",
        "uid": 100000 + index,
        "username": "bob" if index == 7 else f"player{index:02d}",
        "email": None if index == 5 else f"player{index:02d}@example.com",
        "status": "suspended" if index % 3 == 0 else "active",
        "balances": {"deposited": 100 * index, "winnings": 10 * index, "gifted": index},
    }


class FakeBackend:
    """
    In-memory stand-in for the platform API.

    Serves /auth/login, /analytics/overview and /users and records every
    request it receives.
    """

    def __init__(self):
        self.origin = BACKEND_ORIGIN
        self.email = ADMIN_EMAIL
        self.password = ADMIN_PASSWORD
        self.token = ADMIN_TOKEN
        self.users: List[Dict[str, Any]] = [make_user(i) for i in range(1, 46)]
        self.overview: Dict[str, Any] = {
            "metrics": {"users": 45, "tournaments": 12, "transactions": 340, "revenue": 1250000},
            "recent_activity": [
                {"type": "signup", "username": "player44"},
                {"type": "deposit", "amount": 500},
            ],
            "system_health": {"server": "ok", "db": "ok"},
        }
        self.requests: List[httpx.Request] = []
        self.offline = False
        self.overview_status: Optional[int] = None
        self.users_status: Optional[int] = None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)

        path = request.url.path
        if path == "/auth/login" and request.method == "POST":
            body = json.loads(request.content or b"{}")
            if body.get("email") == self.email and body.get("password") == self.password:
                return httpx.Response(200, json={"access_token": self.token, "token_type": "bearer"})
            return httpx.Response(401, json={"detail": "Invalid credentials"})

        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"detail": "Not authenticated"})

        if path == "/analytics/overview":
            if self.overview_status:
                return httpx.Response(self.overview_status, json={"detail": "Analytics unavailable"})
            return httpx.Response(200, json=self.overview)

        if path == "/users":
            if self.users_status:
                return httpx.Response(self.users_status, json={"detail": "Users unavailable"})
            return httpx.Response(200, json=self._users_page(request.url.params))

        return httpx.Response(404, json={"detail": "Not Found"})

    def _users_page(self, params: httpx.QueryParams) -> Dict[str, Any]:
        page = int(params.get("page", 1))
        per_page = int(params.get("per_page", 20))
        q = params.get("q", "").lower()
        status = params.get("status", "")

        matches = [
            u for u in self.users
            if (not q or q in u["username"].lower() or q in (u["email"] or "").lower())
            and (not status or u["status"] == status)
        ]
        start = (page - 1) * per_page
        return {"items": matches[start:start + per_page], "total": len(matches)}

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def backend() -> FakeBackend:
    """Fresh fake platform API."""
    return FakeBackend()


@pytest_asyncio.fixture
async def api(backend):
    """
    AdminApiClient wired to the fake backend.

    Yields:
        AdminApiClient: client whose transport is the fake backend
    """
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend.handle))
    yield AdminApiClient(origin=BACKEND_ORIGIN, client=client)
    await client.aclose()


@pytest.fixture
def store() -> SessionStore:
    """Session store with no credential."""
    return SessionStore(MemoryCredentialStorage())


@pytest.fixture
def signed_in_store() -> SessionStore:
    """Session store already holding the admin token."""
    store = SessionStore(MemoryCredentialStorage())
    store.set_credential(ADMIN_TOKEN)
    return store


@pytest.fixture
def session(signed_in_store) -> SessionContext:
    return SessionContext(signed_in_store)


@pytest_asyncio.fixture
async def test_client(api, store):
    """
    FastAPI test client around a console using the fake backend.

    Yields:
        AsyncClient: client bound to the ASGI app
    """
    from main import app
    from av_admin.console import AdminConsole

    console = AdminConsole(store, api, logout_on_unauthorized=False, poll_interval=3600)
    await console.start()
    app.state.console = console

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await console.close()
