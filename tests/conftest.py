"""
tests/conftest.py -- Shared test fixtures for UserHub unit and integration tests.

This module provides:
  - store: an isolated in-memory UserStore per test
  - users / sessions: services wired to that store
  - client: TestClient over the real app with a patched lifespan
  - register() / login() / auth_header(): small helpers for route tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
Each test gets its own DB name so state never leaks between tests.

DEBUG and BCRYPT_ROUNDS must be set before any auth module import:
get_settings() then auto-generates SECRET_KEY and bcrypt runs at its minimum
cost so the suite stays fast.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any auth/core import so get_settings() sees them.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.sessions import SessionService
from auth.store import UserStore
from auth.users import UserLifecycleService

# ---------------------------------------------------------------------------
# Store and service fixtures
# ---------------------------------------------------------------------------


def _make_test_store() -> UserStore:
    """Create a UserStore on a uniquely named shared-memory SQLite DB."""
    name = f"test_userhub_{uuid.uuid4().hex}"
    return UserStore(db_url=f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true")


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = _make_test_store()
    yield s
    s.close()


@pytest.fixture
def users(store: UserStore) -> UserLifecycleService:
    return UserLifecycleService(store)


@pytest.fixture
def sessions(store: UserStore) -> SessionService:
    return SessionService(store)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(store: UserStore, users: UserLifecycleService, sessions: SessionService):
    """Return an async context manager that replaces the real lifespan.

    Wires the test store and services into app.state so TestClient routes see
    an isolated DB rather than the default SQLite file.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = store
        app.state.users = users
        app.state.sessions = sessions
        yield

    return test_lifespan


@pytest.fixture
def client(
    store: UserStore, users: UserLifecycleService, sessions: SessionService
) -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app backed by the test store."""
    app.router.lifespan_context = _patch_lifespan(store, users, sessions)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# Route helpers -- exposed as fixtures so test modules need no conftest import
# ---------------------------------------------------------------------------


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: TestClient):
    """Return a helper that POSTs /users and returns the JSON body, asserting 201."""

    def _register(email: str, password: str = "pw-123", name: str = "Test", **extra) -> dict:
        resp = client.post("/users", json={"name": name, "email": email, "password": password, **extra})
        assert resp.status_code == 201, f"Expected 201, got {resp.status_code}: {resp.text}"
        return resp.json()

    return _register


@pytest.fixture
def login(client: TestClient):
    """Return a helper that POSTs /login and returns an Authorization header dict."""

    def _login(email: str, password: str = "pw-123") -> dict[str, str]:
        resp = client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200, f"Expected 200, got {resp.status_code}: {resp.text}"
        return auth_header(resp.json()["token"])

    return _login
