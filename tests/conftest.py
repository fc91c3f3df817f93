"""
tests/conftest.py -- Shared test fixtures for Session Gate.

This module provides:
  - codec / issuer / gate: session components built directly from the
    explicit keys in tests/helpers.py, no settings involved
  - api_app / client: TestClient over the real FastAPI app and lifespan,
    backed by a named shared-memory SQLite store
  - account: a registered user (email, password, id) for API tests

Environment must be set before any api/ import: api.main reads Settings at
import time. DEBUG=true lets Settings auto-generate secrets; ENVIRONMENT=local
keeps cookies non-Secure so the TestClient (plain http) sends them back.

Named shared-memory SQLite URIs are required because TestClient runs sync
route handlers in a thread pool; plain :memory: would give each thread a
blank schema.
"""

from __future__ import annotations

import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("ROOT_USER", "root@example.test")
os.environ.setdefault("ROOT_PASSWORD", "root-password-for-tests")
os.environ.setdefault("DATABASE_URL", "sqlite:///file:test_sessiongate?mode=memory&cache=shared&uri=true")

import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from auth.gate import SessionGate
from auth.issuer import CredentialIssuer
from auth.models import TokenClass, TokenPolicy
from auth.tokens import TokenCodec
from tests.helpers import ACCESS_SECRET, ACCESS_TTL, ID_KEY, REFRESH_SECRET, REFRESH_TTL_LONG, REFRESH_TTL_SHORT


# ---------------------------------------------------------------------------
# Unit-level session components
# ---------------------------------------------------------------------------


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(
        {
            TokenClass.ACCESS: TokenPolicy(secret=ACCESS_SECRET, lifetime=ACCESS_TTL),
            TokenClass.REFRESH: TokenPolicy(
                secret=REFRESH_SECRET,
                lifetime=REFRESH_TTL_SHORT,
                extended_lifetime=REFRESH_TTL_LONG,
            ),
        }
    )


@pytest.fixture
def issuer(codec: TokenCodec) -> CredentialIssuer:
    return CredentialIssuer(codec, ID_KEY, cookie_domain="example.test", secure_cookies=False)


@pytest.fixture
def gate(issuer: CredentialIssuer) -> SessionGate:
    return SessionGate(issuer)


# ---------------------------------------------------------------------------
# API-level fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_app() -> Generator[TestClient, None, None]:
    """One TestClient per test module; the real lifespan builds store, issuer and gate."""
    from api.main import app

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def client(api_app: TestClient) -> TestClient:
    """The module's TestClient with an empty cookie jar."""
    api_app.cookies.clear()
    return api_app


@pytest.fixture(scope="module")
def account(api_app: TestClient) -> dict:
    """Register a fresh account directly through the store; return its credentials."""
    from auth.passwords import register_user

    email = f"user-{uuid.uuid4().hex[:8]}@example.test"
    password = "correct-horse-battery"
    user = register_user(api_app.app.state.user_store, "Test User", email, password)
    return {"id": user.id, "email": email, "password": password}
