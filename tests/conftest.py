"""
tests/conftest.py -- Shared test fixtures for AuthGate integration tests.

This module provides:
  - api_client: TestClient for the JSON API, plus a valid bearer token
  - web_client: fresh TestClient per test with follow_redirects=False, so
    tests can assert on redirect Location headers and cookies never leak
    from one test's login into the next
  - fixed-clock TokenIssuer helpers for unit tests

The required configuration must be in the environment before any auth/core
import: Settings refuses to build without SECRET_KEY and the Facebook
credentials (ConfigurationMissing), and auth/oauth.py reads Settings at import.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

# CRITICAL: set required config before any auth/core import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-which-is-at-least-32-chars")
os.environ.setdefault("FACEBOOK_APP_ID", "test-app-id")
os.environ.setdefault("FACEBOOK_APP_SECRET", "test-app-secret")
# TestClient sends Host: testserver.
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
# The login route is rate-limited per IP; every TestClient request comes from the same one.
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.claims import ClaimsBuilder
from auth.signer import Signer
from auth.tokens import TokenIssuer
from auth.verifier import AllowListVerifier

TEST_SECRET = os.environ["SECRET_KEY"]
# Frozen per test session; tokens must still be unexpired when decoded against the real clock.
FIXED_NOW = datetime.now(timezone.utc).replace(microsecond=0)


def make_issuer(now: datetime = FIXED_NOW, secret: str = TEST_SECRET, verifier=None) -> TokenIssuer:
    """Build a TokenIssuer with a frozen clock and the reference defaults."""
    return TokenIssuer(
        verifier=verifier or AllowListVerifier(["Prerak"]),
        signer=Signer(secret, "myapi.com", "myapi.com"),
        claims=ClaimsBuilder("User"),
        validity=timedelta(days=7),
        clock=lambda: now,
    )


@pytest.fixture
def issuer() -> TokenIssuer:
    return make_issuer()


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str], None, None]:
    """Yield (client, token) for API integration tests.

    The token is obtained through the real login endpoint, so it is signed
    with the app's configured secret.
    """
    with TestClient(app, raise_server_exceptions=True) as client:
        resp = client.post("/api/v1/user/login", json="Prerak")
        assert resp.status_code == 200
        yield client, resp.json()["token"]


@pytest.fixture
def web_client() -> Generator[TestClient, None, None]:
    """Yield a fresh TestClient that does not follow redirects.

    Function-scoped: the cookie jar holds the OAuth session and the token
    cookie, and each test must start logged out.
    """
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client
