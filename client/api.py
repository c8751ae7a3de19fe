"""
client/api.py -- HTTP client for the token issuance API.

Submits a credential to POST /api/v1/user/login, keeps the returned token, and
presents it as "Authorization: Bearer <token>" on later calls. The token is
held in memory only; the client never writes it to disk.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests
from jose import jwt

from auth.errors import InvalidCredential
from auth.models import IssuedToken

logger = logging.getLogger("authgate.client.api")


class ApiClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        # Only same-host redirects are expected; 3 hops is generous.
        self._session.max_redirects = 3
        self.token: Optional[str] = None

    def login(self, username: str) -> IssuedToken:
        """Exchange a credential for a bearer token.

        Raises:
            InvalidCredential: The server answered 400 ("Invalid User").
            requests.HTTPError: Any other non-2xx answer.
        """
        resp = self._session.post(f"{self.base_url}/api/v1/user/login", json=username, timeout=self.timeout)
        if resp.status_code == 400:
            raise InvalidCredential(resp.json() if resp.content else "Invalid User")
        resp.raise_for_status()
        body = resp.json()
        self.token = body["token"]
        logger.info("Obtained token for %s", body["user"])
        # The response carries no expiry; read it from the unverified payload.
        return IssuedToken(user=body["user"], token=body["token"], expires_at=_expiry_of(body["token"]))

    def me(self) -> dict[str, Any]:
        """Return the server's view of the current token's claims."""
        resp = self._session.get(f"{self.base_url}/api/v1/user/me", headers=self._auth_headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def logout(self) -> None:
        self.token = None

    def _auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def _expiry_of(token: str) -> datetime:
    claims = jwt.get_unverified_claims(token)
    return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
