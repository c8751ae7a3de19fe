"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, almost no logic). Stores, issuers
and routes do the work; these only own the shape.

Layer rule: no imports from api/, web/, core/, or client/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlsplit

from auth.errors import CorrelationFailure

# Claim types carried in the token payload.
CLAIM_NAME = "name"
CLAIM_ROLE = "role"


@dataclass(frozen=True)
class Claim:
    """A typed assertion about a verified identity, e.g. ("role", "User")."""

    type: str
    value: str


@dataclass(frozen=True)
class VerifiedIdentity:
    """An identity that passed a credential check or a provider login.

    name is the display name written into the "name" claim. subject is the
    provider's stable user ID for delegated logins, None for local credentials.
    """

    name: str
    subject: str | None = None


@dataclass(frozen=True)
class IssuedToken:
    """The result of a successful issuance. The server keeps no copy."""

    user: str
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class LoginChallenge:
    """The two destinations of a delegated login.

    callback_uri is where the provider sends the browser back -- fixed and
    registered with the provider. return_destination is where the application
    sends the user after its own callback handler finishes. Using one in
    place of the other breaks state correlation on the callback.
    """

    callback_uri: str
    return_destination: str

    def __post_init__(self) -> None:
        if _path_of(self.callback_uri) == _path_of(self.return_destination):
            raise CorrelationFailure("return destination must differ from the provider callback")


def _path_of(uri: str) -> str:
    # callback_uri is absolute (http://host/signin-facebook); return_destination is a path.
    return urlsplit(uri).path.rstrip("/") or "/"
