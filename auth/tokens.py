"""
auth/tokens.py -- Token issuance: verify -> claims -> expiry -> sign.

Security design decisions:
  Stateless: TokenIssuer keeps no record of what it issued. The only shared
       state is the read-only Signer, so issue() is safe to call from any
       number of request threads at once. The flip side is that a token stays
       valid until it expires -- there is no revocation list.

  No hints: a rejected credential raises InvalidCredential with no reason.
       The route layer turns that into a fixed "Invalid User" body, so a
       caller cannot tell an unknown user from any other refusal.

  Expiry: exp = issuance time + Settings.token_expire_days (7 days by
       default). The clock is injectable; two issuances at different instants
       get different exp values and therefore different signatures.

Layer rule: no imports from api/, web/, or client/. Import from core/ is
allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from auth.claims import ClaimsBuilder
from auth.errors import InvalidCredential
from auth.models import IssuedToken, VerifiedIdentity
from auth.signer import Signer
from auth.verifier import AllowListVerifier, CredentialVerifier
from core.config import Settings

logger = logging.getLogger("authgate.auth")

AUTH_COOKIE = "access_token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Orchestrates credential verification, claim construction and signing."""

    def __init__(
        self,
        verifier: CredentialVerifier,
        signer: Signer,
        claims: ClaimsBuilder,
        validity: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._verifier = verifier
        self._signer = signer
        self._claims = claims
        self.validity = validity
        self._clock = clock

    def issue(self, credential: str) -> IssuedToken:
        """Verify credential and return a signed token for it.

        Raises:
            InvalidCredential: The verifier did not accept the credential.
        """
        identity = self._verifier(credential)
        if identity is None:
            # Log only the outcome -- the submitted value may be a typo'd password.
            logger.info("Token issuance rejected")
            raise InvalidCredential("credential not accepted")
        return self.issue_for(identity)

    def issue_for(self, identity: VerifiedIdentity) -> IssuedToken:
        """Sign a token for an identity verified elsewhere (e.g. a provider login)."""
        now = self._clock().replace(microsecond=0)
        expires_at = now + self.validity
        payload = ClaimsBuilder.to_payload(self._claims.build(identity))
        payload["iat"] = now
        payload["exp"] = expires_at
        token = self._signer.sign(payload)
        logger.info("Token issued for %s (expires %s)", identity.name, expires_at.isoformat())
        return IssuedToken(user=identity.name, token=token, expires_at=expires_at)

    def decode(self, token: str) -> dict | None:
        """Verify a token this issuer produced. Returns the payload or None.

        Route handlers turn None into 401.
        """
        payload = self._signer.verify(token)
        if payload is None or "name" not in payload or "role" not in payload:
            return None
        return payload


def build_token_issuer(settings: Settings, verifier: CredentialVerifier | None = None) -> TokenIssuer:
    """Wire a TokenIssuer from Settings. Called once at startup.

    verifier defaults to the allow-list in Settings.allowed_users; pass another
    callable to plug in a different policy.
    """
    signer = Signer(settings.secret_key, settings.token_issuer, settings.token_audience)
    return TokenIssuer(
        verifier=verifier or AllowListVerifier(settings.allowed_users),
        signer=signer,
        claims=ClaimsBuilder(settings.default_role),
        validity=timedelta(days=settings.token_expire_days),
    )


# ---------------------------------------------------------------------------
# Cookie helper
# ---------------------------------------------------------------------------


def set_auth_cookie(response, issued: IssuedToken, secure: bool = False) -> None:
    """Write the signed token as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie (XSS mitigation).
    samesite="lax": cookie sent on same-site navigations and the top-level
        redirect back from the provider, but not on cross-site POST.
    secure: only sent over HTTPS when SECURE_COOKIES=true (set in production).
    max_age: matches the token expiry so both expire together.
    """
    max_age = int((issued.expires_at - _utcnow()).total_seconds())
    response.set_cookie(
        AUTH_COOKIE,
        value=issued.token,
        httponly=True,
        samesite="lax",
        secure=secure,
        max_age=max(max_age, 0),
    )
