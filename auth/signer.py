"""
auth/signer.py -- HS256 signing and verification of compact tokens.

python-jose with HS256 (HMAC-SHA256). The same secret must sign and verify:
rotating SECRET_KEY makes every previously issued token unverifiable, which
is the only "revocation" this system has.

The secret is held privately and masked in repr() so it cannot leak through
a log line or a traceback that formats the object.

Layer rule: no imports from api/, web/, or client/.
"""

from __future__ import annotations

import logging

from jose import JWTError, jwt

logger = logging.getLogger("authgate.auth.signer")

ALGORITHM = "HS256"


class Signer:
    """Holds the symmetric secret; produces and verifies signed tokens."""

    def __init__(self, secret: str, issuer: str, audience: str) -> None:
        if not secret:
            raise ValueError("Signer requires a non-empty secret")
        self._secret = secret
        self.issuer = issuer
        self.audience = audience

    def __repr__(self) -> str:
        return f"Signer(issuer={self.issuer!r}, audience={self.audience!r}, secret=***)"

    def sign(self, payload: dict) -> str:
        """Serialize and sign payload as header.payload.signature.

        iss and aud are stamped here so every token this signer produces
        carries them, whatever the caller put in payload.
        """
        claims = {**payload, "iss": self.issuer, "aud": self.audience}
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict | None:
        """Verify signature, issuer, audience and expiry. None on any failure.

        Returning None (rather than raising) keeps the caller simple: any
        invalid token is treated as unauthenticated.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            return None
