"""
auth/verifier.py -- Credential verification for token issuance.

A verifier is any callable (credential) -> VerifiedIdentity | None. The
issuer only sees the outcome, so swapping the policy does not touch it.

AllowListVerifier is the shipped policy: a fixed set of accepted usernames
from Settings.allowed_users. The comparison runs against every entry with
hmac.compare_digest and never exits early, so response time does not reveal
how close a guess was or which entry it matched [C1].
"""

from __future__ import annotations

import hmac
from collections.abc import Callable, Iterable

from auth.models import VerifiedIdentity

CredentialVerifier = Callable[[str], "VerifiedIdentity | None"]


class AllowListVerifier:
    """Accept a credential only if it exactly matches an allowed username."""

    def __init__(self, allowed: Iterable[str]) -> None:
        self._allowed = tuple(a.encode("utf-8") for a in allowed if a)

    def __call__(self, credential: str) -> VerifiedIdentity | None:
        if not credential:
            return None
        candidate = credential.encode("utf-8", errors="surrogatepass")
        matched = False
        for allowed in self._allowed:
            # Bitwise or: keep comparing after a match [C1]
            matched |= hmac.compare_digest(candidate, allowed)
        if not matched:
            return None
        return VerifiedIdentity(name=credential)
