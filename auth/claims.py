"""
auth/claims.py -- Map a verified identity to the token's claim set.
"""

from __future__ import annotations

from auth.models import CLAIM_NAME, CLAIM_ROLE, Claim, VerifiedIdentity


class ClaimsBuilder:
    """Builds exactly one "name" and one "role" claim per identity.

    Every identity gets the same fixed role; there is no per-user role store.
    """

    def __init__(self, default_role: str = "User") -> None:
        self.default_role = default_role

    def build(self, identity: VerifiedIdentity) -> list[Claim]:
        return [
            Claim(CLAIM_NAME, identity.name),
            Claim(CLAIM_ROLE, self.default_role),
        ]

    @staticmethod
    def to_payload(claims: list[Claim]) -> dict[str, str]:
        """Flatten claims into payload keys. A repeated claim type is an error."""
        payload: dict[str, str] = {}
        for claim in claims:
            if claim.type in payload:
                raise ValueError(f"duplicate claim type {claim.type!r}")
            payload[claim.type] = claim.value
        return payload
