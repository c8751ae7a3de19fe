"""
tests/test_tokens.py -- Unit tests for token issuance.

Coverage:
  - Accepted credential: name/role claims, iss/aud, exp = issuance + 7 days
  - Rejected credentials raise InvalidCredential and yield no token
  - Signatures: deterministic for the same instant, different across instants
  - Verification: wrong secret, expired token, tampered payload all decode to None
  - Pluggable verifier and the allow-list policy
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from conftest import FIXED_NOW, make_issuer
from jose import jwt

from auth.claims import ClaimsBuilder
from auth.errors import InvalidCredential
from auth.models import Claim, VerifiedIdentity
from auth.signer import Signer
from auth.verifier import AllowListVerifier


class TestIssue:
    def test_accepted_credential_claims(self, issuer) -> None:
        issued = issuer.issue("Prerak")
        payload = issuer.decode(issued.token)

        assert issued.user == "Prerak"
        assert payload["name"] == "Prerak"
        assert payload["role"] == "User"
        assert payload["iss"] == "myapi.com"
        assert payload["aud"] == "myapi.com"

    def test_expiry_is_seven_days_after_issuance(self, issuer) -> None:
        issued = issuer.issue("Prerak")
        payload = issuer.decode(issued.token)

        assert issued.expires_at == FIXED_NOW + timedelta(days=7)
        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600
        assert payload["iat"] == int(FIXED_NOW.timestamp())

    def test_header_is_hs256_jwt(self, issuer) -> None:
        header = jwt.get_unverified_header(issuer.issue("Prerak").token)
        assert header["alg"] == "HS256"
        assert header["typ"] == "JWT"

    @pytest.mark.parametrize("credential", ["eve", "prerak", "Prerak ", "", "Prerak\x00", "\ud800"])
    def test_rejected_credentials(self, issuer, credential: str) -> None:
        with pytest.raises(InvalidCredential):
            issuer.issue(credential)

    def test_rejection_message_has_no_detail(self, issuer) -> None:
        with pytest.raises(InvalidCredential) as exc_info:
            issuer.issue("eve")
        assert "eve" not in str(exc_info.value)

    def test_same_instant_same_signature(self) -> None:
        assert make_issuer().issue("Prerak").token == make_issuer().issue("Prerak").token

    def test_different_instants_differ_only_by_time(self) -> None:
        first = make_issuer(now=FIXED_NOW)
        second = make_issuer(now=FIXED_NOW + timedelta(seconds=5))
        token_a = first.issue("Prerak").token
        token_b = second.issue("Prerak").token
        a = first.decode(token_a)
        b = second.decode(token_b)

        assert token_a.rsplit(".", 1)[1] != token_b.rsplit(".", 1)[1]
        assert (a["name"], a["role"]) == (b["name"], b["role"])
        assert b["exp"] - a["exp"] == 5

    def test_issue_for_provider_identity(self, issuer) -> None:
        issued = issuer.issue_for(VerifiedIdentity(name="Jane Doe", subject="1234"))
        assert issuer.decode(issued.token)["name"] == "Jane Doe"

    def test_custom_verifier(self) -> None:
        def verifier(credential: str):
            return VerifiedIdentity(name="Display Name") if credential == "alias" else None

        issuer = make_issuer(verifier=verifier)
        assert issuer.decode(issuer.issue("alias").token)["name"] == "Display Name"
        with pytest.raises(InvalidCredential):
            issuer.issue("Prerak")

    def test_concurrent_issuance(self) -> None:
        issuer = make_issuer(verifier=AllowListVerifier([f"user{i}" for i in range(20)]))
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(issuer.issue, [f"user{i}" for i in range(20)]))
        assert [issuer.decode(r.token)["name"] for r in results] == [f"user{i}" for i in range(20)]


class TestDecode:
    def test_wrong_secret_rejected(self, issuer) -> None:
        token = issuer.issue("Prerak").token
        other = make_issuer(secret="another-secret-that-is-at-least-32-chars")
        assert other.decode(token) is None

    def test_expired_token_rejected(self) -> None:
        old = make_issuer(now=FIXED_NOW - timedelta(days=8))
        assert old.decode(old.issue("Prerak").token) is None

    def test_tampered_token_rejected(self, issuer) -> None:
        header, _payload, signature = issuer.issue("Prerak").token.split(".")
        forged = Signer("x" * 32, "myapi.com", "myapi.com").sign({"name": "admin", "role": "Admin"})
        assert issuer.decode(f"{header}.{forged.split('.')[1]}.{signature}") is None

    def test_wrong_audience_rejected(self, issuer) -> None:
        token = Signer("test-secret-key-which-is-at-least-32-chars", "myapi.com", "elsewhere").sign(
            {"name": "Prerak", "role": "User", "exp": FIXED_NOW + timedelta(days=3650)}
        )
        assert issuer.decode(token) is None

    def test_garbage_rejected(self, issuer) -> None:
        assert issuer.decode("not-a-token") is None


class TestParts:
    def test_signer_repr_hides_secret(self) -> None:
        signer = Signer("super-secret-value-that-must-not-leak", "myapi.com", "myapi.com")
        assert "super-secret" not in repr(signer)

    def test_signer_requires_secret(self) -> None:
        with pytest.raises(ValueError):
            Signer("", "myapi.com", "myapi.com")

    def test_claims_builder(self) -> None:
        claims = ClaimsBuilder("User").build(VerifiedIdentity(name="Prerak"))
        assert set(claims) == {Claim("name", "Prerak"), Claim("role", "User")}

    def test_duplicate_claim_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            ClaimsBuilder.to_payload([Claim("role", "User"), Claim("role", "Admin")])

    def test_allow_list(self) -> None:
        verify = AllowListVerifier(["Prerak", "Asha"])
        assert verify("Asha") == VerifiedIdentity(name="Asha")
        assert verify("eve") is None
        assert verify("") is None
