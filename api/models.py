"""
API request and response models for AuthGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict

from auth.models import IssuedToken

# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class LoginResponse(BaseModel):
    """Response body for POST /api/v1/user/login."""

    model_config = ConfigDict(frozen=True)

    user: str
    token: str

    @classmethod
    def from_issued(cls, issued: IssuedToken) -> "LoginResponse":
        return cls(user=issued.user, token=issued.token)


class MeResponse(BaseModel):
    """Response body for GET /api/v1/user/me -- the caller's verified claims."""

    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    issuer: str
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: dict) -> "MeResponse":
        return cls(
            name=claims["name"],
            role=claims["role"],
            issuer=claims["iss"],
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Uniform error envelope: {"error": {"code", "message", "detail"}}."""

    error: ErrorDetail
