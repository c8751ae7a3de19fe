"""
api/routes/v1/user.py -- Token issuance and bearer-protected identity endpoints.

Routes:
  POST /api/v1/user/login   -- credential in, {user, token} out (public)
  GET  /api/v1/user/me      -- claims of the presented bearer token (requires auth)

Security:
  [H2] POST /login is rate-limited per IP (LOGIN_RATE_LIMIT, default 10/minute).
  [C1] Rejections carry one fixed body, "Invalid User", whatever the reason.
  [M5] Cache-Control: no-store on login responses -- they contain a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter, login_limit
from api.models import LoginResponse, MeResponse
from auth.dependencies import get_current_claims
from auth.errors import InvalidCredential
from auth.tokens import TokenIssuer

# Auth policy:
# - POST /api/v1/user/login: public -- this is where bearer tokens come from
# - GET  /api/v1/user/me:    requires auth (get_current_claims)
router = APIRouter()


@limiter.limit(login_limit)  # [H2] must be ABOVE @router to preserve FastAPI introspection
@router.post("/user/login", response_model=LoginResponse)
def login(request: Request, username: str = Body(...)) -> JSONResponse:
    """Issue a signed bearer token for an accepted credential.

    The body is a bare JSON string, e.g. "Prerak". Sync handler: FastAPI runs
    it in the thread pool, and TokenIssuer holds no mutable state, so
    concurrent issuances do not interfere.
    """
    issuer: TokenIssuer = request.app.state.token_issuer
    try:
        issued = issuer.issue(username)
    except InvalidCredential:
        resp = JSONResponse(status_code=400, content="Invalid User")
        resp.headers["Cache-Control"] = "no-store"  # [M5]
        return resp

    resp = JSONResponse(status_code=200, content=LoginResponse.from_issued(issued).model_dump())
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


@router.get("/user/me", response_model=MeResponse)
async def me(claims: dict = Depends(get_current_claims)) -> MeResponse:
    """Return the verified claims of the bearer token on this request."""
    return MeResponse.from_claims(claims)
