"""
web/routes.py -- Jinja2 template routes and the Facebook login round trip.

These routes serve server-rendered HTML. They share app.state with the API
routes (same token issuer, same OAuth registry) but answer with pages and
redirects instead of JSON. A browser session is the signed token in the
"access_token" cookie -- the same token format the API issues.

Routes:
  GET  /                    -- home page (public)
  GET  /account/login       -- login view with the Facebook button
  GET  /account/fblogin     -- start the Facebook login (?next= return destination)
  GET  /signin-facebook     -- fixed provider callback
  GET  /account             -- account page (auth required)
  POST /account/logout      -- clear cookie, redirect to the login view
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.dependencies import try_get_current_claims
from auth.errors import CorrelationFailure, ProviderDenied
from auth.oauth import CALLBACK_PATH, CALLBACK_ROUTE, OAuthRedirector, safe_next
from auth.tokens import AUTH_COOKIE, TokenIssuer, set_auth_cookie
from core.config import get_settings

logger = logging.getLogger("authgate.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()

LOGIN_PATH = "/account/login"

# Whitelist mapping for ?error= query params on the login view [M3].
# The raw query param is NEVER passed to templates -- only the message from
# this dict is. Prevents reflected XSS via crafted error query strings.
_ERROR_MESSAGES: dict[str, str] = {
    "oauth_failed": "Facebook login failed. Please try again.",
}


def _login_redirect(next_url: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    params = {}
    if next_url:
        params["next"] = safe_next(next_url)
    if error:
        params["error"] = error
    query = "?" + urlencode(params, safe="/") if params else ""
    return RedirectResponse(LOGIN_PATH + query, status_code=302)


def _require_auth(request: Request) -> Optional[RedirectResponse]:
    """Return a redirect to the login view if the request is not authenticated.

    Call at the top of protected route handlers:
        if redirect := _require_auth(request):
            return redirect
    """
    if try_get_current_claims(request) is None:
        return _login_redirect(next_url=request.url.path)
    return None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request) -> HTMLResponse:
    claims = try_get_current_claims(request)
    return templates.TemplateResponse(request, "home.html", {"claims": claims})


@router.get("/account", response_class=HTMLResponse)
def account(request: Request) -> HTMLResponse:
    """Account page. Unauthenticated visitors go to the login view with next=/account."""
    if redirect := _require_auth(request):
        return redirect
    claims = try_get_current_claims(request)
    return templates.TemplateResponse(request, "account.html", {"claims": claims})


# ---------------------------------------------------------------------------
# Login round trip
# ---------------------------------------------------------------------------


@router.get("/account/login", response_class=HTMLResponse)
def login_form(request: Request) -> HTMLResponse:
    """Render the login view. Already-authenticated users go straight to ?next."""
    next_url = safe_next(request.query_params.get("next"))
    if try_get_current_claims(request) is not None:
        return RedirectResponse(next_url, status_code=302)

    error_msg = _ERROR_MESSAGES.get(request.query_params.get("error", ""), None)
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error_msg": error_msg, "next_url": next_url},
    )


@router.get("/account/fblogin")
async def facebook_login(request: Request) -> RedirectResponse:
    """Send the browser to Facebook; ?next= is where to land after the callback."""
    redirector: OAuthRedirector = request.app.state.redirector
    try:
        return await redirector.begin_login(request, request.query_params.get("next"))
    except CorrelationFailure:
        logger.warning("Rejected login challenge whose return destination is the callback")
        return _login_redirect(error="oauth_failed")


@router.get(CALLBACK_PATH, name=CALLBACK_ROUTE)
async def oauth_callback(request: Request) -> RedirectResponse:
    """Handle the Facebook callback and issue a token cookie.

    On any failure the user stays logged out and lands on the login view
    again; retrying means starting a new login from /account/fblogin.
    """
    redirector: OAuthRedirector = request.app.state.redirector
    issuer: TokenIssuer = request.app.state.token_issuer
    try:
        identity, next_url = await redirector.complete_login(request)
    except CorrelationFailure:
        logger.warning("Facebook callback did not match a login challenge")
        return _login_redirect(error="oauth_failed")
    except ProviderDenied as exc:
        logger.warning("Facebook login denied: %s", exc)
        return _login_redirect(error="oauth_failed")

    issued = issuer.issue_for(identity)
    resp = RedirectResponse(next_url, status_code=302)
    set_auth_cookie(resp, issued, secure=get_settings().secure_cookies)
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


@router.post("/account/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear the token cookie and redirect to the login view."""
    resp = RedirectResponse(LOGIN_PATH, status_code=302)
    resp.delete_cookie(AUTH_COOKIE)
    return resp
