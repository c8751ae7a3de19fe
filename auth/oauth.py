"""
auth/oauth.py -- Authlib Facebook login and the delegated-login handshake.

Reads configuration from core.config.get_settings() at module load and
registers exactly one provider, "facebook", with static endpoints. There is
one configuration strategy: the provider always returns the browser to the
fixed callback route (/signin-facebook, registered in the Facebook app
settings); where the user goes afterwards is a separate value carried next
to it.

Correlation notes:
  [C3] The provider callback and the post-login return destination are two
       different things. Handing the return destination to the provider as
       its redirect_uri makes the provider come back to a page that has no
       callback handler, and authlib's state check on the real callback then
       fails. LoginChallenge refuses to hold equal values.

  OAuth state parameter (CSRF protection) is handled by authlib via the
  Starlette SessionMiddleware cookie. The return destination rides in the same
  signed cookie. Nothing is kept in server memory between the challenge and
  the callback, so any worker may serve either leg.

Layer rule: no imports from api/, web/, or client/. Import from core/
is allowed -- core/ is the kernel layer.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError

from auth.errors import CorrelationFailure, ProviderDenied
from auth.models import LoginChallenge, VerifiedIdentity
from core.config import Settings, get_settings

logger = logging.getLogger("authgate.auth.oauth")

PROVIDER = "facebook"
CALLBACK_ROUTE = "oauth_callback"
CALLBACK_PATH = "/signin-facebook"

# Session key holding the return destination between the two legs.
_NEXT_KEY = "oauth_next"


def safe_next(next_url: Optional[str]) -> str:
    """Validate a post-login redirect target. Only accept relative paths. [C2]

    Prevents open redirect attacks where an attacker crafts a URL like:
      /account/login?next=https://attacker.com  or  ?next=//attacker.com

    Both would redirect off-site after login. We only allow paths that:
    - Start with "/" (relative, server-local)
    - Do NOT start with "//" (protocol-relative URL, redirects off-site)
    """
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/"


# ---------------------------------------------------------------------------
# Authlib OAuth registry
# ---------------------------------------------------------------------------


def register_facebook(registry: OAuth, settings: Settings) -> None:
    """Register the Facebook client. Static endpoints, no discovery document."""
    graph = f"https://graph.facebook.com/{settings.facebook_api_version}/"
    registry.register(
        name=PROVIDER,
        client_id=settings.facebook_app_id,
        client_secret=settings.facebook_app_secret,
        access_token_url=graph + "oauth/access_token",  # noqa: S106 -- URL, not a password
        authorize_url=f"https://www.facebook.com/{settings.facebook_api_version}/dialog/oauth",
        api_base_url=graph,
        client_kwargs={"scope": "public_profile"},
    )
    logger.info("Facebook OAuth provider registered")


oauth = OAuth()
register_facebook(oauth, get_settings())


# ---------------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------------


class OAuthRedirector:
    """Start a delegated login and resume the application flow on callback.

    The authlib registry is read from request.app.state.oauth at call time,
    not captured here, so tests can swap it on a running app.
    """

    def __init__(self, provider: str = PROVIDER, callback_route: str = CALLBACK_ROUTE) -> None:
        self.provider = provider
        self.callback_route = callback_route

    def challenge_for(self, request, return_destination: Optional[str]) -> LoginChallenge:
        """Pair the fixed callback URI with the sanitized return destination."""
        return LoginChallenge(
            callback_uri=str(request.url_for(self.callback_route)),
            return_destination=safe_next(return_destination),
        )

    async def begin_login(self, request, return_destination: Optional[str]):
        """Redirect the user agent to the provider's authorization page.

        Raises:
            CorrelationFailure: return_destination points at the callback itself.
        """
        challenge = self.challenge_for(request, return_destination)
        request.session[_NEXT_KEY] = challenge.return_destination
        client = request.app.state.oauth.create_client(self.provider)
        logger.info("Starting %s login (next=%s)", self.provider, challenge.return_destination)
        # Only the callback goes to the provider [C3]
        return await client.authorize_redirect(request, challenge.callback_uri)

    async def complete_login(self, request) -> tuple[VerifiedIdentity, str]:
        """Finish the round trip and return (identity, return_destination).

        Flow:
          1. Recover the return destination from the session (default "/").
          2. Exchange the authorization code for a token -- authlib raises on a
             provider error parameter or a state mismatch.
          3. Fetch the profile (id, name) from the Graph API.

        Raises:
            ProviderDenied: The provider refused, or the exchange/profile fetch failed.
            CorrelationFailure: The callback state does not match any challenge.
        """
        return_destination = safe_next(request.session.pop(_NEXT_KEY, None))
        client = request.app.state.oauth.create_client(self.provider)

        try:
            token = await client.authorize_access_token(request)
        except OAuthError as exc:
            if exc.error == "mismatching_state":
                raise CorrelationFailure("callback state does not match the login challenge") from exc
            raise ProviderDenied(f"provider returned {exc.error!r}") from exc
        except httpx.HTTPError as exc:
            raise ProviderDenied("token exchange failed") from exc

        try:
            resp = await client.get("me", params={"fields": "id,name"}, token=token)
            resp.raise_for_status()
            profile = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderDenied("profile fetch failed") from exc

        name = profile.get("name")
        subject = profile.get("id")
        if not name or not subject:
            raise ProviderDenied("profile is missing id or name")

        return VerifiedIdentity(name=name, subject=str(subject)), return_destination
