"""
client/login.py -- Client-side login/logout driving SessionState.

The provider SDK (or the browser returning from /signin-facebook) reports a
user object; complete_login() turns that into the LOGGED_IN transition and
then resumes navigation toward the return destination. An empty user means
the provider denied or the round trip failed, and the session stays as it is.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

from client.guard import Notifier
from client.routing import NavigationResult, Router
from client.session import SessionState

logger = logging.getLogger("authgate.client.login")

LOGIN_SUCCESS_MESSAGE = "Login Success"


class LoginService:
    def __init__(
        self,
        session: SessionState,
        router: Router,
        base_url: str = "http://localhost:8000",
        notify: Notifier = print,
    ) -> None:
        self.session = session
        self.router = router
        self.base_url = base_url.rstrip("/")
        self.notify = notify

    def login_url(self, return_destination: str = "/") -> str:
        """URL that starts the server-side Facebook login.

        return_destination goes in ?next=; the provider callback is fixed on
        the server and is not part of this URL.
        """
        return f"{self.base_url}/account/fblogin?{urlencode({'next': return_destination})}"

    def complete_login(self, user: Optional[Any], return_destination: str = "/") -> Optional[NavigationResult]:
        """Confirm a provider login and navigate to return_destination.

        Returns the navigation result, or None when user is empty and nothing
        changed. Observers have all run by the time navigation is attempted.
        """
        if not user:
            logger.info("Provider returned no user; staying logged out")
            return None
        if self.session.confirm_login(user):
            self.notify(LOGIN_SUCCESS_MESSAGE)
        return self.router.navigate(return_destination)

    def logout(self) -> None:
        self.session.logout()
