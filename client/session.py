"""
client/session.py -- Locally observed login state with synchronous observers.

SessionState has two states, LOGGED_OUT (initial) and LOGGED_IN, and two
transitions:
  LOGGED_OUT --confirm_login--> LOGGED_IN
  LOGGED_IN  --logout-------->  LOGGED_OUT
Anything else is a no-op and notifies nobody.

Observers live in an explicit dict of handle -> callback. Dicts keep insertion
order, so delivery follows subscription order. Delivery is synchronous: every
observer has run before confirm_login()/logout() returns, which is what makes
the next guard evaluation see the new state.

Layer rule: client/ runs outside the server and imports only from auth/models,
auth/errors and third-party libraries.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger("authgate.client.session")


class LoginStatus(str, Enum):
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


# Called with (new_status, user). user is None on logout.
Observer = Callable[[LoginStatus, Optional[Any]], None]


class SessionState:
    """Single-session login flag plus its subscribers. Not thread-safe."""

    def __init__(self) -> None:
        self._status = LoginStatus.LOGGED_OUT
        self._user: Optional[Any] = None
        self._observers: dict[int, Observer] = {}
        self._handles = itertools.count(1)

    @property
    def status(self) -> LoginStatus:
        return self._status

    @property
    def logged_in(self) -> bool:
        return self._status is LoginStatus.LOGGED_IN

    @property
    def user(self) -> Optional[Any]:
        """Provider user object from the last confirmed login, kept for reference."""
        return self._user

    def subscribe(self, callback: Observer) -> int:
        """Register callback for future transitions; returns its handle."""
        handle = next(self._handles)
        self._observers[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> None:
        """Remove a subscription. Unknown handles are ignored."""
        self._observers.pop(handle, None)

    def confirm_login(self, user: Any) -> bool:
        """Move to LOGGED_IN. Returns False (and notifies nobody) if already there."""
        if self.logged_in:
            return False
        self._status = LoginStatus.LOGGED_IN
        self._user = user
        self._notify()
        return True

    def logout(self) -> bool:
        """Move to LOGGED_OUT. Returns False (and notifies nobody) if already there."""
        if not self.logged_in:
            return False
        self._status = LoginStatus.LOGGED_OUT
        self._user = None
        self._notify()
        return True

    def _notify(self) -> None:
        logger.debug("Session is now %s; notifying %d observer(s)", self._status.value, len(self._observers))
        # Snapshot: an observer that (un)subscribes must not disturb this round.
        for callback in list(self._observers.values()):
            callback(self._status, self._user)
