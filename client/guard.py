"""
client/guard.py -- Navigation gate consulted before a protected view mounts.

One global rule: logged in means every route is open, logged out means every
protected route is closed. There are no per-route roles. The decision is read
from the SessionState passed in at call time and is never cached.
"""

from __future__ import annotations

from collections.abc import Callable

from client.session import SessionState

SIGN_IN_MESSAGE = "Please sign-in to access this resource"

Notifier = Callable[[str], None]


def can_enter(target_route: str, session: SessionState, notify: Notifier = print) -> bool:
    """Return True if navigation to target_route may proceed.

    When it may not, notify() is called with SIGN_IN_MESSAGE before returning
    False. The default notifier prints; UIs pass their own blocking alert.
    target_route does not influence the decision.
    """
    if session.logged_in:
        return True
    notify(SIGN_IN_MESSAGE)
    return False
