"""
client/routing.py -- Route table for the client, with guarded routes.

Pattern: table-driven dispatch. Each Route says whether it is protected; the
Router asks can_enter() for protected routes right before committing the
navigation, so a login that happened since the last attempt is seen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from client.guard import Notifier, can_enter
from client.session import SessionState

logger = logging.getLogger("authgate.client.routing")


@dataclass(frozen=True)
class Route:
    path: str  # without leading slash, e.g. "dashboard"
    view: Optional[Callable[[], object]] = None
    protected: bool = False


@dataclass(frozen=True)
class NavigationResult:
    path: str
    allowed: bool
    view: object = None


# Default table: the dashboard is the only protected view.
DEFAULT_ROUTES: tuple[Route, ...] = (Route("dashboard", protected=True),)


class Router:
    """Resolve a path against the table and run the guard for protected routes."""

    def __init__(
        self,
        session: SessionState,
        routes: tuple[Route, ...] = DEFAULT_ROUTES,
        notify: Notifier = print,
    ) -> None:
        self.session = session
        self.notify = notify
        self._routes = {r.path: r for r in routes}
        self.current: Optional[str] = None

    @staticmethod
    def _normalize(path: str) -> str:
        return path.split("?", 1)[0].strip("/")

    def resolve(self, path: str) -> Optional[Route]:
        return self._routes.get(self._normalize(path))

    def navigate(self, path: str) -> NavigationResult:
        """Attempt to move to path. Blocked navigations leave current unchanged.

        Unknown paths are allowed (nothing to protect, nothing to mount).
        """
        route = self.resolve(path)
        if route is not None and route.protected and not can_enter(path, self.session, self.notify):
            logger.info("Navigation to %s blocked", path)
            return NavigationResult(path=path, allowed=False)

        self.current = self._normalize(path)
        view = route.view() if route is not None and route.view is not None else None
        return NavigationResult(path=path, allowed=True, view=view)
