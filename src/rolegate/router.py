"""Role-aware router.

``HttpRouter`` owns a Starlette ``Router`` (or FastAPI's ``app.router``)
and is the only place where routes get installed. It remembers every
``METHOD path`` pattern it registered so a second registration of the
same pattern fails at wiring time instead of being silently shadowed.
Path matching stays with Starlette.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any

from starlette.routing import Route as StarletteRoute
from starlette.routing import Router
from starlette.types import Receive, Scope, Send

from shared.observability import get_logger, log_route_registered

from .errors import DuplicateRouteError
from .gate import (
    Endpoint,
    Responder,
    RoleExtractor,
    build_gate,
    forbidden_response,
    unauthorized_response,
)
from .paths import compose_pattern, join_path, normalize_method, split_pattern
from .roles import RoleLike, role_identifier
from .route import Route, new_route

logger = get_logger(__name__)

GUARD_NONE = "none"
GUARD_ALLOW = "allow"
GUARD_DENY = "deny"

# Installed for patterns without a method; Starlette would otherwise default to GET
ANY_METHODS = [
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "TRACE",
    "CONNECT",
]


class HttpRouter:
    """Registers plain and role-guarded endpoints on a Starlette router.

    Args:
        role_extractor: ``(request) -> (role, found)`` shared by every gate.
        router: Router to install routes on; a new one is created if omitted.
        on_unauthorized: Responder for requests without a role (default 401).
        on_forbidden: Responder for requests failing the policy (default 403).
    """

    def __init__(
        self,
        role_extractor: RoleExtractor,
        router: Router | None = None,
        on_unauthorized: Responder | None = None,
        on_forbidden: Responder | None = None,
    ) -> None:
        self._role_extractor = role_extractor
        self._router = router if router is not None else Router()
        self._on_unauthorized = on_unauthorized or unauthorized_response
        self._on_forbidden = on_forbidden or forbidden_response
        self._patterns: dict[str, StarletteRoute] = {}

    @property
    def router(self) -> Router:
        return self._router

    @property
    def patterns(self) -> tuple[str, ...]:
        """Registered patterns in registration order."""
        return tuple(self._patterns)

    def is_registered(self, pattern: str) -> bool:
        return self._canonical(pattern) in self._patterns

    def __contains__(self, pattern: str) -> bool:
        return self.is_registered(pattern)

    def check_available(self, pattern: str, pending: Collection[str] = ()) -> str:
        """Canonicalise ``pattern`` and make sure it can still be registered.

        ``pending`` holds canonical patterns about to be registered together
        with this one. Starlette answers HEAD from a GET route on the same
        path, so ``HEAD path`` is refused once ``GET path`` is claimed.

        Raises:
            DuplicateRouteError: If the pattern, or a GET shadowing it, is taken.
        """
        pattern = self._canonical(pattern)
        if pattern in self._patterns or pattern in pending:
            raise DuplicateRouteError(pattern)

        method, path = split_pattern(pattern)
        if method == "HEAD":
            shadow = compose_pattern("GET", path)
            if shadow in self._patterns or shadow in pending:
                raise DuplicateRouteError(pattern)
        return pattern

    def set_unauthorized_responder(self, responder: Responder) -> None:
        """Replace the 401 responder for routes registered from now on."""
        self._on_unauthorized = responder

    def set_forbidden_responder(self, responder: Responder) -> None:
        """Replace the 403 responder for routes registered from now on."""
        self._on_forbidden = responder

    def new_route(self, *segments: str) -> Route:
        """Create a route node for ``segments`` under the root."""
        return new_route(self, *segments)

    def handle(self, pattern: str, handler: Endpoint) -> str:
        """Register an unguarded handler."""
        return self._register(pattern, handler, handler, GUARD_NONE)

    def handle_allow_for(self, pattern: str, handler: Endpoint, *roles: RoleLike) -> str:
        """Register a handler reachable only by callers holding one of ``roles``."""
        endpoint = build_gate(
            True,
            self._role_extractor,
            handler,
            self._on_unauthorized,
            self._on_forbidden,
            roles,
        )
        return self._register(pattern, handler, endpoint, GUARD_ALLOW, roles)

    def handle_deny_for(self, pattern: str, handler: Endpoint, *roles: RoleLike) -> str:
        """Register a handler unreachable by callers holding one of ``roles``."""
        endpoint = build_gate(
            False,
            self._role_extractor,
            handler,
            self._on_unauthorized,
            self._on_forbidden,
            roles,
        )
        return self._register(pattern, handler, endpoint, GUARD_DENY, roles)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._router(scope, receive, send)

    def _canonical(self, pattern: str) -> str:
        method, path = split_pattern(pattern)
        return compose_pattern(normalize_method(method), join_path(path))

    def _register(
        self,
        pattern: str,
        handler: Endpoint,
        endpoint: Callable[..., Any],
        guard: str,
        roles: tuple[RoleLike, ...] = (),
    ) -> str:
        pattern = self.check_available(pattern)
        method, path = split_pattern(pattern)
        route = StarletteRoute(
            path,
            endpoint=endpoint,
            methods=[method] if method else ANY_METHODS,
            name=getattr(handler, "__name__", None),
        )
        self._router.routes.append(route)
        self._patterns[pattern] = route

        log_route_registered(
            logger,
            pattern=pattern,
            guard=guard,
            roles=[str(role_identifier(role)) for role in roles],
        )
        return pattern
