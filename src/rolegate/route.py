"""Hierarchical route nodes.

A node is an immutable URL prefix bound to the ``HttpRouter`` that owns the
underlying Starlette router. Nodes derive children with :meth:`Route.next`
and register handlers relative to their prefix; the actual registration is
always performed by the owner.

Usage:
    api = router.new_route("api", "v1")
    orders = api.next("orders")
    orders.allow_for("GET", list_orders, Role.ADMIN, Role.CUSTOMER)
    orders.deny_for("GET", get_order, Role.GUEST, path="{order_id}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from .paths import ROOT, compose_pattern, join_path
from .roles import RoleLike

if TYPE_CHECKING:
    from .gate import Endpoint
    from .router import HttpRouter

Methods = Union[str, Sequence[str], None]


@dataclass(frozen=True)
class Route:
    """URL prefix handle for registering handlers."""

    prefix: str
    router: HttpRouter = field(repr=False)

    @property
    def url(self) -> str:
        return self.prefix

    def next(self, *segments: str) -> Route:
        """Derive a child node; ``self`` is left untouched.

        Raises:
            RouteCompositionError: If a segment cannot be joined.
        """
        return Route(prefix=join_path(self.prefix, *segments), router=self.router)

    def pattern(self, method: str | None = None, path: str = "") -> str:
        """Pattern a registration on this node would claim."""
        return compose_pattern(method, join_path(self.prefix, path))

    def handle(self, methods: Methods, handler: Endpoint, path: str = "") -> list[str]:
        """Register an unguarded handler for one or more methods.

        ``methods`` may be a single token, a list of tokens, or empty/None for
        any method. Either every pattern is registered or none is. ``HEAD``
        cannot follow ``GET`` on the same path because the GET route
        already answers HEAD.

        Returns:
            The registered patterns.

        Raises:
            DuplicateRouteError: If any pattern is taken or repeated.
        """
        if methods is None or isinstance(methods, str):
            methods = [methods or ""]
        methods = list(methods) or [""]

        patterns: list[str] = []
        for method in methods:
            pattern = self.router.check_available(self.pattern(method, path), patterns)
            patterns.append(pattern)

        for pattern in patterns:
            self.router.handle(pattern, handler)
        return patterns

    def allow_for(
        self,
        method: str | None,
        handler: Endpoint,
        *roles: RoleLike,
        path: str = "",
    ) -> str:
        """Register ``handler`` for callers holding one of ``roles``."""
        pattern = self.pattern(method, path)
        self.router.handle_allow_for(pattern, handler, *roles)
        return pattern

    def deny_for(
        self,
        method: str | None,
        handler: Endpoint,
        *roles: RoleLike,
        path: str = "",
    ) -> str:
        """Register ``handler`` for callers holding none of ``roles``."""
        pattern = self.pattern(method, path)
        self.router.handle_deny_for(pattern, handler, *roles)
        return pattern


def new_route(router: HttpRouter, *segments: str) -> Route:
    """Create a node for ``segments`` joined under the root."""
    return Route(prefix=join_path(ROOT, *segments), router=router)
