"""Wiring-time error types.

Everything here is raised while routes are being declared, never while a
request is being served. Denied requests are normal outcomes and end in a
401/403 response instead.
"""

from __future__ import annotations


class RoleGateError(Exception):
    """Base class for rolegate errors."""


class InvalidRoleError(RoleGateError, ValueError):
    """Raised when a role cannot be used to build a validator."""

    def __init__(self, role: object, reason: str) -> None:
        self.role = role
        self.reason = reason
        super().__init__(f"Invalid role {role!r}: {reason}")


class MixedRoleKindsError(InvalidRoleError):
    """Raised when a role set mixes numeric and textual roles."""

    def __init__(self, role: object, expected: str) -> None:
        super().__init__(role, f"expected a {expected} role, role sets must not mix kinds")
        self.expected = expected


class RouteCompositionError(RoleGateError, ValueError):
    """Raised when path segments or a method token cannot form a route pattern."""

    def __init__(self, segment: str, reason: str) -> None:
        self.segment = segment
        self.reason = reason
        super().__init__(f"Cannot compose route from {segment!r}: {reason}")


class DuplicateRouteError(RoleGateError):
    """Raised when a pattern is already registered on the router."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Pattern already registered: {pattern!r}")
