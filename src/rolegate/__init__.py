"""Role-based authorization gate for Starlette and FastAPI routes.

This package provides:
- roles/validator: compile declared roles into a fast membership test
- gate: allow-list / deny-list wrappers around endpoints (401 / 403)
- route/router: hierarchical URL prefixes that register guarded endpoints
- extractors: ready-made role extraction from headers or request state
"""

from .errors import (
    DuplicateRouteError,
    InvalidRoleError,
    MixedRoleKindsError,
    RoleGateError,
    RouteCompositionError,
)
from .extractors import header_role_extractor, state_role_extractor
from .gate import (
    AuthorizationGate,
    allow_for,
    build_gate,
    deny_for,
    forbidden_response,
    unauthorized_response,
)
from .paths import compose_pattern, join_path
from .roles import NumericRole, Role, RoleKind, TextRole, role_identifier
from .route import Route, new_route
from .router import HttpRouter
from .validator import (
    BitmaskValidator,
    PassThroughValidator,
    RoleValidator,
    TokenSetValidator,
    build_validator,
)

__version__ = "0.1.0"

__all__ = [
    # Roles
    "Role",
    "RoleKind",
    "NumericRole",
    "TextRole",
    "role_identifier",
    # Validators
    "RoleValidator",
    "BitmaskValidator",
    "TokenSetValidator",
    "PassThroughValidator",
    "build_validator",
    # Gate
    "AuthorizationGate",
    "build_gate",
    "allow_for",
    "deny_for",
    "unauthorized_response",
    "forbidden_response",
    # Routing
    "HttpRouter",
    "Route",
    "new_route",
    "join_path",
    "compose_pattern",
    # Extractors
    "header_role_extractor",
    "state_role_extractor",
    # Errors
    "RoleGateError",
    "InvalidRoleError",
    "MixedRoleKindsError",
    "RouteCompositionError",
    "DuplicateRouteError",
]
