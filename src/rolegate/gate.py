"""Authorization gate.

Wraps a Starlette endpoint with a role check. Per request the gate:

1. extracts the caller role; no role -> unauthorized responder (401)
2. tests it against the compiled validator; wrong polarity -> forbidden responder (403)
3. otherwise calls the wrapped endpoint with the untouched request

Exactly one of the three callables runs for each request.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Union

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from shared.config import get_settings
from shared.observability import get_logger, log_authorization_decision

from .errors import InvalidRoleError
from .roles import RoleID, RoleLike, role_identifier
from .validator import RoleValidator, build_validator

logger = get_logger(__name__)

ExtractResult = tuple[Union[RoleLike, None], bool]
RoleExtractor = Callable[[Request], Union[ExtractResult, Awaitable[ExtractResult]]]
Endpoint = Callable[[Request], Union[Response, Awaitable[Response]]]
Responder = Callable[[Request], Union[Response, Awaitable[Response]]]

OUTCOME_ALLOWED = "allowed"
OUTCOME_UNAUTHORIZED = "unauthorized"
OUTCOME_FORBIDDEN = "forbidden"


def unauthorized_response(request: Request) -> Response:
    """Default responder for callers without a role: bare 401."""
    return Response(status_code=401)


def forbidden_response(request: Request) -> Response:
    """Default responder for callers whose role fails the policy: bare 403."""
    return Response(status_code=403)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _describe(identifier: RoleID) -> str:
    if isinstance(identifier, int):
        return f"{identifier:#x}"
    return identifier


class AuthorizationGate:
    """Pre-dispatch role check around a single endpoint.

    Args:
        expected: Required result of the membership test. True allows only
            members of the role set, False allows only non-members.
        role_extractor: ``(request) -> (role, found)``, sync or async.
        handler: Protected endpoint, sync or async.
        on_unauthorized: Responder used when no role could be extracted.
        on_forbidden: Responder used when the role fails the policy.
        validator: Compiled role set.
        log_decisions: Emit a debug event per decision. Defaults to
            ``settings.authz.log_decisions``.
    """

    __slots__ = (
        "expected",
        "validator",
        "_role_extractor",
        "_handler",
        "_handler_is_async",
        "_on_unauthorized",
        "_on_forbidden",
        "_log_decisions",
    )

    def __init__(
        self,
        expected: bool,
        role_extractor: RoleExtractor,
        handler: Endpoint,
        on_unauthorized: Responder,
        on_forbidden: Responder,
        validator: RoleValidator,
        log_decisions: bool | None = None,
    ) -> None:
        self.expected = expected
        self.validator = validator
        self._role_extractor = role_extractor
        self._handler = handler
        self._handler_is_async = inspect.iscoroutinefunction(handler)
        self._on_unauthorized = on_unauthorized
        self._on_forbidden = on_forbidden
        if log_decisions is None:
            log_decisions = get_settings().authz.log_decisions
        self._log_decisions = log_decisions

    @property
    def handler(self) -> Endpoint:
        return self._handler

    async def dispatch(self, request: Request) -> Response:
        """Run the role check and produce the response for one request."""
        role, found = await _maybe_await(self._role_extractor(request))

        identifier: RoleID | None = None
        if found and role is not None:
            try:
                identifier = role_identifier(role)
            except InvalidRoleError:
                identifier = None

        if identifier is None:
            self._log(request, OUTCOME_UNAUTHORIZED)
            return await _maybe_await(self._on_unauthorized(request))

        if self.validator.is_member(identifier) != self.expected:
            self._log(request, OUTCOME_FORBIDDEN, identifier)
            return await _maybe_await(self._on_forbidden(request))

        self._log(request, OUTCOME_ALLOWED, identifier)
        if self._handler_is_async:
            return await self._handler(request)
        return await _maybe_await(await run_in_threadpool(self._handler, request))

    async def __call__(self, request: Request) -> Response:
        return await self.dispatch(request)

    def _log(self, request: Request, outcome: str, role: RoleID | None = None) -> None:
        if not self._log_decisions:
            return
        log_authorization_decision(
            logger,
            outcome=outcome,
            method=request.method,
            path=request.url.path,
            role=_describe(role) if role is not None else None,
        )


def build_gate(
    expected: bool,
    role_extractor: RoleExtractor,
    handler: Endpoint,
    on_unauthorized: Responder | None,
    on_forbidden: Responder | None,
    roles: Iterable[RoleLike],
    log_decisions: bool | None = None,
) -> Callable[[Request], Awaitable[Response]]:
    """Compile ``roles`` once and return a guarded Starlette endpoint.

    The returned callable is the gate's bound ``dispatch`` method, so the
    gate itself stays reachable through ``endpoint.__self__``.

    Raises:
        InvalidRoleError: If the role set cannot be compiled.
    """
    gate = AuthorizationGate(
        expected=expected,
        role_extractor=role_extractor,
        handler=handler,
        on_unauthorized=on_unauthorized or unauthorized_response,
        on_forbidden=on_forbidden or forbidden_response,
        validator=build_validator(roles),
        log_decisions=log_decisions,
    )
    return gate.dispatch


def allow_for(
    role_extractor: RoleExtractor,
    handler: Endpoint,
    *roles: RoleLike,
    on_unauthorized: Responder | None = None,
    on_forbidden: Responder | None = None,
) -> Callable[[Request], Awaitable[Response]]:
    """Guard ``handler`` so only callers holding one of ``roles`` reach it."""
    return build_gate(True, role_extractor, handler, on_unauthorized, on_forbidden, roles)


def deny_for(
    role_extractor: RoleExtractor,
    handler: Endpoint,
    *roles: RoleLike,
    on_unauthorized: Responder | None = None,
    on_forbidden: Responder | None = None,
) -> Callable[[Request], Awaitable[Response]]:
    """Guard ``handler`` so callers holding one of ``roles`` are turned away."""
    return build_gate(False, role_extractor, handler, on_unauthorized, on_forbidden, roles)
