"""Role extractors for common request layouts.

Extractors never raise for a missing or malformed role; they report
"not found" and the gate answers 401.
"""

from __future__ import annotations

from starlette.requests import Request

from shared.config import AuthzSettings, RoleKindSetting

from .gate import ExtractResult, RoleExtractor
from .roles import MAX_ROLE_ID, RoleKind

NOT_FOUND: ExtractResult = (None, False)


def parse_numeric_role(raw: str) -> int | None:
    """Parse a decimal or ``0x`` hex flag; None if it is not a 64-bit value."""
    raw = raw.strip()
    try:
        value = int(raw, 16) if raw.lower().startswith("0x") else int(raw, 10)
    except ValueError:
        return None
    if not 0 <= value <= MAX_ROLE_ID:
        return None
    return value


def header_role_extractor(header_name: str, kind: RoleKind = RoleKind.TEXT) -> RoleExtractor:
    """Read the caller role from a single request header.

    Args:
        header_name: Header to read, matched case-insensitively.
        kind: Whether the header holds a textual token or a numeric flag.
    """

    def extract(request: Request) -> ExtractResult:
        raw = request.headers.get(header_name)
        if raw is None or not raw.strip():
            return NOT_FOUND
        if kind is RoleKind.NUMERIC:
            value = parse_numeric_role(raw)
            if value is None:
                return NOT_FOUND
            return value, True
        return raw.strip(), True

    return extract


def state_role_extractor(attribute: str = "role") -> RoleExtractor:
    """Read the caller role from ``request.state``.

    Pairs with an authentication middleware that resolves the caller and
    stores its role on the request state before routing.
    """

    def extract(request: Request) -> ExtractResult:
        role = getattr(request.state, attribute, None)
        if role is None:
            return NOT_FOUND
        return role, True

    return extract


def extractor_from_settings(settings: AuthzSettings) -> RoleExtractor:
    """Build the header extractor configured by ``AUTHZ_*`` settings."""
    kind = RoleKind.NUMERIC if settings.role_kind == RoleKindSetting.NUMERIC else RoleKind.TEXT
    return header_role_extractor(settings.role_header, kind)
