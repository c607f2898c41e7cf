"""Route path and pattern composition.

Paths are always absolute, use single ``/`` separators and carry no
trailing slash except for the root. Patterns have the form
``"<METHOD> <path>"`` or just ``"<path>"`` when any method is accepted.
"""

from __future__ import annotations

import re

from .errors import RouteCompositionError

ROOT = "/"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# RFC 7230 token
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _split(segment: object) -> list[str]:
    if not isinstance(segment, str):
        raise RouteCompositionError(repr(segment), "segments must be strings")

    parts = []
    for part in segment.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            raise RouteCompositionError(segment, "parent references are not allowed")
        if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in part):
            raise RouteCompositionError(segment, "whitespace or control character")
        if _BAD_ESCAPE.search(part):
            raise RouteCompositionError(segment, "invalid percent escape")
        parts.append(part)
    return parts


def join_path(base: str, *segments: str) -> str:
    """Join ``segments`` under ``base``.

    Duplicate separators collapse, ``.`` segments vanish and the trailing
    separator is dropped unless the result is the root.

    Raises:
        RouteCompositionError: On ``..``, malformed escapes, whitespace or
            non-string segments.
    """
    parts = _split(base)
    for segment in segments:
        parts.extend(_split(segment))
    if not parts:
        return ROOT
    return ROOT + "/".join(parts)


def normalize_method(method: str | None) -> str:
    """Upper-case a method token; empty means any method."""
    method = (method or "").strip()
    if not method:
        return ""
    if not _METHOD_TOKEN.match(method):
        raise RouteCompositionError(method, "method is not an HTTP token")
    return method.upper()


def compose_pattern(method: str | None, path: str) -> str:
    """Build a ``METHOD path`` pattern."""
    return f"{normalize_method(method)} {path}".strip()


def split_pattern(pattern: str) -> tuple[str, str]:
    """Inverse of :func:`compose_pattern`: ``"GET /a"`` -> ``("GET", "/a")``."""
    method, _, path = pattern.strip().rpartition(" ")
    return method.strip(), path
