"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Callable
from enum import Enum, IntFlag
from typing import Any

import pytest
from starlette.requests import Request
from starlette.responses import Response

# Set test environment before importing settings
os.environ["ENV"] = "development"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_FORMAT"] = "text"

ROLE_HEADER = "x-role"


class TextRole(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"
    GUEST = "GUEST"


class FlagRole(IntFlag):
    ADMIN = 0x01
    CUSTOMER = 0x02
    GUEST = 0x04
    AUDITOR = 0x10


def build_request(
    method: str = "GET",
    path: str = "/",
    headers: dict[str, str] | None = None,
    state: dict[str, Any] | None = None,
) -> Request:
    """Build a bare Starlette request without a running server."""
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [
            (k.lower().encode("latin-1"), v.encode("latin-1"))
            for k, v in (headers or {}).items()
        ],
        "state": dict(state or {}),
    }
    return Request(scope)


def text_extractor(request: Request) -> tuple[str | None, bool]:
    """Stub extractor: role token from the x-role header."""
    raw = request.headers.get(ROLE_HEADER)
    return raw, raw is not None


def int_extractor(request: Request) -> tuple[int | None, bool]:
    """Stub extractor: hex flag from the x-role header."""
    raw = request.headers.get(ROLE_HEADER)
    if raw is None:
        return None, False
    return int(raw, 16), True


class CallRecorder:
    """Endpoint stub that counts calls and answers 204."""

    def __init__(self, status_code: int = 204) -> None:
        self.calls: list[Request] = []
        self.status_code = status_code

    async def __call__(self, request: Request) -> Response:
        self.calls.append(request)
        return Response(status_code=self.status_code)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    return build_request


@pytest.fixture
def text_roles() -> type[TextRole]:
    return TextRole


@pytest.fixture
def flag_roles() -> type[FlagRole]:
    return FlagRole


@pytest.fixture
def extract_text() -> Callable[[Request], tuple[str | None, bool]]:
    return text_extractor


@pytest.fixture
def extract_int() -> Callable[[Request], tuple[int | None, bool]]:
    return int_extractor


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (in-process ASGI client)"
    )
