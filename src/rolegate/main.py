"""Example application wiring role-guarded order endpoints.

Run with ``uvicorn rolegate.main:app``. The caller role is read from the
header named by ``AUTHZ_ROLE_HEADER`` (``X-Role`` by default); set
``AUTHZ_ROLE_KIND=numeric`` to switch to bit-flag roles.
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from enum import Enum, IntFlag

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from shared.config import RoleKindSetting, Settings, get_settings
from shared.observability import get_logger, setup_logging

from .extractors import extractor_from_settings
from .router import HttpRouter

logger = get_logger(__name__)

# Track service start time
_start_time = time.time()


class StaffRole(str, Enum):
    """Textual roles of the example app."""

    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"
    GUEST = "GUEST"


class StaffFlag(IntFlag):
    """Numeric roles of the example app."""

    ADMIN = 0x01
    CUSTOMER = 0x02
    GUEST = 0x04


async def health(request: Request) -> JSONResponse:
    """Basic health check."""
    settings = get_settings()
    return JSONResponse(
        {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "uptime_seconds": int(time.time() - _start_time),
        }
    )


async def list_orders(request: Request) -> JSONResponse:
    return JSONResponse({"orders": []})


async def get_order(request: Request) -> JSONResponse:
    return JSONResponse({"id": request.path_params["order_id"]})


async def delete_orders(request: Request) -> Response:
    return Response(status_code=204)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(
        "Starting rolegate example service",
        version=settings.app_version,
        role_header=settings.authz.role_header,
        role_kind=settings.authz.role_kind.value,
        routes=list(app.state.http_router.patterns),
    )

    yield

    logger.info("Shutting down rolegate example service")


def wire_routes(http_router: HttpRouter, numeric: bool) -> None:
    """Declare the example endpoints on ``http_router``."""
    roles = StaffFlag if numeric else StaffRole

    root = http_router.new_route()
    root.handle("GET", health, path="health")

    orders = root.next("api", "v1", "orders")
    orders.allow_for("GET", list_orders, roles.ADMIN, roles.CUSTOMER)
    orders.allow_for("DELETE", delete_orders, roles.ADMIN)
    orders.deny_for("GET", get_order, roles.GUEST, path="{order_id}")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Rolegate example",
        description="Role-guarded endpoints behind an authorization gate",
        version=settings.app_version,
        lifespan=lifespan,
    )

    http_router = HttpRouter(
        extractor_from_settings(settings.authz),
        router=app.router,
    )
    wire_routes(http_router, numeric=settings.authz.role_kind == RoleKindSetting.NUMERIC)
    app.state.http_router = http_router

    return app


app = create_app()
