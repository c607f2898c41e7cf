"""Observability module for structured logging."""

from .logging import (
    build_processors,
    get_logger,
    log_authorization_decision,
    log_route_registered,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    "build_processors",
    "get_logger",
    # Logging helpers
    "log_route_registered",
    "log_authorization_decision",
]
