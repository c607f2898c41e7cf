"""Structured logging configuration.

Features:
- JSON and text format support
- Service context injection
- Helpers for route wiring and gate decision events
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from shared.config import LogFormat, Settings, get_settings


def service_context(settings: Settings) -> Processor:
    """Build a processor stamping events with the service identity."""
    context = {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment.value,
    }

    def add_service_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for ``settings.log_format``, renderer last."""
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        service_context(settings),
    ]

    if settings.log_format == LogFormat.JSON:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def setup_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging on stdout.

    Args:
        settings: Level, format and service identity (defaults to get_settings())
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.value),
        stream=sys.stdout,
        format="%(message)s",
    )

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_route_registered(
    logger: structlog.stdlib.BoundLogger,
    pattern: str,
    guard: str,
    roles: list[str] | None = None,
) -> None:
    """Log a handler being installed on the router."""
    logger.info(
        "Route registered",
        pattern=pattern,
        guard=guard,
        roles=roles or [],
    )


def log_authorization_decision(
    logger: structlog.stdlib.BoundLogger,
    outcome: str,
    method: str,
    path: str,
    role: str | None = None,
) -> None:
    """Log the outcome of a single gate evaluation."""
    logger.debug(
        "Authorization decision",
        outcome=outcome,
        http_method=method,
        http_path=path,
        role=role,
    )
