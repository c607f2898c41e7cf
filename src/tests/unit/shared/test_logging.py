"""Unit tests for structured logging setup."""

import json
import logging

import structlog
from structlog.testing import capture_logs

from shared.config import Environment, LogFormat, Settings
from shared.observability import (
    build_processors,
    log_authorization_decision,
    log_route_registered,
)
from shared.observability.logging import service_context


def run_chain(processors, event_dict, method_name="info"):
    logger = logging.getLogger("rolegate.router")
    for processor in processors:
        event_dict = processor(logger, method_name, event_dict)
    return event_dict


class TestServiceContext:
    def test_adds_service_identity(self):
        """Test events carry service name, version and environment."""
        settings = Settings(app_name="orders-api", app_version="2.1.0", ENV=Environment.STAGING)
        event = service_context(settings)(None, "info", {"event": "hello"})

        assert event["service"] == "orders-api"
        assert event["version"] == "2.1.0"
        assert event["environment"] == "staging"

    def test_keeps_explicit_fields(self):
        """Test fields already on the event are not overwritten."""
        event = service_context(Settings())(None, "info", {"event": "hello", "service": "mine"})
        assert event["service"] == "mine"


class TestProcessorChain:
    def test_json_renders_one_line(self):
        """Test the JSON chain renders a route event as a JSON object."""
        processors = build_processors(Settings(log_format=LogFormat.JSON))

        rendered = run_chain(processors, {"event": "Route registered", "pattern": "GET /orders"})
        payload = json.loads(rendered)

        assert payload["event"] == "Route registered"
        assert payload["pattern"] == "GET /orders"
        assert payload["level"] == "info"
        assert payload["logger"] == "rolegate.router"
        assert payload["service"] == "rolegate"
        assert "timestamp" in payload

    def test_text_ends_with_console_renderer(self):
        """Test the text format renders through the console renderer."""
        processors = build_processors(Settings(log_format=LogFormat.TEXT))
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestEventHelpers:
    def test_route_registered(self):
        """Test route wiring is logged at info with its guard and roles."""
        with capture_logs() as logs:
            log_route_registered(structlog.get_logger("test"), "GET /orders", "allow", ["ADMIN"])

        assert logs == [
            {
                "event": "Route registered",
                "pattern": "GET /orders",
                "guard": "allow",
                "roles": ["ADMIN"],
                "log_level": "info",
            }
        ]

    def test_authorization_decision(self):
        """Test gate decisions are logged at debug."""
        with capture_logs() as logs:
            log_authorization_decision(
                structlog.get_logger("test"), "forbidden", "GET", "/orders", role="GUEST"
            )

        (entry,) = logs
        assert entry["log_level"] == "debug"
        assert entry["outcome"] == "forbidden"
        assert entry["http_path"] == "/orders"
