from __future__ import annotations

import logging

from prometheus_client import REGISTRY
from starlette.requests import Request
from starlette.routing import Route

from bridge.config import Settings
from bridge.middleware import UNMATCHED, route_template
from bridge.telemetry.logging import setup_logging
from bridge.telemetry.tracing import bridge_resource, setup_tracing


def requests_seen(endpoint: str, status_code: str) -> float:
    value = REGISTRY.get_sample_value(
        "http_requests_total",
        {"method": "GET", "endpoint": endpoint, "status_code": status_code},
    )
    return value or 0.0


def test_route_template_uses_matched_route():
    route = Route("/api/{item}", endpoint=lambda request: None)
    request = Request({"type": "http", "method": "GET", "path": "/api/42", "headers": [], "route": route})
    assert route_template(request) == "/api/{item}"


def test_route_template_without_route_is_unmatched():
    request = Request({"type": "http", "method": "GET", "path": "/wp-login.php", "headers": []})
    assert route_template(request) == UNMATCHED


def test_unknown_urls_share_one_metrics_series(app_client):
    before = requests_seen(UNMATCHED, "404")

    app_client.get("/wp-login.php")
    app_client.get("/.env")

    assert requests_seen(UNMATCHED, "404") == before + 2
    assert requests_seen("/wp-login.php", "404") == 0.0


def test_bridge_resource_describes_instance():
    settings = Settings(
        _env_file=None,
        cachethq_url="https://status.example.com/",
        label_name="service",
        incident_mode="update",
    )
    attributes = bridge_resource(settings).attributes

    assert attributes["service.name"] == "cachet-bridge"
    assert attributes["bridge.cachethq.url"] == "https://status.example.com"
    assert attributes["bridge.label_name"] == "service"
    assert attributes["bridge.incident_mode"] == "update"


def test_tracing_disabled_without_endpoint():
    assert setup_tracing(Settings(_env_file=None, otlp_endpoint="")) is None


def test_bridge_logger_does_not_propagate():
    logger = setup_logging("debug")
    assert logger.name == "bridge"
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
