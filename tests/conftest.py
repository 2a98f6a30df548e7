from __future__ import annotations

import json
import logging
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from bridge.cachet.client import CachetClient
from bridge.cachet.memory import InMemoryIncidentClient
from bridge.config import Settings
from bridge.main import create_app

BASE_URL = "http://cachet.test"


def component_page(components: dict[str, int], current_page: int = 1, total_pages: int = 1) -> dict:
    return {
        "meta": {
            "pagination": {
                "total": len(components),
                "count": len(components),
                "per_page": 20,
                "current_page": current_page,
                "total_pages": total_pages,
                "links": {"next_page": None, "previous_page": None},
            }
        },
        "data": [
            {"id": cid, "name": name, "status": 1, "status_name": "Operational"}
            for name, cid in components.items()
        ],
    }


def alert_batch(status: str = "firing", *names: str, label: str = "alertname") -> dict:
    return {
        "receiver": "cachethq-receiver",
        "status": status,
        "alerts": [
            {
                "status": status,
                "labels": {label: name},
                "annotations": {},
                "startsAt": "2018-05-22T20:00:32.729840058-04:00",
                "endsAt": "0001-01-01T00:00:00Z",
                "generatorURL": "",
            }
            for name in names
        ],
        "groupLabels": {},
        "commonLabels": {},
        "commonAnnotations": {},
        "externalURL": "http://localhost.localdomain:9093",
        "version": "4",
        "groupKey": "{}:{}",
    }


class CountingClient(InMemoryIncidentClient):
    list_calls: int = 0

    async def list_components(self) -> dict[str, int]:
        self.list_calls += 1
        return await super().list_components()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        prometheus_token="promToken",
        cachethq_url=BASE_URL,
        cachethq_token="1234567890abcdef",
        log_level="debug",
    )


@pytest.fixture
def memory_client() -> CountingClient:
    return CountingClient(components={"component21": 1})


@pytest.fixture
def app_client(settings, memory_client) -> TestClient:
    with TestClient(create_app(settings, memory_client)) as client:
        yield client


@pytest.fixture
def mock_cachet() -> Callable[[Callable[[httpx.Request], httpx.Response]], CachetClient]:
    """Build a CachetClient whose transport is answered by ``handler``."""

    def _build(handler, **kwargs) -> CachetClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CachetClient(BASE_URL + "/", "1234567890abcdef", http, **kwargs)

    return _build


def json_response(payload: dict, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})


@pytest.fixture
def bridge_caplog(caplog):
    """caplog wired to the ``bridge`` logger, which does not propagate to root."""
    bridge_logger = logging.getLogger("bridge")
    bridge_logger.addHandler(caplog.handler)
    yield caplog
    bridge_logger.removeHandler(caplog.handler)
