"""CachetHQ client — paginated reads and incident writes against the CachetHQ HTTP API."""

from __future__ import annotations

import abc
import logging
import ssl
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bridge.cachet.models import (
    AlertOutcome,
    ComponentPage,
    ComponentStatus,
    Incident,
    IncidentBody,
    IncidentPage,
)
from bridge.config import Settings
from bridge.errors import ComponentNotFoundError, ResolutionError, UpstreamWriteError
from bridge.telemetry.metrics import cachet_requests_total

logger = logging.getLogger("bridge.cachet")

# Pagination metadata is the only termination signal; never walk more pages than this.
MAX_PAGES = 99

_Page = TypeVar("_Page", bound=BaseModel)


class IncidentClient(abc.ABC):
    """Operations the synchronizer needs from an incident-management API."""

    @abc.abstractmethod
    async def list_components(self) -> dict[str, int]:
        """Return every known component as ``{name: id}``."""

    @abc.abstractmethod
    async def search_component(self, name: str) -> int:
        """Return the id of the single component called ``name``."""

    @abc.abstractmethod
    async def search_incidents(self, component_id: int) -> list[Incident]:
        """Return the incidents of a component, newest first."""

    @abc.abstractmethod
    async def create_incident(
        self,
        component_name: str,
        component_id: int,
        outcome: AlertOutcome,
        component_status: ComponentStatus,
    ) -> None: ...

    @abc.abstractmethod
    async def update_incident(
        self,
        component_name: str,
        component_id: int,
        incident_id: int,
        outcome: AlertOutcome,
    ) -> None: ...

    async def close(self) -> None:
        return None


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Pooled transport shared by every delivery, honouring the remote TLS options."""
    verify: ssl.SSLContext | bool = True
    if settings.cachethq_skip_verify:
        verify = False
    elif settings.cachethq_root_ca:
        verify = ssl.create_default_context(cafile=settings.cachethq_root_ca)
    return httpx.AsyncClient(timeout=settings.cachethq_timeout, verify=verify)


class CachetClient(IncidentClient):
    def __init__(
        self,
        base_url: str,
        token: str,
        http: httpx.AsyncClient | None = None,
        *,
        strict_writes: bool = True,
        source: str = "Prometheus",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "X-Cachet-Token": token,
        }
        self._http = http or httpx.AsyncClient(timeout=10.0)
        self._strict_writes = strict_writes
        self._source = source

    @classmethod
    def from_settings(cls, settings: Settings, http: httpx.AsyncClient | None = None) -> CachetClient:
        return cls(
            settings.cachethq_url,
            settings.cachethq_token,
            http or build_http_client(settings),
            strict_writes=settings.strict_writes,
            source=settings.alert_source,
        )

    async def close(self) -> None:
        await self._http.aclose()

    # ── Reads ──────────────────────────────────────────────────────

    async def list_components(self) -> dict[str, int]:
        components: dict[str, int] = {}
        for page in range(1, MAX_PAGES + 1):
            body = await self._read("/api/v1/components", {"page": page}, ComponentPage)
            for component in body.data:
                components[component.name] = component.id
            if body.meta.pagination.exhausted:
                break
        else:
            logger.warning("Component listing stopped after %d pages", MAX_PAGES)

        logger.debug("Listed %d components", len(components))
        return components

    async def search_component(self, name: str) -> int:
        body = await self._read("/api/v1/components", {"name": name, "page": 1}, ComponentPage)
        if len(body.data) != 1:
            raise ComponentNotFoundError(name)
        return body.data[0].id

    async def search_incidents(self, component_id: int) -> list[Incident]:
        incidents: list[Incident] = []
        for page in range(1, MAX_PAGES + 1):
            body = await self._read(
                "/api/v1/incidents",
                {"component_id": component_id, "sort": "id", "order": "desc", "page": page},
                IncidentPage,
            )
            incidents.extend(body.data)
            if body.meta.pagination.exhausted:
                break
        else:
            logger.warning("Incident search for component %d stopped after %d pages", component_id, MAX_PAGES)
        return incidents

    async def _read(self, path: str, params: dict, envelope: type[_Page]) -> _Page:
        try:
            resp = await self._http.get(f"{self._base_url}{path}", params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise ResolutionError(f"GET {path} failed: {exc}") from exc

        cachet_requests_total.labels(method="GET", status_code=str(resp.status_code)).inc()
        logger.debug("GET %s %s -> %d", path, params, resp.status_code)
        if not resp.is_success:
            logger.warning("CachetHQ GET %s returned %d: %s", path, resp.status_code, resp.text)

        try:
            return envelope.model_validate_json(resp.content)
        except ValidationError as exc:
            raise ResolutionError(f"unexpected response from GET {path}: {exc}") from exc

    # ── Writes ─────────────────────────────────────────────────────

    async def create_incident(
        self,
        component_name: str,
        component_id: int,
        outcome: AlertOutcome,
        component_status: ComponentStatus,
    ) -> None:
        body = IncidentBody.for_outcome(
            component_name, component_id, outcome, component_status, source=self._source
        )
        await self._write("POST", "/api/v1/incidents", body)

    async def update_incident(
        self,
        component_name: str,
        component_id: int,
        incident_id: int,
        outcome: AlertOutcome,
    ) -> None:
        body = IncidentBody.for_outcome(component_name, component_id, outcome, source=self._source)
        await self._write("PUT", f"/api/v1/incidents/{incident_id}", body)

    async def _write(self, method: str, path: str, body: IncidentBody) -> None:
        try:
            resp = await self._http.request(
                method,
                f"{self._base_url}{path}",
                content=body.model_dump_json(),
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise UpstreamWriteError(f"{method} {path} failed: {exc}") from exc

        cachet_requests_total.labels(method=method, status_code=str(resp.status_code)).inc()
        logger.debug("%s %s -> %d", method, path, resp.status_code)
        if resp.is_success:
            return

        logger.warning("CachetHQ %s %s returned %d: %s", method, path, resp.status_code, resp.text)
        if self._strict_writes:
            raise UpstreamWriteError(f"{method} {path} returned {resp.status_code}")
