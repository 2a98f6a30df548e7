"""Incident synchronizer — turns one alert batch into CachetHQ incident writes."""

from __future__ import annotations

import logging
from typing import Literal

from opentelemetry import trace
from pydantic import BaseModel

from bridge.cachet.client import IncidentClient
from bridge.cachet.models import STATUS_MAP, AlertOutcome, IncidentStatus
from bridge.cachet.resolver import ComponentResolver
from bridge.ingestion.models import AlertBatch
from bridge.telemetry.metrics import alerts_total

logger = logging.getLogger("bridge.sync")
tracer = trace.get_tracer(__name__)


class SyncResult(BaseModel):
    outcome: AlertOutcome
    created: list[int] = []
    updated: list[int] = []
    skipped: list[str] = []
    deduplicated: list[str] = []


class IncidentSynchronizer:
    """Processes a batch sequentially, at most one incident write per component.

    Any client error aborts the rest of the batch and propagates to the caller.
    """

    def __init__(
        self,
        client: IncidentClient,
        resolver: ComponentResolver | None = None,
        *,
        label_name: str = "alertname",
        incident_mode: Literal["create", "update"] = "create",
    ) -> None:
        self._client = client
        self._resolver = resolver or ComponentResolver(client)
        self._label_name = label_name
        self._incident_mode = incident_mode

    async def process(self, batch: AlertBatch) -> SyncResult:
        outcome = AlertOutcome.FIRING if batch.firing else AlertOutcome.RESOLVED
        result = SyncResult(outcome=outcome)

        with tracer.start_as_current_span("sync-batch") as span:
            span.set_attribute("alert.outcome", outcome.value)
            span.set_attribute("alert.count", len(batch.alerts))

            components = await self._resolver.component_map()
            fired: set[int] = set()

            for alert in batch.alerts:
                name = alert.labels.get(self._label_name, "")
                component_id = components.get(name)
                if component_id is None:
                    logger.debug("No component named %r, skipping alert", name)
                    result.skipped.append(name)
                    alerts_total.labels(outcome=outcome.value, action="skipped").inc()
                    continue

                if component_id in fired:
                    logger.debug("Component %r already handled in this batch", name)
                    result.deduplicated.append(name)
                    alerts_total.labels(outcome=outcome.value, action="deduplicated").inc()
                    continue
                fired.add(component_id)

                await self._write(name, component_id, outcome, result)

        logger.info(
            "Batch %s: %d alerts, %d created, %d updated, %d skipped, %d deduplicated",
            outcome.value,
            len(batch.alerts),
            len(result.created),
            len(result.updated),
            len(result.skipped),
            len(result.deduplicated),
        )
        return result

    async def _write(self, name: str, component_id: int, outcome: AlertOutcome, result: SyncResult) -> None:
        if self._incident_mode == "update":
            incidents = await self._client.search_incidents(component_id)
            if incidents and incidents[0].status != IncidentStatus.FIXED:
                incident_id = incidents[0].id
                await self._client.update_incident(name, component_id, incident_id, outcome)
                logger.info("Updated incident %d for component %r (%s)", incident_id, name, outcome.value)
                result.updated.append(incident_id)
                alerts_total.labels(outcome=outcome.value, action="updated").inc()
                return

        component_status = STATUS_MAP[outcome].component_status
        await self._client.create_incident(name, component_id, outcome, component_status)
        logger.info("Created incident for component %r (%s)", name, outcome.value)
        result.created.append(component_id)
        alerts_total.labels(outcome=outcome.value, action="created").inc()
