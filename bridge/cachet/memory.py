"""In-memory IncidentClient used to exercise the synchronizer without a CachetHQ server."""

from __future__ import annotations

from dataclasses import dataclass, field

from bridge.cachet.client import IncidentClient
from bridge.cachet.models import (
    AlertOutcome,
    ComponentStatus,
    Incident,
    IncidentBody,
)
from bridge.errors import ComponentNotFoundError, UpstreamWriteError


@dataclass
class RecordedCall:
    method: str
    component_name: str
    component_id: int
    outcome: AlertOutcome
    component_status: ComponentStatus | None = None
    incident_id: int | None = None


@dataclass
class InMemoryIncidentClient(IncidentClient):
    components: dict[str, int] = field(default_factory=dict)
    incidents: list[Incident] = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)
    fail_writes: bool = False

    async def list_components(self) -> dict[str, int]:
        return dict(self.components)

    async def search_component(self, name: str) -> int:
        if name not in self.components:
            raise ComponentNotFoundError(name)
        return self.components[name]

    async def search_incidents(self, component_id: int) -> list[Incident]:
        matching = [i for i in self.incidents if i.component_id == component_id]
        return sorted(matching, key=lambda i: i.id, reverse=True)

    async def create_incident(
        self,
        component_name: str,
        component_id: int,
        outcome: AlertOutcome,
        component_status: ComponentStatus,
    ) -> None:
        self.calls.append(RecordedCall("create", component_name, component_id, outcome, component_status))
        if self.fail_writes:
            raise UpstreamWriteError(f"create failed for {component_name}")

        body = IncidentBody.for_outcome(component_name, component_id, outcome, component_status)
        next_id = max((i.id for i in self.incidents), default=0) + 1
        self.incidents.append(Incident(id=next_id, **body.model_dump()))

    async def update_incident(
        self,
        component_name: str,
        component_id: int,
        incident_id: int,
        outcome: AlertOutcome,
    ) -> None:
        self.calls.append(RecordedCall("update", component_name, component_id, outcome, incident_id=incident_id))
        if self.fail_writes:
            raise UpstreamWriteError(f"update failed for incident {incident_id}")

        body = IncidentBody.for_outcome(component_name, component_id, outcome)
        self.incidents = [
            Incident(id=i.id, **body.model_dump()) if i.id == incident_id else i
            for i in self.incidents
        ]

    def created(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == "create"]

    def updated(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == "update"]
