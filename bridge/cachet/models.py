"""CachetHQ API vocabulary: status codes, response envelopes and incident bodies."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import NamedTuple

from pydantic import BaseModel


class ComponentStatus(IntEnum):
    OPERATIONAL = 1
    PERFORMANCE_ISSUES = 2
    PARTIAL_OUTAGE = 3
    MAJOR_OUTAGE = 4


class IncidentStatus(IntEnum):
    SCHEDULED = 0
    INVESTIGATING = 1
    IDENTIFIED = 2
    WATCHING = 3
    FIXED = 4


class AlertOutcome(str, Enum):
    FIRING = "firing"
    RESOLVED = "resolved"


class StatusMapping(NamedTuple):
    name_suffix: str
    message_template: str
    incident_status: IncidentStatus
    component_status: ComponentStatus


STATUS_MAP: dict[AlertOutcome, StatusMapping] = {
    AlertOutcome.FIRING: StatusMapping(
        " down",
        "{source} flagged service {name} as down",
        IncidentStatus.IDENTIFIED,
        ComponentStatus.MAJOR_OUTAGE,
    ),
    AlertOutcome.RESOLVED: StatusMapping(
        " up",
        "{source} flagged service {name} as recovered",
        IncidentStatus.FIXED,
        ComponentStatus.OPERATIONAL,
    ),
}


# ── Response envelopes ─────────────────────────────────────────────


class Pagination(BaseModel):
    current_page: int = 0
    total_pages: int = 0

    @property
    def exhausted(self) -> bool:
        return self.current_page >= self.total_pages


class Meta(BaseModel):
    pagination: Pagination = Pagination()


class Component(BaseModel):
    id: int
    name: str


class Incident(BaseModel):
    id: int
    component_id: int = 0
    status: IncidentStatus
    component_status: ComponentStatus | None = None
    name: str = ""
    message: str = ""
    visible: bool = True


class ComponentPage(BaseModel):
    meta: Meta = Meta()
    data: list[Component]


class IncidentPage(BaseModel):
    meta: Meta = Meta()
    data: list[Incident]


# ── Request bodies ─────────────────────────────────────────────────


class IncidentBody(BaseModel):
    """Body of ``POST /api/v1/incidents`` and ``PUT /api/v1/incidents/{id}``."""

    name: str
    message: str
    status: IncidentStatus
    component_id: int
    component_status: ComponentStatus
    visible: bool = True

    @classmethod
    def for_outcome(
        cls,
        component_name: str,
        component_id: int,
        outcome: AlertOutcome,
        component_status: ComponentStatus | None = None,
        source: str = "Prometheus",
    ) -> IncidentBody:
        mapping = STATUS_MAP[outcome]
        return cls(
            name=f"{component_name}{mapping.name_suffix}",
            message=mapping.message_template.format(source=source, name=component_name).strip(),
            status=mapping.incident_status,
            component_id=component_id,
            component_status=component_status or mapping.component_status,
        )
