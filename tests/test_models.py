from __future__ import annotations

import pytest
from pydantic import ValidationError

from bridge.cachet.models import (
    AlertOutcome,
    ComponentPage,
    ComponentStatus,
    IncidentBody,
    IncidentStatus,
)
from bridge.ingestion.models import AlertBatch
from conftest import alert_batch


def test_firing_incident_body():
    body = IncidentBody.for_outcome("API", 1, AlertOutcome.FIRING)
    assert body.name == "API down"
    assert body.message == "Prometheus flagged service API as down"
    assert body.status is IncidentStatus.IDENTIFIED
    assert body.component_status is ComponentStatus.MAJOR_OUTAGE
    assert body.visible is True


def test_resolved_incident_body_with_custom_source():
    body = IncidentBody.for_outcome("API", 1, AlertOutcome.RESOLVED, source="Alertmanager")
    assert body.name == "API up"
    assert body.message == "Alertmanager flagged service API as recovered"
    assert body.status is IncidentStatus.FIXED
    assert body.component_status is ComponentStatus.OPERATIONAL


def test_empty_source_leaves_no_leading_space():
    body = IncidentBody.for_outcome("API", 1, AlertOutcome.FIRING, source="")
    assert body.message == "flagged service API as down"


def test_pagination_without_meta_is_exhausted():
    page = ComponentPage.model_validate({"data": [{"id": 1, "name": "API"}]})
    assert page.meta.pagination.exhausted


def test_alert_batch_parses_alertmanager_payload():
    parsed = AlertBatch.model_validate(alert_batch("resolved", "component21"))
    assert parsed.version == "4"
    assert parsed.receiver == "cachethq-receiver"
    assert parsed.external_url == "http://localhost.localdomain:9093"
    assert parsed.alerts[0].labels == {"alertname": "component21"}
    assert parsed.alerts[0].starts_at.startswith("2018-05-22")
    assert not parsed.firing


def test_alert_batch_allows_missing_optional_fields():
    parsed = AlertBatch.model_validate({"version": "4", "status": "firing"})
    assert parsed.firing
    assert parsed.alerts == []


@pytest.mark.parametrize("missing", ["version", "status"])
def test_alert_batch_requires_version_and_status(missing):
    payload = alert_batch("firing", "component21")
    del payload[missing]
    with pytest.raises(ValidationError):
        AlertBatch.model_validate(payload)
