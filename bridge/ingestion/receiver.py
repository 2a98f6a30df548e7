"""Alert webhook receiver — authenticates and parses Alertmanager deliveries."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError

from bridge.errors import PayloadError
from bridge.ingestion.auth import check_bearer
from bridge.ingestion.models import AlertBatch
from bridge.sync.synchronizer import IncidentSynchronizer

logger = logging.getLogger("bridge.ingestion")
router = APIRouter(tags=["ingestion"])


def parse_batch(body: bytes) -> AlertBatch:
    try:
        return AlertBatch.model_validate_json(body)
    except ValidationError as exc:
        logger.debug("Rejected payload: %s", exc)
        raise PayloadError(f"invalid alert payload: {exc.errors()[0]['msg']}") from exc


@router.post("/alert")
async def submit_alert(request: Request):
    """Receive an Alertmanager webhook and forward it to CachetHQ."""
    check_bearer(request.headers.get("Authorization"), request.app.state.settings.prometheus_token)
    batch = parse_batch(await request.body())

    logger.info(
        "Received %s batch from %r with %d alerts",
        batch.status, batch.receiver or "unknown", len(batch.alerts),
    )

    synchronizer: IncidentSynchronizer = request.app.state.synchronizer
    await synchronizer.process(batch)
    return {"status": "OK"}
