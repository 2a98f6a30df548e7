"""Data models for the Alertmanager webhook payload."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Alert(BaseModel):
    """A single alert of an Alertmanager webhook delivery.

    Per-alert ``status`` is accepted when Alertmanager sends it but the
    batch-level status is the only one acted upon.
    """

    model_config = {"populate_by_name": True}

    labels: dict[str, str] = {}
    annotations: dict[str, str] = {}
    starts_at: str = Field(alias="startsAt", default="")
    ends_at: str = Field(alias="endsAt", default="")
    status: str = ""
    generator_url: str = Field(alias="generatorURL", default="")
    fingerprint: str = ""


class AlertBatch(BaseModel):
    """Full Alertmanager webhook payload; ``version`` and ``status`` are mandatory."""

    model_config = {"populate_by_name": True}

    version: str
    group_key: str = Field(alias="groupKey", default="")
    status: str
    receiver: str = ""
    group_labels: dict[str, str] = Field(alias="groupLabels", default={})
    common_labels: dict[str, str] = Field(alias="commonLabels", default={})
    common_annotations: dict[str, str] = Field(alias="commonAnnotations", default={})
    external_url: str = Field(alias="externalURL", default="")
    alerts: list[Alert] = []

    @property
    def firing(self) -> bool:
        return self.status == "firing"
