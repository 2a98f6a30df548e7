"""Bridge configuration — remote endpoint, shared secret and server knobs."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore", "populate_by_name": True}

    # Inbound webhook
    prometheus_token: str = ""
    label_name: str = "alertname"

    # CachetHQ
    cachethq_url: str = "http://127.0.0.1/"
    cachethq_token: str = ""
    cachethq_root_ca: str = ""
    cachethq_skip_verify: bool = False
    cachethq_timeout: float = 10.0

    # Synchronization policy
    incident_mode: Literal["create", "update"] = "create"
    strict_writes: bool = True
    alert_source: str = "Prometheus"

    # Server
    log_level: str = "info"
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    ssl_cert_file: str = ""
    ssl_key_file: str = ""

    # Tracing
    otlp_endpoint: str = Field(default="", validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT")

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_cert_file and self.ssl_key_file)
