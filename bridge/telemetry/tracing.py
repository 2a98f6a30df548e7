"""OpenTelemetry tracing, enabled when an OTLP endpoint is configured."""

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from bridge.config import Settings

SERVICE_NAME = "cachet-bridge"
SERVICE_VERSION = "1.0.0"


def bridge_resource(settings: Settings) -> Resource:
    """Resource attributes identifying which CachetHQ and policy this instance serves."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "bridge.cachethq.url": settings.cachethq_url.rstrip("/"),
            "bridge.label_name": settings.label_name,
            "bridge.incident_mode": settings.incident_mode,
            "bridge.strict_writes": settings.strict_writes,
        }
    )


def setup_tracing(settings: Settings) -> TracerProvider | None:
    if not settings.otlp_endpoint:
        return None

    provider = TracerProvider(resource=bridge_resource(settings))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)))

    trace.set_tracer_provider(provider)
    return provider
