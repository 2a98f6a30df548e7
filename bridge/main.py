"""Alertmanager → CachetHQ bridge — FastAPI service entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from starlette.responses import Response

from bridge.cachet.client import CachetClient, IncidentClient
from bridge.cachet.resolver import ComponentResolver
from bridge.config import Settings
from bridge.errors import BridgeError
from bridge.ingestion.receiver import router as alert_router
from bridge.middleware import MetricsMiddleware
from bridge.sync.synchronizer import IncidentSynchronizer
from bridge.telemetry.logging import setup_logging
from bridge.telemetry.metrics import get_metrics
from bridge.telemetry.tracing import setup_tracing

logger = logging.getLogger("bridge")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "Bridge ready: cachethq=%s label=%s mode=%s auth=%s",
        settings.cachethq_url,
        settings.label_name,
        settings.incident_mode,
        "on" if settings.prometheus_token else "off",
    )

    yield

    await app.state.client.close()
    logger.info("Bridge shut down")


def create_app(settings: Settings | None = None, client: IncidentClient | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)
    tracer_provider = setup_tracing(settings)

    client = client or CachetClient.from_settings(settings)

    app = FastAPI(
        title="Cachet Bridge",
        description="Forwards Alertmanager webhooks to CachetHQ incidents",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.client = client
    app.state.synchronizer = IncidentSynchronizer(
        client,
        ComponentResolver(client),
        label_name=settings.label_name,
        incident_mode=settings.incident_mode,
    )

    app.add_middleware(MetricsMiddleware)
    app.include_router(alert_router)

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "OK"}

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        body, content_type = get_metrics()
        return Response(content=body, media_type=content_type)

    if tracer_provider is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)

    return app


def run() -> None:
    settings = Settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.http_host,
        port=settings.http_port,
        ssl_certfile=settings.ssl_cert_file if settings.tls_enabled else None,
        ssl_keyfile=settings.ssl_key_file if settings.tls_enabled else None,
        log_config=None,
    )


if __name__ == "__main__":
    run()
