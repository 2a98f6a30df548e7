"""Request metrics middleware, labelled by route template."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bridge.telemetry.metrics import http_request_duration, http_requests_total

_SKIP_PATHS = {"/metrics", "/health", "/openapi.json", "/docs", "/redoc"}
UNMATCHED = "unmatched"


def route_template(request: Request) -> str:
    """Path template of the matched route, so unknown URLs share a single label."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # the router fills scope["route"] while handling the request
        endpoint = route_template(request)
        status = str(response.status_code)
        http_request_duration.labels(method=request.method, endpoint=endpoint, status_code=status).observe(elapsed)
        http_requests_total.labels(method=request.method, endpoint=endpoint, status_code=status).inc()

        return response
