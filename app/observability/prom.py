# -*- coding: utf-8 -*-
"""
app/observability/prom.py

Métricas Prometheus del backend de Yava.

- Latencia y conteo HTTP etiquetados con la plantilla de ruta
  (/api/businesses/{business_id}/orders/stats), no con la URL concreta.
- GET /metrics en formato texto de Prometheus; con PROMETHEUS_MULTIPROC_DIR
  agrega las métricas de todos los workers de uvicorn.

Las métricas de la ingesta Stripe se definen en
app/modules/stripe_webhooks/metrics.py y se exponen por el mismo endpoint.

Autor: Yava
Fecha: 2026-09-10
"""
from __future__ import annotations

import os
from time import perf_counter

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_LABELS = ("method", "route", "status")

HTTP_REQUESTS = Counter("yava_http_requests_total", "Peticiones HTTP atendidas", _LABELS)
HTTP_LATENCY = Histogram(
    "yava_http_request_duration_seconds",
    "Duración de peticiones HTTP (s)",
    _LABELS,
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Rutas que no se instrumentan
_SKIP_PATHS = frozenset({"/metrics", "/health/live"})


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    return template or "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        started = perf_counter()
        response = await call_next(request)
        labels = (request.method, _route_label(request), str(response.status_code))
        HTTP_LATENCY.labels(*labels).observe(perf_counter() - started)
        HTTP_REQUESTS.labels(*labels).inc()
        return response


def _metrics_registry() -> CollectorRegistry:
    if not os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        return REGISTRY
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    return registry


def mount_metrics(app: FastAPI, path: str = "/metrics") -> None:
    registry = _metrics_registry()

    @app.get(path, include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI) -> None:
    """Middleware HTTP + endpoint /metrics."""
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = ["PrometheusMiddleware", "mount_metrics", "setup_observability"]

# Fin del archivo app/observability/prom.py
