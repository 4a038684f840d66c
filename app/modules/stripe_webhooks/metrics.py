# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/metrics.py

Métricas Prometheus de la ingesta de webhooks Stripe.

Autor: Yava
Fecha: 2026-09-08
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterator

from prometheus_client import Counter, Histogram

WEBHOOK_EVENTS = Counter(
    "stripe_webhook_events_total",
    "Eventos Stripe recibidos por tipo y resultado",
    ["event_type", "outcome"],
)

WEBHOOK_ORDERS_CREATED = Counter(
    "stripe_webhook_orders_created_total",
    "Pedidos creados desde eventos Stripe",
    ["source"],
)

WEBHOOK_PROCESSING_SECONDS = Histogram(
    "stripe_webhook_processing_seconds",
    "Duración del procesamiento de un webhook (s)",
    ["outcome"],
)


def record_event(event_type: str, outcome: str) -> None:
    WEBHOOK_EVENTS.labels(event_type or "unknown", outcome).inc()


def record_orders(source: str, count: int) -> None:
    if count > 0:
        WEBHOOK_ORDERS_CREATED.labels(source).inc(count)


@contextmanager
def time_processing(outcome_holder: dict) -> Iterator[None]:
    """Mide la duración; el resultado final se lee de outcome_holder['outcome']."""
    start = perf_counter()
    try:
        yield
    finally:
        WEBHOOK_PROCESSING_SECONDS.labels(outcome_holder.get("outcome", "error")).observe(
            perf_counter() - start
        )


__all__ = [
    "WEBHOOK_EVENTS",
    "WEBHOOK_ORDERS_CREATED",
    "WEBHOOK_PROCESSING_SECONDS",
    "record_event",
    "record_orders",
    "time_processing",
]

# Fin del archivo app/modules/stripe_webhooks/metrics.py
