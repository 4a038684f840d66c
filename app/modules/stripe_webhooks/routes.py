# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/routes.py

Endpoint de webhooks Stripe que genera pedidos de entrega.

Endpoint:
- POST /api/webhooks/stripe?secret=<token>   (o header x-webhook-secret)
- OPTIONS /api/webhooks/stripe               -> 200 (preflight)
- Otros métodos                              -> 405

El body se lee crudo (request.body()) porque la firma se calcula sobre
los bytes exactos enviados por Stripe.

Autor: Yava
Fecha: 2026-09-09
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse, Response

from .dependencies import get_ingestion_orchestrator
from .orchestrator import IngestionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/webhooks",
    tags=["webhooks:stripe"],
)


@router.post("/stripe", status_code=status.HTTP_200_OK)
async def stripe_orders_webhook(
    request: Request,
    secret: Optional[str] = Query(default=None, description="Token de ruteo del negocio"),
    x_webhook_secret: Optional[str] = Header(default=None),
    stripe_signature: Optional[str] = Header(default=None),
    orchestrator: IngestionOrchestrator = Depends(get_ingestion_orchestrator),
) -> JSONResponse:
    """
    Webhook de Stripe para pedidos de entrega.

    Procesa eventos:
    - checkout.session.completed: pedido (pago único) o placeholder (suscripción)
    - invoice.paid: un pedido por unidad de cada línea de la factura

    Otros tipos se reconocen con 200 sin efectos.
    """
    raw_body = await request.body()
    routing_token = secret or x_webhook_secret

    outcome = await orchestrator.handle(raw_body, stripe_signature, routing_token)

    logger.info(
        "stripe_webhook_response status=%s state=%s event_id=%s",
        outcome.status_code,
        outcome.state.value,
        outcome.event_id,
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.options("/stripe", include_in_schema=False)
async def stripe_orders_webhook_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.api_route("/stripe", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def stripe_orders_webhook_method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"error": "Method not allowed"},
        headers={"Allow": "POST, OPTIONS"},
    )


__all__ = ["router"]

# Fin del archivo app/modules/stripe_webhooks/routes.py
