# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/gateway.py

Acceso a la API de Stripe necesario para mapear eventos a pedidos:
- line items de una checkout session
- perfil del cliente de una factura

El SDK de Stripe es síncrono; las llamadas se ejecutan en el threadpool
de Starlette para no bloquear el event loop. La API key se pasa por
llamada (sin mutar stripe.api_key global).

Autor: Yava
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol

import stripe
from fastapi.concurrency import run_in_threadpool

from .events import CustomerProfile, LineItem

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    async def list_line_items(self, session_id: str, limit: int = 100) -> List[LineItem]:
        ...

    async def retrieve_customer(self, customer_id: str) -> Optional[CustomerProfile]:
        ...


def _to_plain(obj: Any) -> Any:
    """Convierte un StripeObject a dict plano para validarlo con pydantic."""
    to_dict = getattr(obj, "to_dict", None) or getattr(obj, "to_dict_recursive", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)


class StripeGateway:
    """Implementación de PaymentGateway sobre el SDK oficial de Stripe."""

    def __init__(self, api_key: Optional[str]) -> None:
        self._api_key = api_key

    async def list_line_items(self, session_id: str, limit: int = 100) -> List[LineItem]:
        result = await run_in_threadpool(
            stripe.checkout.Session.list_line_items,
            session_id,
            api_key=self._api_key,
            limit=limit,
            expand=["data.price.product"],
        )
        items = [LineItem.model_validate(_to_plain(item)) for item in result.data]
        logger.debug("stripe_line_items_listed session=%s count=%d", session_id, len(items))
        return items

    async def retrieve_customer(self, customer_id: str) -> Optional[CustomerProfile]:
        customer = await run_in_threadpool(
            stripe.Customer.retrieve,
            customer_id,
            api_key=self._api_key,
        )
        data = _to_plain(customer)
        if data.get("deleted"):
            logger.warning("stripe_customer_deleted customer=%s", customer_id)
            return None
        return CustomerProfile.model_validate(data)


__all__ = ["PaymentGateway", "StripeGateway"]

# Fin del archivo app/modules/stripe_webhooks/gateway.py
