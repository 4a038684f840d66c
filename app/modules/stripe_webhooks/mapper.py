# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/mapper.py

Mapeo de eventos Stripe verificados a pedidos candidatos (OrderDraft).

- Funciones puras por variante (checkout de pago único, placeholder de
  suscripción, factura pagada) que no hacen I/O.
- EventMapper: obtiene de Stripe los datos complementarios (line items,
  cliente) degradando a valores por defecto si la API falla, y delega en
  las funciones puras.

Valores por defecto visibles para el negocio:
- nombre:    "Cliente sin nombre" (pago) / "Cliente Suscripción" (suscripción)
- dirección: "Sin dirección"
- producto:  "Producto de Stripe" (sin line items) / "Producto" (line item sin nombre)

Autor: Yava
Fecha: 2026-09-07
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Sequence, Union

from app.modules.orders.enums import OrderSource
from app.modules.orders.schemas import OrderDraft, ProductItem, cents_to_money, to_money
from app.shared.config.settings_webhooks import WebhookSettings
from .events import (
    Address,
    CheckoutSession,
    CheckoutSessionCompleted,
    CustomerProfile,
    Invoice,
    InvoicePaid,
    LineItem,
    UnhandledEvent,
)
from .gateway import PaymentGateway

logger = logging.getLogger(__name__)

NO_NAME = "Cliente sin nombre"
SUBSCRIPTION_NO_NAME = "Cliente Suscripción"
NO_ADDRESS = "Sin dirección"
GENERIC_PRODUCT = "Producto de Stripe"
UNNAMED_PRODUCT = "Producto"
SUBSCRIPTION_PRODUCT = "Suscripción Stripe"
INVOICE_PRODUCT = "Producto de Suscripción"


# ===== Helpers =====
def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def format_address(address: Optional[Union[Address, str]]) -> str:
    """Une line1, line2, city, state y postal_code no vacíos con ', '."""
    if isinstance(address, str):
        return address.strip() or NO_ADDRESS
    if address is None:
        return NO_ADDRESS
    parts = [
        (part or "").strip()
        for part in (address.line1, address.line2, address.city, address.state, address.postal_code)
    ]
    joined = ", ".join(p for p in parts if p)
    return joined or NO_ADDRESS


def parse_delivery_time(value: Any, now: datetime, default_hours: int) -> datetime:
    default = now + timedelta(hours=default_hours)
    if not value:
        return default
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("delivery_time_unparseable value=%r", value)
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _checkout_address(session: CheckoutSession) -> str:
    explicit = _first(session.metadata.get("customer_address"))
    if explicit:
        return explicit
    collected = session.collected_information
    for shipping in (
        collected.shipping_details if collected else None,
        session.shipping_details,
        session.shipping,
    ):
        if shipping is not None and shipping.address is not None:
            return format_address(shipping.address)
    return NO_ADDRESS


def _checkout_customer(session: CheckoutSession, default_name: str = NO_NAME) -> tuple[str, str, str]:
    metadata = session.metadata
    details = session.customer_details
    collected = session.collected_information

    name = _first(
        metadata.get("customer_name"),
        collected.individual_name if collected else None,
        details.name if details else None,
        details.individual_name if details else None,
    ) or default_name
    phone = _first(
        metadata.get("customer_phone"),
        details.phone if details else None,
    ) or ""
    return name, phone, _checkout_address(session)


def products_from_line_items(items: Sequence[LineItem], session: CheckoutSession) -> List[ProductItem]:
    """
    Un ProductItem por line item con precio unitario = amount_total / quantity / 100.
    Sin line items se genera un producto genérico por el total de la sesión.
    """
    products: List[ProductItem] = []
    for item in items:
        quantity = item.quantity or 1
        name = _first(
            item.description,
            item.price.product_name if item.price else None,
        ) or UNNAMED_PRODUCT
        unit_price = to_money(cents_to_money(item.amount_total) / quantity)
        products.append(ProductItem(name=name, quantity=quantity, price=unit_price))

    if not products:
        products.append(
            ProductItem(name=GENERIC_PRODUCT, quantity=1, price=cents_to_money(session.amount_total))
        )
    return products


# ===== Mapeo puro por variante =====
def map_checkout_payment(
    session: CheckoutSession,
    line_items: Sequence[LineItem],
    *,
    now: datetime,
    default_hours: int = 24,
) -> OrderDraft:
    name, phone, address = _checkout_customer(session)
    return OrderDraft(
        business_hint=_first(session.metadata.get("business_id")),
        customer_name=name,
        customer_phone=phone,
        customer_address=address,
        products=products_from_line_items(line_items, session),
        delivery_time=parse_delivery_time(session.metadata.get("delivery_time"), now, default_hours),
        source=OrderSource.STRIPE,
        notes=_first(session.metadata.get("notes")),
        stripe_session_id=session.id,
    )


def map_subscription_placeholder(
    session: CheckoutSession,
    *,
    now: datetime,
    default_hours: int = 24,
) -> OrderDraft:
    """Pedido ligero que deja constancia de que se inició una suscripción."""
    name, phone, address = _checkout_customer(session, SUBSCRIPTION_NO_NAME)
    return OrderDraft(
        business_hint=_first(session.metadata.get("business_id")),
        customer_name=name,
        customer_phone=phone,
        customer_address=address,
        products=[
            ProductItem(name=SUBSCRIPTION_PRODUCT, quantity=1, price=cents_to_money(session.amount_total))
        ],
        delivery_time=parse_delivery_time(session.metadata.get("delivery_time"), now, default_hours),
        source=OrderSource.STRIPE_SUBSCRIPTION,
        notes=f"Suscripción inicial - Session: {session.id}, Subscription: {session.subscription}",
        stripe_session_id=session.id,
        stripe_subscription_id=session.subscription,
    )


def _invoice_business_hint(invoice: Invoice) -> Optional[str]:
    details = (invoice.parent or {}).get("subscription_details") or {}
    return _first(
        invoice.metadata.get("business_id"),
        (details.get("metadata") or {}).get("business_id"),
    )


def map_invoice(
    invoice: Invoice,
    customer: Optional[CustomerProfile],
    *,
    now: datetime,
    default_hours: int = 24,
) -> List[OrderDraft]:
    """
    Una orden por unidad: un line item con quantity N produce N pedidos de
    quantity 1, cada uno con precio unitario = amount / 100.
    """
    name = _first(
        customer.name if customer else None,
        customer.email if customer else None,
        invoice.customer_name,
        invoice.customer_email,
    ) or NO_NAME
    phone = _first(customer.phone if customer else None, invoice.customer_phone) or ""
    if customer is not None and customer.address is not None:
        address = format_address(customer.address)
    else:
        address = format_address(invoice.customer_address)

    hint = _invoice_business_hint(invoice)
    subscription_id = invoice.subscription_id
    delivery_time = now + timedelta(hours=default_hours)

    drafts: List[OrderDraft] = []
    for line in invoice.lines.data:
        product_name = _first(line.description) or INVOICE_PRODUCT
        unit_price = cents_to_money(line.amount)
        for _ in range(line.quantity or 1):
            drafts.append(
                OrderDraft(
                    business_hint=hint,
                    customer_name=name,
                    customer_phone=phone,
                    customer_address=address,
                    products=[ProductItem(name=product_name, quantity=1, price=unit_price)],
                    delivery_time=delivery_time,
                    source=OrderSource.STRIPE,
                    notes=f"Suscripción - Invoice: {invoice.id}",
                    stripe_invoice_id=invoice.id,
                    stripe_subscription_id=subscription_id,
                )
            )
    return drafts


# ===== Orquestación con datos de Stripe =====
@dataclass
class MappingResult:
    drafts: List[OrderDraft] = field(default_factory=list)
    handled: bool = True
    # Los fallos de escritura de un placeholder se registran pero no fallan el evento
    best_effort: bool = False


class EventMapper:
    def __init__(
        self,
        gateway: PaymentGateway,
        settings: WebhookSettings,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.gateway = gateway
        self.settings = settings
        self.clock = clock

    async def _line_items(self, session_id: str) -> List[LineItem]:
        try:
            return await self.gateway.list_line_items(session_id, limit=self.settings.stripe_line_items_limit)
        except Exception as e:
            logger.warning("stripe_line_items_failed session=%s error=%s", session_id, e)
            return []

    async def _customer(self, customer_id: Optional[str]) -> Optional[CustomerProfile]:
        if not customer_id:
            return None
        try:
            return await self.gateway.retrieve_customer(customer_id)
        except Exception as e:
            logger.warning("stripe_customer_lookup_failed customer=%s error=%s", customer_id, e)
            return None

    async def map(
        self,
        event: Union[CheckoutSessionCompleted, InvoicePaid, UnhandledEvent],
    ) -> MappingResult:
        now = self.clock()
        hours = self.settings.default_delivery_hours

        if isinstance(event, CheckoutSessionCompleted):
            session = event.session
            if session.is_subscription:
                if not self.settings.subscription_placeholder_enabled:
                    logger.info("subscription_checkout_signal session=%s placeholder=off", session.id)
                    return MappingResult()
                return MappingResult(
                    drafts=[map_subscription_placeholder(session, now=now, default_hours=hours)],
                    best_effort=True,
                )
            line_items = await self._line_items(session.id)
            return MappingResult(
                drafts=[map_checkout_payment(session, line_items, now=now, default_hours=hours)]
            )

        if isinstance(event, InvoicePaid):
            invoice = event.invoice
            if not invoice.lines.data:
                logger.info("invoice_without_lines invoice=%s", invoice.id)
                return MappingResult()
            customer = await self._customer(invoice.customer)
            return MappingResult(drafts=map_invoice(invoice, customer, now=now, default_hours=hours))

        logger.info("stripe_event_unhandled type=%s id=%s", event.type, event.id)
        return MappingResult(handled=False)


__all__ = [
    "EventMapper",
    "MappingResult",
    "format_address",
    "map_checkout_payment",
    "map_invoice",
    "map_subscription_placeholder",
    "parse_delivery_time",
    "products_from_line_items",
]

# Fin del archivo app/modules/stripe_webhooks/mapper.py
