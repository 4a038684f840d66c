# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/events.py

Modelos tipados de los eventos Stripe que consume la ingesta de pedidos.

El evento verificado se valida contra una unión etiquetada por `type`:
- checkout.session.completed -> CheckoutSessionCompleted
- invoice.paid                -> InvoicePaid
- cualquier otro tipo         -> UnhandledEvent

Solo se modelan los campos que usa el mapeo; el resto se ignora.

Autor: Yava
Fecha: 2026-09-06
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter, field_validator

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
INVOICE_PAID = "invoice.paid"
HANDLED_EVENT_TYPES = frozenset({CHECKOUT_SESSION_COMPLETED, INVOICE_PAID})


class StripePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _WithMetadata(StripePayload):
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return v or {}


# ===== Piezas comunes =====
class Address(StripePayload):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class ShippingDetails(StripePayload):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None


class CustomerDetails(StripePayload):
    name: Optional[str] = None
    individual_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None


class CollectedInformation(StripePayload):
    individual_name: Optional[str] = None
    shipping_details: Optional[ShippingDetails] = None


# ===== checkout.session.completed =====
class CheckoutSession(_WithMetadata):
    id: str
    mode: str = "payment"
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    customer: Optional[str] = None
    subscription: Optional[str] = None
    customer_details: Optional[CustomerDetails] = None
    collected_information: Optional[CollectedInformation] = None
    shipping_details: Optional[ShippingDetails] = None
    # Campo legado de versiones anteriores de la API
    shipping: Optional[ShippingDetails] = None

    @property
    def is_subscription(self) -> bool:
        return self.mode == "subscription"


class _CheckoutData(StripePayload):
    object: CheckoutSession


class CheckoutSessionCompleted(StripePayload):
    id: str
    type: Literal["checkout.session.completed"]
    data: _CheckoutData

    @property
    def session(self) -> CheckoutSession:
        return self.data.object


# ===== invoice.paid =====
class InvoiceLine(_WithMetadata):
    id: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[int] = None
    quantity: Optional[int] = None


class _InvoiceLines(StripePayload):
    data: List[InvoiceLine] = Field(default_factory=list)


class Invoice(_WithMetadata):
    id: str
    customer: Optional[str] = None
    subscription: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[Address] = None
    lines: _InvoiceLines = Field(default_factory=_InvoiceLines)
    # API reciente: la suscripción viaja en parent.subscription_details
    parent: Optional[Dict[str, Any]] = None

    @field_validator("subscription", "customer", mode="before")
    @classmethod
    def _expandable_id(cls, v: Any) -> Any:
        # Campos expandibles: pueden llegar como id o como objeto
        if isinstance(v, dict):
            return v.get("id")
        return v

    @property
    def subscription_id(self) -> Optional[str]:
        if self.subscription:
            return self.subscription
        details = (self.parent or {}).get("subscription_details") or {}
        sub = details.get("subscription")
        if isinstance(sub, dict):
            return sub.get("id")
        return sub


class _InvoiceData(StripePayload):
    object: Invoice


class InvoicePaid(StripePayload):
    id: str
    type: Literal["invoice.paid"]
    data: _InvoiceData

    @property
    def invoice(self) -> Invoice:
        return self.data.object


# ===== Tipos no manejados =====
class UnhandledEvent(StripePayload):
    id: Optional[str] = None
    type: str = "unknown"


def _event_tag(value: Any) -> str:
    event_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return event_type if event_type in HANDLED_EVENT_TYPES else "unhandled"


InboundEvent = Annotated[
    Union[
        Annotated[CheckoutSessionCompleted, Tag(CHECKOUT_SESSION_COMPLETED)],
        Annotated[InvoicePaid, Tag(INVOICE_PAID)],
        Annotated[UnhandledEvent, Tag("unhandled")],
    ],
    Discriminator(_event_tag),
]

_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(raw: Dict[str, Any]) -> Union[CheckoutSessionCompleted, InvoicePaid, UnhandledEvent]:
    """
    Valida el evento crudo y devuelve la variante correspondiente.

    Raises:
        pydantic.ValidationError: si un tipo manejado no trae los campos mínimos.
    """
    return _event_adapter.validate_python(raw)


# ===== Datos obtenidos de la API de Stripe =====
class _ProductRef(StripePayload):
    name: Optional[str] = None


class _PriceRef(StripePayload):
    unit_amount: Optional[int] = None
    product: Optional[Union[_ProductRef, str]] = None

    @property
    def product_name(self) -> Optional[str]:
        if isinstance(self.product, _ProductRef):
            return self.product.name
        return None


class LineItem(StripePayload):
    """Line item de una checkout session (checkout.sessions.listLineItems)."""

    description: Optional[str] = None
    quantity: Optional[int] = None
    amount_total: Optional[int] = None
    price: Optional[_PriceRef] = None


class CustomerProfile(StripePayload):
    """Cliente Stripe (customers.retrieve)."""

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None


__all__ = [
    "CHECKOUT_SESSION_COMPLETED",
    "INVOICE_PAID",
    "HANDLED_EVENT_TYPES",
    "Address",
    "CheckoutSession",
    "CheckoutSessionCompleted",
    "CustomerProfile",
    "InboundEvent",
    "Invoice",
    "InvoiceLine",
    "InvoicePaid",
    "LineItem",
    "UnhandledEvent",
    "parse_event",
]

# Fin del archivo app/modules/stripe_webhooks/events.py
