# -*- coding: utf-8 -*-
"""
app/modules/orders/schemas.py

Schemas Pydantic de pedidos:
- ProductItem / OrderDraft: pedido candidato producido por el mapeo de eventos
- OrderRead: respuesta de listados
- ProductRanking / OrderStats: estadísticas agregadas

Autor: Yava
Fecha: 2026-09-06
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .enums import OrderSource, OrderStatus

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Normaliza a Decimal con 2 decimales (redondeo comercial)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def cents_to_money(amount: Optional[int]) -> Decimal:
    return to_money(Decimal(amount or 0) / 100)


class ProductItem(BaseModel):
    name: str
    quantity: int = Field(default=1, ge=1)
    price: Decimal = Field(default=Decimal("0.00"), description="Precio unitario")

    @field_validator("price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal:
        return to_money(v)

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def as_json(self) -> Dict[str, Any]:
        """Forma persistida en la columna JSON `orders.products`."""
        return {"name": self.name, "quantity": self.quantity, "price": float(self.price)}


class OrderDraft(BaseModel):
    """Pedido candidato, aún sin persistir."""

    business_hint: Optional[str] = Field(
        default=None,
        description="business_id tomado de metadata (se valida al escribir)",
    )
    customer_name: str
    customer_phone: str = ""
    customer_address: str
    products: List[ProductItem]
    delivery_time: datetime
    status: OrderStatus = OrderStatus.PENDING
    source: OrderSource = OrderSource.STRIPE
    notes: Optional[str] = None
    stripe_session_id: Optional[str] = None
    stripe_invoice_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def total_amount(self) -> Decimal:
        return to_money(sum((p.subtotal for p in self.products), Decimal("0")))


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    products: List[Dict[str, Any]]
    total_amount: Decimal
    delivery_time: datetime
    status: OrderStatus
    source: OrderSource
    notes: Optional[str] = None
    stripe_session_id: Optional[str] = None
    stripe_invoice_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductRanking(BaseModel):
    name: str
    quantity: int


class OrderStats(BaseModel):
    total_sales: Decimal = Decimal("0.00")
    total_orders: int = 0
    completed: int = 0
    pending: int = 0
    cancelled: int = 0
    top_products: List[ProductRanking] = Field(default_factory=list)


__all__ = [
    "CENT",
    "OrderDraft",
    "OrderRead",
    "OrderStats",
    "ProductItem",
    "ProductRanking",
    "cents_to_money",
    "to_money",
]

# Fin del archivo app/modules/orders/schemas.py
