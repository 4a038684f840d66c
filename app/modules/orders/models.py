# -*- coding: utf-8 -*-
"""
app/modules/orders/models.py

Modelos ORM de pedidos:
- Order: pedido de entrega (manual o generado desde Stripe)
- ProcessedWebhookEvent: registro opcional de eventos Stripe ya procesados

Autor: Yava
Fecha: 2026-09-04
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base
from .enums import OrderSource, OrderStatus


class Order(Base):
    """
    Pedido de entrega de un negocio.

    `products` es una lista JSON de {name, quantity, price}; `total_amount`
    está en unidades mayores de la moneda (centavos / 100).
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    business_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    customer_address: Mapped[str] = mapped_column(Text, nullable=False)

    products: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    delivery_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        OrderStatus.as_sa_enum(),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    source: Mapped[OrderSource] = mapped_column(
        OrderSource.as_sa_enum(),
        nullable=False,
        default=OrderSource.MANUAL,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Referencias de trazabilidad hacia Stripe
    stripe_session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    stripe_invoice_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_orders_business_source_created", "business_id", "source", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order id={self.id} business={self.business_id} "
            f"status={self.status} total={self.total_amount}>"
        )


class ProcessedWebhookEvent(Base):
    """Evento Stripe ya procesado y los pedidos que generó."""

    __tablename__ = "stripe_webhook_events"

    event_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    event_type: Mapped[str] = mapped_column(String(128), nullable=False)
    business_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    order_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


__all__ = ["Order", "ProcessedWebhookEvent"]

# Fin del archivo app/modules/orders/models.py
