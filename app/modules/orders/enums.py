# -*- coding: utf-8 -*-
"""
app/modules/orders/enums.py

Enums de pedidos de entrega: estado del ciclo de vida y procedencia.

Autor: Yava
Fecha: 2026-09-04
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import str_enum


class OrderStatus(StrEnum):
    """Estado de un pedido de entrega."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_ROUTE = "in_route"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def open_statuses(cls) -> frozenset["OrderStatus"]:
        """Estados que aún requieren una entrega."""
        return frozenset({cls.PENDING, cls.ASSIGNED, cls.IN_ROUTE})

    @classmethod
    def as_sa_enum(cls) -> SAEnum:
        return str_enum(cls, name="order_status")


class OrderSource(StrEnum):
    """Procedencia de un pedido."""

    MANUAL = "manual"
    STRIPE = "stripe"
    STRIPE_SUBSCRIPTION = "stripe_subscription"

    @classmethod
    def payment_sources(cls) -> frozenset["OrderSource"]:
        return frozenset({cls.STRIPE, cls.STRIPE_SUBSCRIPTION})

    @classmethod
    def as_sa_enum(cls) -> SAEnum:
        return str_enum(cls, name="order_source")


__all__ = ["OrderStatus", "OrderSource"]

# Fin del archivo app/modules/orders/enums.py
