# -*- coding: utf-8 -*-
"""
app/modules/orders/stats.py

Estadísticas de pedidos de un negocio (reducción en memoria).

Autor: Yava
Fecha: 2026-09-08
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Iterable

from .enums import OrderStatus
from .models import Order
from .schemas import OrderStats, ProductRanking, to_money

TOP_PRODUCTS = 5


def compute_order_stats(orders: Iterable[Order], top: int = TOP_PRODUCTS) -> OrderStats:
    """
    - total_sales: suma de total_amount de todos los pedidos del rango
    - completed / pending / cancelled: conteos por estado (pending incluye assigned e in_route)
    - top_products: productos más vendidos por cantidad
    """
    total_sales = Decimal("0")
    total = completed = pending = cancelled = 0
    quantities: Counter[str] = Counter()

    for order in orders:
        total += 1
        total_sales += Decimal(order.total_amount or 0)
        status = OrderStatus(order.status)
        if status is OrderStatus.DELIVERED:
            completed += 1
        elif status is OrderStatus.CANCELLED:
            cancelled += 1
        elif status in OrderStatus.open_statuses():
            pending += 1

        for product in order.products or []:
            name = product.get("name") or "Producto sin nombre"
            quantities[name] += int(product.get("quantity") or 1)

    return OrderStats(
        total_sales=to_money(total_sales),
        total_orders=total,
        completed=completed,
        pending=pending,
        cancelled=cancelled,
        top_products=[ProductRanking(name=n, quantity=q) for n, q in quantities.most_common(top)],
    )


__all__ = ["TOP_PRODUCTS", "compute_order_stats"]

# Fin del archivo app/modules/orders/stats.py
