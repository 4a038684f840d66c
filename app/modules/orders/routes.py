# -*- coding: utf-8 -*-
"""
app/modules/orders/routes.py

Consultas de pedidos para el dashboard (protegidas con token de servicio interno).

Endpoints:
- GET /api/businesses/{business_id}/orders/stripe  -> pedidos generados desde Stripe
- GET /api/businesses/{business_id}/orders/stats   -> estadísticas del periodo

Autor: Yava
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.repository import BusinessRepository
from app.shared.database.database import get_async_session
from app.shared.internal_auth import InternalServiceAuth
from .enums import OrderSource
from .repository import OrderRepository
from .schemas import OrderRead, OrderStats
from .stats import compute_order_stats

router = APIRouter(
    prefix="/businesses/{business_id}/orders",
    tags=["orders"],
)

STATS_DEFAULT_DAYS = 30


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


async def _require_business(session: AsyncSession, business_id: str) -> None:
    if await BusinessRepository().get(session, business_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Negocio no encontrado")


@router.get("/stripe", response_model=List[OrderRead])
async def list_stripe_orders(
    business_id: str,
    _auth: InternalServiceAuth,
    limit: int = Query(default=50, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),
) -> List[OrderRead]:
    """Pedidos originados en Stripe (pago único y suscripciones), más recientes primero."""
    await _require_business(session, business_id)
    orders = await OrderRepository().list_by_business(
        session,
        business_id,
        sources=OrderSource.payment_sources(),
        limit=limit,
    )
    return [OrderRead.model_validate(o) for o in orders]


@router.get("/stats", response_model=OrderStats)
async def order_stats(
    business_id: str,
    _auth: InternalServiceAuth,
    start: Optional[datetime] = Query(default=None, description="Inicio del periodo (ISO 8601)"),
    end: Optional[datetime] = Query(default=None, description="Fin del periodo (ISO 8601)"),
    session: AsyncSession = Depends(get_async_session),
) -> OrderStats:
    """Estadísticas de pedidos; por defecto los últimos 30 días."""
    await _require_business(session, business_id)
    end = _aware(end) if end else datetime.now(timezone.utc)
    start = _aware(start) if start else end - timedelta(days=STATS_DEFAULT_DAYS)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="'start' debe ser anterior a 'end'",
        )
    orders = await OrderRepository().list_by_business(
        session,
        business_id,
        created_from=start,
        created_to=end,
    )
    return compute_order_stats(orders)


__all__ = ["router"]

# Fin del archivo app/modules/orders/routes.py
