# -*- coding: utf-8 -*-
"""
app/modules/orders/repository.py

Repositorios de pedidos y del registro de eventos Stripe procesados.

Autor: Yava
Fecha: 2026-09-07
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .enums import OrderSource
from .models import Order, ProcessedWebhookEvent
from .schemas import OrderDraft


class OrderRepository(BaseRepository[Order]):
    def __init__(self) -> None:
        super().__init__(Order)

    async def create_from_draft(self, session: AsyncSession, draft: OrderDraft, business_id: str) -> Order:
        return await self.create(
            session,
            business_id=business_id,
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            customer_address=draft.customer_address,
            products=[p.as_json() for p in draft.products],
            total_amount=draft.total_amount,
            delivery_time=draft.delivery_time,
            status=draft.status,
            source=draft.source,
            notes=draft.notes,
            stripe_session_id=draft.stripe_session_id,
            stripe_invoice_id=draft.stripe_invoice_id,
            stripe_subscription_id=draft.stripe_subscription_id,
        )

    async def list_by_business(
        self,
        session: AsyncSession,
        business_id: str,
        *,
        sources: Optional[Iterable[OrderSource]] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Order]:
        """Pedidos del negocio, más recientes primero."""
        stmt = select(Order).where(Order.business_id == business_id)
        if sources is not None:
            stmt = stmt.where(Order.source.in_(list(sources)))
        if created_from is not None:
            stmt = stmt.where(Order.created_at >= created_from)
        if created_to is not None:
            stmt = stmt.where(Order.created_at <= created_to)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


class ProcessedEventRepository(BaseRepository[ProcessedWebhookEvent]):
    def __init__(self) -> None:
        super().__init__(ProcessedWebhookEvent)

    async def record(
        self,
        session: AsyncSession,
        *,
        event_id: str,
        event_type: str,
        business_id: Optional[str],
        order_ids: Sequence[int],
    ) -> ProcessedWebhookEvent:
        return await self.create(
            session,
            event_id=event_id,
            event_type=event_type,
            business_id=business_id,
            order_ids=list(order_ids),
        )


__all__ = ["OrderRepository", "ProcessedEventRepository"]

# Fin del archivo app/modules/orders/repository.py
