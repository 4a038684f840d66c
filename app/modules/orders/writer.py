# -*- coding: utf-8 -*-
"""
app/modules/orders/writer.py

Persistencia de pedidos candidatos.

Cada pedido se confirma por separado (no hay transacción multi-fila): ante
el primer error se abortan los restantes y se lanza WriteFailed con los ids
ya creados, sin revertirlos. Stripe reintenta el evento ante 5xx.

Autor: Yava
Fecha: 2026-09-07
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.resolver import TenantResolver
from app.modules.stripe_webhooks.errors import WebhookIngestionError, WriteFailed
from .repository import OrderRepository
from .schemas import OrderDraft

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    order_ids: List[int] = field(default_factory=list)


class OrderWriter:
    def __init__(
        self,
        session: AsyncSession,
        resolver: TenantResolver,
        repository: Optional[OrderRepository] = None,
    ) -> None:
        self.session = session
        self.resolver = resolver
        self.repo = repository or OrderRepository()

    async def write(
        self,
        drafts: Sequence[OrderDraft],
        tenant_id: Optional[str] = None,
        *,
        event_id: Optional[str] = None,
    ) -> WriteResult:
        """
        Persiste cada borrador. Si no hay negocio resuelto por el token de
        ruteo, se resuelve por pedido (metadata.business_id o negocio por defecto).

        Raises:
            TenantNotFound: no hay negocio asignable y la política no permite crearlo.
            WriteFailed: error de base de datos o de alta del negocio por defecto.
        """
        result = WriteResult()
        by_hint: Dict[Optional[str], str] = {}

        for draft in drafts:
            try:
                business_id = tenant_id
                if business_id is None:
                    if draft.business_hint not in by_hint:
                        business = await self.resolver.resolve_for_order(draft.business_hint)
                        by_hint[draft.business_hint] = business.id
                    business_id = by_hint[draft.business_hint]

                order = await self.repo.create_from_draft(self.session, draft, business_id)
                await self.session.commit()
            except WebhookIngestionError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "order_write_failed event_id=%s created=%d error=%r",
                    event_id,
                    len(result.order_ids),
                    e,
                )
                raise WriteFailed(e, result.order_ids, event_id=event_id) from e

            result.order_ids.append(order.id)
            logger.info(
                "order_created order_id=%s business_id=%s total=%s source=%s",
                order.id,
                business_id,
                order.total_amount,
                order.source,
            )

        return result


__all__ = ["OrderWriter", "WriteResult"]

# Fin del archivo app/modules/orders/writer.py
