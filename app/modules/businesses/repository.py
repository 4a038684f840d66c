# -*- coding: utf-8 -*-
"""
app/modules/businesses/repository.py

Repositorio de negocios.

Autor: Yava
Fecha: 2026-09-04
"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .models import Business


class BusinessRepository(BaseRepository[Business]):
    def __init__(self) -> None:
        super().__init__(Business)

    async def get_by_routing_secret(self, session: AsyncSession, routing_secret: str) -> Optional[Business]:
        result = await session.execute(
            select(Business).where(Business.stripe_webhook_secret == routing_secret)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, session: AsyncSession, email: str) -> Optional[Business]:
        result = await session.execute(
            select(Business).where(Business.email == email).order_by(Business.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_first(self, session: AsyncSession, limit: int = 2) -> Sequence[Business]:
        result = await session.execute(select(Business).order_by(Business.created_at).limit(limit))
        return result.scalars().all()


__all__ = ["BusinessRepository"]

# Fin del archivo app/modules/businesses/repository.py
