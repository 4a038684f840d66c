# -*- coding: utf-8 -*-
"""
app/modules/businesses/models.py

Modelo ORM de negocios (tenants).

Cada negocio guarda dos secretos de Stripe:
- stripe_webhook_secret: token de ruteo embebido en la URL del webhook
- stripe_signing_secret: signing secret (whsec_...) copiado del dashboard de Stripe

Autor: Yava
Fecha: 2026-09-04
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base

SIGNING_SECRET_PREFIX = "whsec_"


class Business(Base):
    __tablename__ = "businesses"

    # Coincide con el id del usuario de Supabase Auth dueño del negocio
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    stripe_webhook_secret: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    stripe_signing_secret: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def has_valid_signing_secret(self) -> bool:
        secret = (self.stripe_signing_secret or "").strip()
        return len(secret) > len(SIGNING_SECRET_PREFIX) and secret.startswith(SIGNING_SECRET_PREFIX)

    def __repr__(self) -> str:
        return f"<Business id={self.id} name={self.name!r}>"


__all__ = ["Business", "SIGNING_SECRET_PREFIX"]

# Fin del archivo app/modules/businesses/models.py
