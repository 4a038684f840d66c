# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/dependencies.py

Dependencias FastAPI que construyen el orquestador de ingesta con sus
colaboradores (sesión de BD, gateway de Stripe, alta de identidades).
Los tests sustituyen get_payment_gateway / get_identity_provisioner vía
app.dependency_overrides.

Autor: Yava
Fecha: 2026-09-09
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.resolver import TenantResolver
from app.modules.orders.repository import ProcessedEventRepository
from app.modules.orders.writer import OrderWriter
from app.shared.config import get_settings, get_webhook_settings
from app.shared.database.database import get_async_session
from app.shared.integrations.supabase_auth_admin import (
    IdentityProvisioner,
    build_identity_provisioner,
)
from .gateway import PaymentGateway, StripeGateway
from .mapper import EventMapper
from .orchestrator import IngestionOrchestrator


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway(get_webhook_settings().stripe_secret_key)


def get_identity_provisioner() -> IdentityProvisioner:
    return build_identity_provisioner(get_settings())


async def get_ingestion_orchestrator(
    session: AsyncSession = Depends(get_async_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    provisioner: IdentityProvisioner = Depends(get_identity_provisioner),
) -> IngestionOrchestrator:
    webhook_settings = get_webhook_settings()
    resolver = TenantResolver.from_settings(session, webhook_settings, provisioner)
    return IngestionOrchestrator(
        session=session,
        resolver=resolver,
        mapper=EventMapper(gateway, webhook_settings),
        writer=OrderWriter(session, resolver),
        tolerance=webhook_settings.stripe_webhook_tolerance_seconds,
        ledger=ProcessedEventRepository() if webhook_settings.idempotency_enabled else None,
        expose_details=not get_settings().is_prod,
    )


__all__ = [
    "get_identity_provisioner",
    "get_ingestion_orchestrator",
    "get_payment_gateway",
]

# Fin del archivo app/modules/stripe_webhooks/dependencies.py
