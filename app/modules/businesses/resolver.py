# -*- coding: utf-8 -*-
"""
app/modules/businesses/resolver.py

Resolución del negocio (tenant) dueño de un webhook Stripe.

Dos momentos de resolución:

1) resolve_for_routing_token(): antes de verificar la firma. Busca el negocio
   por su token de ruteo (stripe_webhook_secret) y entrega el signing secret
   con el que debe verificarse el evento. Si no hay coincidencia, según la
   política se rechaza o se usa el STRIPE_WEBHOOK_SECRET global.

2) resolve_for_order(): al escribir pedidos sin negocio conocido. Orden:
   metadata.business_id -> negocio por defecto existente -> único negocio
   existente -> alta de un negocio por defecto nuevo (solo AUTO_PROVISION).

Autor: Yava
Fecha: 2026-09-05
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.stripe_webhooks.errors import TenantMisconfigured, TenantNotFound
from app.shared.config.settings_webhooks import WebhookSettings
from app.shared.integrations.supabase_auth_admin import IdentityProvisioner
from .models import Business
from .repository import BusinessRepository

logger = logging.getLogger(__name__)


class TenantPolicy(StrEnum):
    REJECT = "reject"
    FALLBACK = "fallback"
    AUTO_PROVISION = "auto_provision"


@dataclass(frozen=True)
class SigningContext:
    """
    Negocio resuelto (o None en modo fallback) y secreto para verificar la firma.

    Solo valores planos: las instancias ORM quedan expiradas tras cualquier
    rollback de la sesión.
    """

    tenant_id: Optional[str]
    tenant_name: Optional[str]
    signing_secret: str

    @property
    def is_fallback(self) -> bool:
        return self.tenant_id is None

    @property
    def display_name(self) -> str:
        return self.tenant_name if self.tenant_id is not None else "fallback"


class TenantResolver:
    def __init__(
        self,
        session: AsyncSession,
        *,
        policy: TenantPolicy,
        fallback_signing_secret: Optional[str],
        fallback_name: str,
        fallback_email: str,
        provisioner: IdentityProvisioner,
        repository: Optional[BusinessRepository] = None,
    ) -> None:
        self.session = session
        self.policy = policy
        self.fallback_signing_secret = fallback_signing_secret
        self.fallback_name = fallback_name
        self.fallback_email = fallback_email
        self.provisioner = provisioner
        self.repo = repository or BusinessRepository()

    @classmethod
    def from_settings(
        cls,
        session: AsyncSession,
        settings: WebhookSettings,
        provisioner: IdentityProvisioner,
    ) -> "TenantResolver":
        return cls(
            session,
            policy=TenantPolicy(settings.tenant_policy),
            fallback_signing_secret=settings.stripe_webhook_secret,
            fallback_name=settings.fallback_business_name,
            fallback_email=settings.fallback_business_email,
            provisioner=provisioner,
        )

    # ------------------------------------------------------------------
    # Antes de verificar la firma
    # ------------------------------------------------------------------
    async def _lookup_by_routing_token(self, token: str) -> Optional[Business]:
        # Un fallo de consulta se trata como "no encontrado" para que aplique la política
        try:
            return await self.repo.get_by_routing_secret(self.session, token)
        except SQLAlchemyError as e:
            logger.error("tenant_lookup_failed error=%s", e)
            await self.session.rollback()
            return None

    async def resolve_for_routing_token(self, token: str) -> SigningContext:
        """
        Raises:
            TenantMisconfigured: el negocio existe pero no tiene signing secret válido.
            TenantNotFound: no hay negocio y la política/configuración no permite fallback.
        """
        business = await self._lookup_by_routing_token(token)

        if business is not None:
            if not business.has_valid_signing_secret:
                logger.warning("tenant_misconfigured business_id=%s", business.id)
                raise TenantMisconfigured(
                    f"El negocio '{business.name}' no tiene configurado el signing secret de Stripe"
                )
            logger.info("tenant_resolved business_id=%s name=%s", business.id, business.name)
            return SigningContext(
                tenant_id=business.id,
                tenant_name=business.name,
                signing_secret=business.stripe_signing_secret.strip(),
            )

        if self.policy is TenantPolicy.REJECT:
            logger.warning("tenant_not_found policy=reject")
            raise TenantNotFound("Negocio no encontrado para el token de webhook")

        if not self.fallback_signing_secret:
            logger.warning("tenant_not_found fallback_secret=missing")
            raise TenantNotFound(
                "Negocio no encontrado y STRIPE_WEBHOOK_SECRET no está configurado"
            )

        logger.warning("tenant_fallback_secret_used policy=%s", self.policy.value)
        return SigningContext(tenant_id=None, tenant_name=None, signing_secret=self.fallback_signing_secret)

    # ------------------------------------------------------------------
    # Al escribir pedidos
    # ------------------------------------------------------------------
    async def resolve_for_order(self, hint_business_id: Optional[str] = None) -> Business:
        if hint_business_id:
            business = await self.repo.get(self.session, hint_business_id)
            if business is not None:
                return business
            logger.warning("metadata_business_not_found business_id=%s", hint_business_id)

        business = await self.repo.get_by_email(self.session, self.fallback_email)
        if business is not None:
            return business

        existing = await self.repo.list_first(self.session, limit=2)
        if len(existing) == 1:
            return existing[0]

        if self.policy is not TenantPolicy.AUTO_PROVISION:
            raise TenantNotFound("No hay un negocio al cual asignar el pedido")

        return await self._provision_fallback_business()

    async def _provision_fallback_business(self) -> Business:
        logger.warning("fallback_business_provisioning email=%s", self.fallback_email)
        user_id = await self.provisioner.create_identity(self.fallback_email, self.fallback_name)
        business = await self.repo.create(
            self.session,
            id=user_id,
            name=self.fallback_name,
            email=self.fallback_email,
        )
        await self.session.commit()
        logger.info("fallback_business_created business_id=%s", business.id)
        return business


__all__ = ["SigningContext", "TenantPolicy", "TenantResolver"]

# Fin del archivo app/modules/businesses/resolver.py
