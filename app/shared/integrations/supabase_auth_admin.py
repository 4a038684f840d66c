# -*- coding: utf-8 -*-
"""
app/shared/integrations/supabase_auth_admin.py

Alta de identidades de login para negocios creados automáticamente.

- SupabaseAuthAdmin: usa la API admin de Supabase Auth
  (POST {SUPABASE_URL}/auth/v1/admin/users) con la service role key vía httpx.
- LocalIdentityProvisioner: genera un UUID local cuando Supabase no está
  configurado (desarrollo y tests).

Autor: Yava
Fecha: 2026-09-05
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional, Protocol
from uuid import uuid4

import httpx

logger = logging.getLogger(__name__)


class IdentityProvisioningError(RuntimeError):
    """Supabase Auth rechazó o no respondió el alta del usuario."""


class IdentityProvisioner(Protocol):
    async def create_identity(self, email: str, display_name: str) -> str:
        """Crea la identidad y devuelve su id (se usa como id del negocio)."""
        ...


class SupabaseAuthAdmin:
    """Cliente mínimo de la API admin de Supabase Auth."""

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_role_key,
            "Authorization": f"Bearer {self._service_role_key}",
            "Content-Type": "application/json",
        }

    async def create_identity(self, email: str, display_name: str) -> str:
        url = f"{self.base_url}/auth/v1/admin/users"
        body = {
            # Contraseña aleatoria: la cuenta por defecto no se usa para iniciar sesión
            "email": email,
            "password": secrets.token_urlsafe(24),
            "email_confirm": True,
            "user_metadata": {"business_name": display_name},
        }

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise IdentityProvisioningError(f"Supabase Auth no disponible: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "supabase_create_user_failed status=%s body=%s",
                response.status_code,
                response.text[:300],
            )
            raise IdentityProvisioningError(
                f"Supabase Auth rechazó el alta de {email} (HTTP {response.status_code})"
            )

        data = response.json()
        user_id = data.get("id") or (data.get("user") or {}).get("id")
        if not user_id:
            raise IdentityProvisioningError("Supabase Auth no devolvió el id del usuario")

        logger.info("supabase_user_created email=%s id=%s", email, user_id)
        return str(user_id)


class LocalIdentityProvisioner:
    async def create_identity(self, email: str, display_name: str) -> str:
        user_id = str(uuid4())
        logger.warning("local_identity_created email=%s id=%s (Supabase no configurado)", email, user_id)
        return user_id


def build_identity_provisioner(settings) -> IdentityProvisioner:
    """Elige Supabase Auth si hay URL y service role key; si no, identidad local."""
    if settings.supabase_configured:
        return SupabaseAuthAdmin(
            str(settings.supabase_url),
            settings.supabase_service_role_key.get_secret_value(),
            timeout=settings.supabase_timeout_sec,
        )
    return LocalIdentityProvisioner()


__all__ = [
    "IdentityProvisioner",
    "IdentityProvisioningError",
    "LocalIdentityProvisioner",
    "SupabaseAuthAdmin",
    "build_identity_provisioner",
]

# Fin del archivo app/shared/integrations/supabase_auth_admin.py
