# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/errors.py

Taxonomía de errores de la ingesta de webhooks Stripe y clasificación
a código HTTP.

Clasificación (classify_error):
- Verificación / negocio no resuelto / payload inválido  -> 400
- Base de datos o conectividad (SQLAlchemy, httpx, Supabase) -> 503
- Cualquier otro error                                   -> 500

Autor: Yava
Fecha: 2026-09-05
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx
import stripe
from pydantic import ValidationError
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.shared.integrations.supabase_auth_admin import IdentityProvisioningError


class WebhookIngestionError(Exception):
    """Base de errores de la ingesta. `status_code` es el código HTTP sugerido."""

    status_code: int = 400
    code: str = "webhook_error"

    def __init__(self, message: str, *, event_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.event_id = event_id


# ===== Verificación de firma =====
class MalformedHeader(WebhookIngestionError):
    code = "malformed_signature_header"


class SignatureInvalid(WebhookIngestionError):
    code = "signature_invalid"


class SignatureStale(WebhookIngestionError):
    code = "signature_stale"


# ===== Resolución de negocio =====
class MissingRoutingToken(WebhookIngestionError):
    code = "missing_routing_token"


class TenantNotFound(WebhookIngestionError):
    code = "tenant_not_found"


class TenantMisconfigured(WebhookIngestionError):
    code = "tenant_misconfigured"


# ===== Escritura =====
class WriteFailed(WebhookIngestionError):
    """
    Falló la persistencia de un pedido. Los pedidos anteriores del mismo
    evento ya quedaron confirmados y se reportan en `created_ids`.
    """

    code = "write_failed"

    def __init__(
        self,
        cause: BaseException,
        created_ids: Sequence[int] = (),
        *,
        event_id: Optional[str] = None,
    ) -> None:
        super().__init__(f"Error guardando pedido: {cause}", event_id=event_id)
        self.cause = cause
        self.created_ids = list(created_ids)
        self.status_code = classify_error(cause)


_CONNECTIVITY_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    httpx.TransportError,
    IdentityProvisioningError,
    stripe.APIConnectionError,
    ConnectionError,
    TimeoutError,
)

_CLIENT_ERRORS: tuple[type[BaseException], ...] = (
    IntegrityError,
    DataError,
    stripe.StripeError,
    ValidationError,
    ValueError,
)


def classify_error(exc: BaseException) -> int:
    """Traduce una excepción a 400, 503 o 500."""
    if isinstance(exc, WriteFailed):
        return classify_error(exc.cause)
    if isinstance(exc, WebhookIngestionError):
        return exc.status_code
    if isinstance(exc, _CONNECTIVITY_ERRORS):
        return 503
    if isinstance(exc, _CLIENT_ERRORS):
        return 400
    if isinstance(exc, DBAPIError):
        return 503
    return 500


__all__ = [
    "WebhookIngestionError",
    "MalformedHeader",
    "SignatureInvalid",
    "SignatureStale",
    "MissingRoutingToken",
    "TenantNotFound",
    "TenantMisconfigured",
    "WriteFailed",
    "classify_error",
]

# Fin del archivo app/modules/stripe_webhooks/errors.py
