# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/signature.py

Verificación de firmas de webhooks Stripe.

La verificación se delega al SDK oficial (stripe.WebhookSignature), que compara
HMAC-SHA256 de "{timestamp}.{payload}" contra las firmas v1 del header y
aplica la ventana de tolerancia del timestamp. El payload se verifica sobre
los bytes exactos recibidos.

Autor: Yava
Fecha: 2026-09-05
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import stripe

from .errors import MalformedHeader, SignatureInvalid, SignatureStale

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_SECONDS = 300


def _translate(error: stripe.SignatureVerificationError) -> Exception:
    message = str(getattr(error, "user_message", None) or error)
    lowered = message.lower()
    if "tolerance" in lowered:
        return SignatureStale("Timestamp de la firma fuera de la ventana de tolerancia")
    if "unable to extract" in lowered or "expected scheme" in lowered:
        return MalformedHeader("Header Stripe-Signature ilegible")
    return SignatureInvalid("Firma de webhook inválida")


def verify_event(
    payload: bytes,
    sig_header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> Dict[str, Any]:
    """
    Verifica la firma y devuelve el evento decodificado.

    Args:
        payload: Body raw del request (sin reserializar)
        sig_header: Valor del header Stripe-Signature
        secret: Signing secret del negocio (whsec_...) o el global
        tolerance: Segundos de tolerancia para el timestamp

    Raises:
        MalformedHeader: header ausente o ilegible
        SignatureStale: timestamp fuera de tolerancia
        SignatureInvalid: firma no coincide o payload no decodificable
    """
    if not sig_header or not sig_header.strip():
        raise MalformedHeader("Falta el header Stripe-Signature")

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SignatureInvalid("Payload no es UTF-8 válido") from e

    try:
        stripe.WebhookSignature.verify_header(text, sig_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        translated = _translate(e)
        logger.warning("stripe_signature_rejected reason=%s", type(translated).__name__)
        raise translated from e

    try:
        event = json.loads(text)
    except json.JSONDecodeError as e:
        raise SignatureInvalid("Payload firmado no es JSON válido") from e
    if not isinstance(event, dict):
        raise SignatureInvalid("Payload firmado no es un objeto JSON")
    return event


__all__ = ["DEFAULT_TOLERANCE_SECONDS", "verify_event"]

# Fin del archivo app/modules/stripe_webhooks/signature.py
