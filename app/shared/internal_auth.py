# -*- coding: utf-8 -*-
"""
app/shared/internal_auth.py

Autenticación de servicio a servicio para las consultas del dashboard.

El dashboard llama a /api/businesses/... con `Authorization: Bearer <APP_SERVICE_TOKEN>`.
No hay sesiones de usuario en este backend: quien tiene el token puede
consultar los pedidos de cualquier negocio.

Uso:
    @router.get("/...")
    async def endpoint(_auth: InternalServiceAuth): ...

Autor: Yava
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from app.shared.config import get_settings

logger = logging.getLogger(__name__)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("internal_auth_rejected reason=missing_header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers=_BEARER_CHALLENGE,
        )
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        logger.warning("internal_auth_rejected reason=bad_format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization format. Use: Bearer <token>",
            headers=_BEARER_CHALLENGE,
        )
    return token


async def require_internal_service_token(
    authorization: Annotated[str | None, Header()] = None,
) -> bool:
    """
    Raises:
        HTTPException 500: APP_SERVICE_TOKEN no configurado.
        HTTPException 401: header ausente o sin esquema Bearer.
        HTTPException 403: token distinto al configurado.
    """
    expected = get_settings().internal_service_token
    if expected is None or not expected.get_secret_value():
        logger.error("internal_auth_misconfigured: APP_SERVICE_TOKEN vacío")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal service token not configured",
        )

    token = _bearer_token(authorization)
    if not secrets.compare_digest(token.encode(), expected.get_secret_value().encode()):
        logger.warning("internal_auth_rejected reason=invalid_token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid service token",
        )
    return True


InternalServiceAuth = Annotated[bool, Depends(require_internal_service_token)]

__all__ = ["InternalServiceAuth", "require_internal_service_token"]

# Fin del archivo app/shared/internal_auth.py
