# -*- coding: utf-8 -*-
"""
app/shared/middleware/exception_handler.py

Última red de seguridad HTTP: cualquier excepción que escape de un endpoint
se registra con su request_id y se responde como 500 JSON. Los errores
esperados de la ingesta Stripe no llegan aquí; el orquestador ya los
convierte en respuestas 400/500/503.

Autor: Yava
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

# Proxies habituales delante del servicio (nginx, Netlify, load balancers)
_INBOUND_ID_HEADERS = ("x-request-id", "x-correlation-id", "x-nf-request-id")


def get_request_id(request: Request) -> str:
    """Reutiliza el id del proxy si existe; si no, genera uno corto."""
    return next(
        (request.headers[h] for h in _INBOUND_ID_HEADERS if request.headers.get(h)),
        uuid.uuid4().hex[:16],
    )


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = get_request_id(request)
        request.state.request_id = request_id

        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "unhandled_exception request_id=%s method=%s path=%s",
                request_id,
                request.method,
                request.url.path,
            )
            return JSONResponse(
                {"error": "Internal server error", "request_id": request_id},
                status_code=500,
                headers={"X-Request-ID": request_id},
            )


__all__ = ["JSONExceptionMiddleware", "get_request_id"]

# Fin del archivo app/shared/middleware/exception_handler.py
