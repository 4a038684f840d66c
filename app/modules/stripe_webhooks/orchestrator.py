# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/orchestrator.py

Orquestador de la ingesta de un webhook Stripe.

Máquina de estados:

    Received -> Verifying -> Resolving -> Mapping -> Writing -> Acknowledged
                    |            |                      |
                    +-> Rejected +                      +-> Failed

- Verifying: token de ruteo, signing secret del negocio y firma.
- Resolving: validación del evento, negocio (o fallback) y registro de
  eventos procesados (si está habilitado).
- Mapping:   evento -> pedidos candidatos.
- Writing:   persistencia de pedidos.

Los tipos de evento no manejados se reconocen (200) sin pasar por Writing.

Autor: Yava
Fecha: 2026-09-09
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.resolver import SigningContext, TenantResolver
from app.modules.orders.repository import ProcessedEventRepository
from app.modules.orders.writer import OrderWriter
from . import metrics
from .errors import (
    MissingRoutingToken,
    WebhookIngestionError,
    WriteFailed,
    classify_error,
)
from .events import UnhandledEvent, parse_event
from .mapper import EventMapper
from .signature import DEFAULT_TOLERANCE_SECONDS, verify_event

logger = logging.getLogger(__name__)


class IngestionState(StrEnum):
    RECEIVED = "received"
    VERIFYING = "verifying"
    RESOLVING = "resolving"
    MAPPING = "mapping"
    WRITING = "writing"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"
    FAILED = "failed"


_ERROR_MESSAGES = {
    503: "Servicio de datos no disponible, reintente más tarde",
    500: "Error interno procesando el webhook",
}


@dataclass
class IngestionOutcome:
    status_code: int
    body: Dict[str, Any]
    history: List[IngestionState] = field(default_factory=list)
    event_id: Optional[str] = None
    event_type: Optional[str] = None
    order_ids: List[int] = field(default_factory=list)

    @property
    def state(self) -> IngestionState:
        return self.history[-1]


class IngestionOrchestrator:
    def __init__(
        self,
        *,
        session: AsyncSession,
        resolver: TenantResolver,
        mapper: EventMapper,
        writer: OrderWriter,
        tolerance: int = DEFAULT_TOLERANCE_SECONDS,
        ledger: Optional[ProcessedEventRepository] = None,
        expose_details: bool = False,
    ) -> None:
        self.session = session
        self.resolver = resolver
        self.mapper = mapper
        self.writer = writer
        self.tolerance = tolerance
        self.ledger = ledger
        self.expose_details = expose_details

    # ------------------------------------------------------------------
    async def handle(
        self,
        raw_body: bytes,
        sig_header: Optional[str],
        routing_token: Optional[str],
    ) -> IngestionOutcome:
        outcome_holder: Dict[str, str] = {}
        with metrics.time_processing(outcome_holder):
            outcome = await self._run(raw_body, sig_header, routing_token)
            outcome_holder["outcome"] = outcome.state.value
        metrics.record_event(outcome.event_type or "unknown", outcome.state.value)
        return outcome

    async def _run(
        self,
        raw_body: bytes,
        sig_header: Optional[str],
        routing_token: Optional[str],
    ) -> IngestionOutcome:
        history = [IngestionState.RECEIVED, IngestionState.VERIFYING]

        # ===== Verifying =====
        try:
            if not routing_token or not routing_token.strip():
                raise MissingRoutingToken("Falta el token del webhook (query 'secret' o header 'x-webhook-secret')")
            signing = await self.resolver.resolve_for_routing_token(routing_token.strip())
            raw_event = verify_event(raw_body, sig_header, signing.signing_secret, self.tolerance)
        except WebhookIngestionError as e:
            return self._reject(history, e)

        event_id = raw_event.get("id")
        event_type = raw_event.get("type")
        logger.info(
            "stripe_webhook_verified event_id=%s type=%s business=%s",
            event_id,
            event_type,
            signing.display_name,
        )

        # ===== Resolving =====
        history.append(IngestionState.RESOLVING)
        try:
            event = parse_event(raw_event)
        except ValidationError as e:
            logger.warning("stripe_event_invalid event_id=%s errors=%s", event_id, e.error_count())
            return self._reject(
                history,
                WebhookIngestionError(f"Evento {event_type} con formato inválido", event_id=event_id),
                event_type=event_type,
            )

        if isinstance(event, UnhandledEvent):
            logger.info("stripe_event_ignored event_id=%s type=%s", event_id, event_type)
            return self._acknowledge(history, signing, event_id, event_type)

        if await self._already_processed(event_id):
            logger.info("stripe_event_duplicate event_id=%s", event_id)
            return self._acknowledge(history, signing, event_id, event_type, duplicate=True)

        # ===== Mapping / Writing =====
        history.append(IngestionState.MAPPING)
        try:
            mapped = await self.mapper.map(event)

            history.append(IngestionState.WRITING)
            try:
                written = await self.writer.write(mapped.drafts, signing.tenant_id, event_id=event_id)
            except WriteFailed as e:
                if not mapped.best_effort:
                    raise
                logger.error("subscription_placeholder_failed event_id=%s error=%s", event_id, e.cause)
                return self._acknowledge(history, signing, event_id, event_type)
        except Exception as e:
            return self._fail(history, e, event_id, event_type)

        for draft in mapped.drafts[: len(written.order_ids)]:
            metrics.record_orders(draft.source.value, 1)

        await self._mark_processed(event_id, event_type, signing, written.order_ids)

        logger.info(
            "stripe_webhook_processed event_id=%s type=%s orders=%d",
            event_id,
            event_type,
            len(written.order_ids),
        )
        return self._acknowledge(history, signing, event_id, event_type, order_ids=written.order_ids)

    # ------------------------------------------------------------------
    # Registro opcional de eventos procesados
    # ------------------------------------------------------------------
    async def _already_processed(self, event_id: Optional[str]) -> bool:
        if self.ledger is None or not event_id:
            return False
        try:
            return await self.ledger.get(self.session, event_id) is not None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning("stripe_event_ledger_lookup_failed event_id=%s error=%s", event_id, e)
            return False

    async def _mark_processed(
        self,
        event_id: Optional[str],
        event_type: Optional[str],
        signing: SigningContext,
        order_ids: List[int],
    ) -> None:
        if self.ledger is None or not event_id:
            return
        try:
            await self.ledger.record(
                self.session,
                event_id=event_id,
                event_type=event_type or "unknown",
                business_id=signing.tenant_id,
                order_ids=order_ids,
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            # Los pedidos ya están confirmados; solo se pierde la marca de idempotencia
            await self.session.rollback()
            logger.warning("stripe_event_ledger_failed event_id=%s error=%s", event_id, e)

    # ------------------------------------------------------------------
    # Estados terminales
    # ------------------------------------------------------------------
    def _acknowledge(
        self,
        history: List[IngestionState],
        signing: SigningContext,
        event_id: Optional[str],
        event_type: Optional[str],
        *,
        duplicate: bool = False,
        order_ids: Optional[List[int]] = None,
    ) -> IngestionOutcome:
        history.append(IngestionState.ACKNOWLEDGED)
        body: Dict[str, Any] = {"received": True, "business": signing.display_name}
        if duplicate:
            body["duplicate"] = True
        return IngestionOutcome(
            status_code=200,
            body=body,
            history=history,
            event_id=event_id,
            event_type=event_type,
            order_ids=list(order_ids or []),
        )

    def _reject(
        self,
        history: List[IngestionState],
        error: WebhookIngestionError,
        *,
        event_type: Optional[str] = None,
    ) -> IngestionOutcome:
        history.append(IngestionState.REJECTED)
        logger.warning("stripe_webhook_rejected code=%s message=%s", error.code, error.message)
        return IngestionOutcome(
            status_code=error.status_code,
            body={"error": error.message},
            history=history,
            event_id=error.event_id,
            event_type=event_type,
        )

    def _fail(
        self,
        history: List[IngestionState],
        error: Exception,
        event_id: Optional[str],
        event_type: Optional[str],
    ) -> IngestionOutcome:
        history.append(IngestionState.FAILED)
        status_code = classify_error(error)
        created = error.created_ids if isinstance(error, WriteFailed) else []
        logger.error(
            "stripe_webhook_failed event_id=%s type=%s status=%s created=%s error=%r",
            event_id,
            event_type,
            status_code,
            created,
            error,
            exc_info=status_code >= 500,
        )

        if isinstance(error, WebhookIngestionError) and status_code < 500:
            message = error.message
        else:
            message = _ERROR_MESSAGES.get(status_code, str(error))

        body: Dict[str, Any] = {"error": message, "eventId": event_id}
        if self.expose_details:
            cause = error.cause if isinstance(error, WriteFailed) else error
            body["details"] = str(cause)
        return IngestionOutcome(
            status_code=status_code,
            body=body,
            history=history,
            event_id=event_id,
            event_type=event_type,
            order_ids=created,
        )


__all__ = ["IngestionOrchestrator", "IngestionOutcome", "IngestionState"]

# Fin del archivo app/modules/stripe_webhooks/orchestrator.py
