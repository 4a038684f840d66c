# -*- coding: utf-8 -*-
"""
tests/conftest.py

Config global de tests para el backend de Yava.

- Entorno de pruebas: PYTHON_ENV=test, SQLite en memoria (aiosqlite)
- Base de datos nueva por test (engine con StaticPool descartado al terminar)
- Cliente httpx contra la app con ciclo de vida (asgi-lifespan)
- Dobles de prueba: gateway de Stripe y alta de identidades
- Helper de firma Stripe (HMAC-SHA256 sobre "{t}.{payload}")
"""

import hashlib
import hmac
import json
import os
import pathlib
import sys
import time
from collections.abc import AsyncIterator
from typing import Any, Callable, Dict, List, Optional

import pytest

# -----------------------------------------------------------------------------
# 0) Variables mínimas de entorno (antes de importar app.*)
# -----------------------------------------------------------------------------
os.environ["PYTHON_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_SERVICE_TOKEN"] = "test-service-token"
for _k in (
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "TENANT_POLICY",
    "WEBHOOK_IDEMPOTENCY_ENABLED",
    "STRIPE_SUBSCRIPTION_PLACEHOLDER",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
):
    os.environ.pop(_k, None)

BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from httpx import ASGITransport, AsyncClient  # noqa: E402
from asgi_lifespan import LifespanManager  # noqa: E402

from app.modules.stripe_webhooks.events import CustomerProfile, LineItem  # noqa: E402
from app.shared.config import get_settings, reset_webhook_settings  # noqa: E402
from app.shared.database.database import (  # noqa: E402
    dispose_engine,
    get_session_factory,
    init_models,
)

SERVICE_TOKEN = "test-service-token"


# -----------------------------------------------------------------------------
# 1) Aislamiento de configuración
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    reset_webhook_settings()
    yield
    get_settings.cache_clear()
    reset_webhook_settings()


# -----------------------------------------------------------------------------
# 2) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def db_session():
    """Sesión sobre una BD SQLite en memoria recién creada."""
    await dispose_engine()
    await init_models()
    async with get_session_factory()() as session:
        yield session
    await dispose_engine()


# -----------------------------------------------------------------------------
# 3) Dobles de prueba
# -----------------------------------------------------------------------------
class FakeGateway:
    """PaymentGateway en memoria."""

    def __init__(
        self,
        line_items: Optional[List[Dict[str, Any]]] = None,
        customer: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.line_items = [LineItem.model_validate(i) for i in (line_items or [])]
        self.customer = CustomerProfile.model_validate(customer) if customer else None
        self.error = error
        self.calls: List[tuple] = []

    async def list_line_items(self, session_id: str, limit: int = 100):
        self.calls.append(("list_line_items", session_id, limit))
        if self.error is not None:
            raise self.error
        return list(self.line_items)

    async def retrieve_customer(self, customer_id: str):
        self.calls.append(("retrieve_customer", customer_id))
        if self.error is not None:
            raise self.error
        return self.customer


class FakeProvisioner:
    def __init__(self, user_id: str = "00000000-0000-4000-8000-000000000001") -> None:
        self.user_id = user_id
        self.created: List[str] = []

    async def create_identity(self, email: str, display_name: str) -> str:
        self.created.append(email)
        return self.user_id


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def fake_provisioner() -> FakeProvisioner:
    return FakeProvisioner()


# -----------------------------------------------------------------------------
# 4) Firma y payloads Stripe
# -----------------------------------------------------------------------------
def make_stripe_sig(payload: bytes, secret: str, ts: Optional[int] = None) -> str:
    """Genera un header Stripe-Signature válido para testing."""
    ts = int(time.time()) if ts is None else ts
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    mac = hmac.new(secret.encode("utf-8"), msg=signed, digestmod=hashlib.sha256)
    return f"t={ts},v1={mac.hexdigest()}"


@pytest.fixture
def stripe_signer() -> Callable[..., str]:
    return make_stripe_sig


def checkout_event(
    *,
    event_id: str = "evt_checkout_1",
    session_id: str = "cs_test_1",
    amount_total: int = 2500,
    mode: str = "payment",
    metadata: Optional[Dict[str, Any]] = None,
    subscription: Optional[str] = None,
    **session_fields: Any,
) -> Dict[str, Any]:
    session = {
        "id": session_id,
        "object": "checkout.session",
        "mode": mode,
        "amount_total": amount_total,
        "currency": "mxn",
        "metadata": metadata or {},
        "subscription": subscription,
        **session_fields,
    }
    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    }


def invoice_event(
    *,
    event_id: str = "evt_invoice_1",
    invoice_id: str = "in_test_1",
    lines: Optional[List[Dict[str, Any]]] = None,
    customer: Optional[str] = "cus_test_1",
    **invoice_fields: Any,
) -> Dict[str, Any]:
    invoice = {
        "id": invoice_id,
        "object": "invoice",
        "customer": customer,
        "subscription": "sub_test_1",
        "lines": {"object": "list", "data": lines if lines is not None else []},
        **invoice_fields,
    }
    return {
        "id": event_id,
        "object": "event",
        "type": "invoice.paid",
        "data": {"object": invoice},
    }


@pytest.fixture
def event_payload() -> Callable[[Dict[str, Any]], bytes]:
    """Serializa un evento a bytes tal como llegaría en el body."""
    def _dump(event: Dict[str, Any]) -> bytes:
        return json.dumps(event, separators=(",", ":")).encode("utf-8")
    return _dump


@pytest.fixture
def checkout_event_factory():
    return checkout_event


@pytest.fixture
def invoice_event_factory():
    return invoice_event


# -----------------------------------------------------------------------------
# 5) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture(scope="session")
def app():
    """Carga la aplicación **después** de fijar las variables de entorno."""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def async_client(app, db_session, fake_gateway, fake_provisioner) -> AsyncIterator[AsyncClient]:
    """
    Cliente HTTP contra la app con gateway Stripe y alta de identidades falsos.
    Comparte la BD en memoria con `db_session`.
    """
    from app.modules.stripe_webhooks.dependencies import (
        get_identity_provisioner,
        get_payment_gateway,
    )

    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_identity_provisioner] = lambda: fake_provisioner
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client
            # Liberar la conexión compartida antes de que el shutdown descarte el engine
            await db_session.close()
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def service_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {SERVICE_TOKEN}"}

# Fin del archivo tests/conftest.py
