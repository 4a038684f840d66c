# -*- coding: utf-8 -*-
"""
tests/modules/orders/test_routes.py

Tests de las consultas de pedidos para el dashboard (token de servicio interno).

Autor: Yava
Fecha: 2026-09-13
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.modules.businesses.models import Business
from app.modules.orders.enums import OrderSource, OrderStatus
from app.modules.orders.models import Order

DELIVERY = datetime(2026, 9, 2, 10, 0, tzinfo=timezone.utc)


async def _seed(session):
    session.add(Business(id="biz-1", name="Pizzería"))
    session.add(Business(id="biz-2", name="Tacos"))
    await session.flush()
    rows = [
        ("biz-1", OrderSource.STRIPE, OrderStatus.DELIVERED, "25.00"),
        ("biz-1", OrderSource.STRIPE_SUBSCRIPTION, OrderStatus.PENDING, "99.00"),
        ("biz-1", OrderSource.MANUAL, OrderStatus.CANCELLED, "10.00"),
        ("biz-2", OrderSource.STRIPE, OrderStatus.PENDING, "5.00"),
    ]
    for business_id, source, status, total in rows:
        session.add(
            Order(
                business_id=business_id,
                customer_name="Ana",
                customer_phone="",
                customer_address="Av. Reforma 100",
                products=[{"name": "Pizza", "quantity": 1, "price": float(total)}],
                total_amount=Decimal(total),
                delivery_time=DELIVERY,
                status=status,
                source=source,
            )
        )
    await session.commit()


@pytest.mark.asyncio
class TestStripeOrders:
    async def test_requires_service_token(self, async_client, db_session):
        res = await async_client.get("/api/businesses/biz-1/orders/stripe")
        assert res.status_code == 401

    async def test_wrong_service_token(self, async_client, db_session):
        res = await async_client.get(
            "/api/businesses/biz-1/orders/stripe",
            headers={"Authorization": "Bearer otro-token"},
        )
        assert res.status_code == 403

    async def test_lists_only_payment_sources_of_business(self, async_client, db_session, service_headers):
        await _seed(db_session)
        res = await async_client.get("/api/businesses/biz-1/orders/stripe", headers=service_headers)

        assert res.status_code == 200
        body = res.json()
        assert {o["source"] for o in body} == {"stripe", "stripe_subscription"}
        assert {o["business_id"] for o in body} == {"biz-1"}

    async def test_limit(self, async_client, db_session, service_headers):
        await _seed(db_session)
        res = await async_client.get(
            "/api/businesses/biz-1/orders/stripe", params={"limit": 1}, headers=service_headers
        )
        assert len(res.json()) == 1

    async def test_unknown_business(self, async_client, db_session, service_headers):
        res = await async_client.get("/api/businesses/nope/orders/stripe", headers=service_headers)
        assert res.status_code == 404


@pytest.mark.asyncio
class TestOrderStats:
    async def test_default_period(self, async_client, db_session, service_headers):
        await _seed(db_session)
        res = await async_client.get("/api/businesses/biz-1/orders/stats", headers=service_headers)

        assert res.status_code == 200
        body = res.json()
        assert body["total_orders"] == 3
        assert float(body["total_sales"]) == pytest.approx(134.0)
        assert body["completed"] == 1
        assert body["pending"] == 1
        assert body["cancelled"] == 1
        assert body["top_products"] == [{"name": "Pizza", "quantity": 3}]

    async def test_period_in_the_past_is_empty(self, async_client, db_session, service_headers):
        await _seed(db_session)
        end = datetime.now(timezone.utc) - timedelta(days=365)
        res = await async_client.get(
            "/api/businesses/biz-1/orders/stats",
            params={"start": (end - timedelta(days=30)).isoformat(), "end": end.isoformat()},
            headers=service_headers,
        )
        assert res.status_code == 200
        assert res.json()["total_orders"] == 0

    async def test_start_after_end(self, async_client, db_session, service_headers):
        await _seed(db_session)
        res = await async_client.get(
            "/api/businesses/biz-1/orders/stats",
            params={"start": "2026-09-10T00:00:00Z", "end": "2026-09-01T00:00:00Z"},
            headers=service_headers,
        )
        assert res.status_code == 422

# Fin del archivo tests/modules/orders/test_routes.py
