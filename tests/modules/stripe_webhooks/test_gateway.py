# -*- coding: utf-8 -*-
"""
tests/modules/stripe_webhooks/test_gateway.py

Tests del gateway sobre el SDK de Stripe (llamadas del SDK sustituidas).
"""
from types import SimpleNamespace

import pytest
import stripe

from app.modules.stripe_webhooks.gateway import StripeGateway


@pytest.mark.asyncio
async def test_list_line_items_passes_key_and_expands_product(monkeypatch):
    calls = {}

    def fake_list_line_items(session_id, **params):
        calls["session_id"] = session_id
        calls["params"] = params
        return SimpleNamespace(
            data=[
                {"description": None, "quantity": 2, "amount_total": 2000,
                 "price": {"unit_amount": 1000, "product": {"id": "prod_1", "name": "Pizza"}}},
            ]
        )

    monkeypatch.setattr(stripe.checkout.Session, "list_line_items", fake_list_line_items)
    items = await StripeGateway("sk_test_123").list_line_items("cs_1", limit=50)

    assert calls["session_id"] == "cs_1"
    assert calls["params"] == {"api_key": "sk_test_123", "limit": 50, "expand": ["data.price.product"]}
    assert items[0].price.product_name == "Pizza"
    assert items[0].quantity == 2


@pytest.mark.asyncio
async def test_retrieve_customer(monkeypatch):
    monkeypatch.setattr(
        stripe.Customer,
        "retrieve",
        lambda customer_id, **params: {"id": customer_id, "name": "Luis", "phone": "555"},
    )
    customer = await StripeGateway("sk_test_123").retrieve_customer("cus_1")
    assert customer.name == "Luis"


@pytest.mark.asyncio
async def test_deleted_customer_is_none(monkeypatch):
    monkeypatch.setattr(
        stripe.Customer,
        "retrieve",
        lambda customer_id, **params: {"id": customer_id, "deleted": True},
    )
    assert await StripeGateway("sk_test_123").retrieve_customer("cus_1") is None

# Fin del archivo tests/modules/stripe_webhooks/test_gateway.py
