# -*- coding: utf-8 -*-
"""
tests/modules/stripe_webhooks/test_mapper.py

Tests del mapeo de eventos Stripe a pedidos candidatos.

Autor: Yava
Fecha: 2026-09-12
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.modules.orders.enums import OrderSource, OrderStatus
from app.modules.stripe_webhooks.events import Address, CheckoutSession, LineItem, parse_event
from app.modules.stripe_webhooks.mapper import (
    GENERIC_PRODUCT,
    NO_ADDRESS,
    NO_NAME,
    SUBSCRIPTION_NO_NAME,
    EventMapper,
    format_address,
    map_checkout_payment,
    parse_delivery_time,
    products_from_line_items,
)
from app.shared.config.settings_webhooks import WebhookSettings
from tests.conftest import FakeGateway, checkout_event, invoice_event

NOW = datetime(2026, 9, 1, 12, 0, tzinfo=timezone.utc)


def _mapper(gateway, **settings):
    return EventMapper(gateway, WebhookSettings(**settings), clock=lambda: NOW)


def _session(**fields):
    return CheckoutSession.model_validate({"id": "cs_1", "amount_total": 2500, **fields})


# ---------------------------------------------------------------------------
# Helpers puros
# ---------------------------------------------------------------------------
class TestFormatAddress:
    def test_joins_non_empty_parts(self):
        address = Address(line1="Calle 1", line2="", city="CDMX", state=None, postal_code="01000")
        assert format_address(address) == "Calle 1, CDMX, 01000"

    def test_all_parts_empty_gives_placeholder(self):
        assert format_address(Address(line1="  ", city="")) == NO_ADDRESS

    def test_none_gives_placeholder(self):
        assert format_address(None) == NO_ADDRESS


class TestParseDeliveryTime:
    def test_missing_defaults_to_now_plus_hours(self):
        assert parse_delivery_time(None, NOW, 24) == NOW + timedelta(hours=24)

    def test_iso_with_z_suffix(self):
        parsed = parse_delivery_time("2026-09-03T15:30:00Z", NOW, 24)
        assert parsed == datetime(2026, 9, 3, 15, 30, tzinfo=timezone.utc)

    def test_naive_value_is_assumed_utc(self):
        parsed = parse_delivery_time("2026-09-03T15:30:00", NOW, 24)
        assert parsed.tzinfo is not None

    def test_unparseable_falls_back_to_default(self):
        assert parse_delivery_time("mañana temprano", NOW, 6) == NOW + timedelta(hours=6)


# ---------------------------------------------------------------------------
# checkout.session.completed (pago único)
# ---------------------------------------------------------------------------
class TestCheckoutPayment:
    def test_line_items_total_matches_sum_of_price_times_quantity(self):
        items = [
            LineItem.model_validate({"description": "Pizza", "quantity": 2, "amount_total": 2000}),
            LineItem.model_validate({"description": "Refresco", "quantity": 1, "amount_total": 500}),
        ]
        draft = map_checkout_payment(_session(), items, now=NOW)

        assert [(p.name, p.quantity, p.price) for p in draft.products] == [
            ("Pizza", 2, Decimal("10.00")),
            ("Refresco", 1, Decimal("5.00")),
        ]
        assert draft.total_amount == Decimal("25.00")
        assert draft.total_amount == sum(p.price * p.quantity for p in draft.products)

    def test_product_name_from_expanded_price_product(self):
        item = LineItem.model_validate(
            {"quantity": 1, "amount_total": 1500, "price": {"unit_amount": 1500, "product": {"name": "Tacos"}}}
        )
        products = products_from_line_items([item], _session())
        assert products[0].name == "Tacos"

    def test_no_line_items_gives_generic_product_with_session_total(self):
        products = products_from_line_items([], _session(amount_total=4999))
        assert len(products) == 1
        assert products[0].name == GENERIC_PRODUCT
        assert products[0].price == Decimal("49.99")

    def test_metadata_overrides_customer_fields(self):
        session = _session(
            metadata={
                "customer_name": "Ana",
                "customer_phone": "+52 55 0000 0000",
                "customer_address": "Av. Reforma 100",
                "business_id": "biz-1",
                "notes": "Sin cebolla",
                "delivery_time": "2026-09-02T10:00:00+00:00",
            },
            customer_details={"name": "Otro Nombre", "phone": "111"},
        )
        draft = map_checkout_payment(session, [], now=NOW)

        assert draft.customer_name == "Ana"
        assert draft.customer_phone == "+52 55 0000 0000"
        assert draft.customer_address == "Av. Reforma 100"
        assert draft.business_hint == "biz-1"
        assert draft.notes == "Sin cebolla"
        assert draft.delivery_time == datetime(2026, 9, 2, 10, 0, tzinfo=timezone.utc)
        assert draft.status == OrderStatus.PENDING
        assert draft.source == OrderSource.STRIPE
        assert draft.stripe_session_id == "cs_1"

    def test_address_from_collected_shipping_details(self):
        session = _session(
            collected_information={
                "shipping_details": {"address": {"line1": "Calle 5", "city": "Puebla"}},
            },
        )
        draft = map_checkout_payment(session, [], now=NOW)
        assert draft.customer_address == "Calle 5, Puebla"

    def test_address_from_legacy_shipping(self):
        session = _session(shipping={"address": {"line1": "Calle 9", "postal_code": "72000"}})
        assert map_checkout_payment(session, [], now=NOW).customer_address == "Calle 9, 72000"

    def test_missing_customer_data_uses_placeholders(self):
        draft = map_checkout_payment(_session(), [], now=NOW)
        assert draft.customer_name == NO_NAME
        assert draft.customer_phone == ""
        assert draft.customer_address == NO_ADDRESS
        assert draft.delivery_time == NOW + timedelta(hours=24)


# ---------------------------------------------------------------------------
# EventMapper (con gateway)
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
class TestEventMapper:
    async def test_checkout_fetches_line_items(self):
        gateway = FakeGateway(
            line_items=[
                {"description": "Pizza", "quantity": 2, "amount_total": 2000},
                {"description": "Refresco", "quantity": 1, "amount_total": 500},
            ]
        )
        result = await _mapper(gateway).map(parse_event(checkout_event()))

        assert result.handled is True
        assert result.best_effort is False
        assert len(result.drafts) == 1
        assert result.drafts[0].total_amount == Decimal("25.00")
        assert gateway.calls == [("list_line_items", "cs_test_1", 100)]

    async def test_line_items_failure_degrades_to_generic_product(self):
        gateway = FakeGateway(error=RuntimeError("stripe caído"))
        result = await _mapper(gateway).map(parse_event(checkout_event(amount_total=1800)))

        products = result.drafts[0].products
        assert [(p.name, p.quantity, p.price) for p in products] == [(GENERIC_PRODUCT, 1, Decimal("18.00"))]

    async def test_subscription_checkout_gives_placeholder(self):
        gateway = FakeGateway()
        event = checkout_event(mode="subscription", subscription="sub_9", session_id="cs_sub", amount_total=9900)
        result = await _mapper(gateway).map(parse_event(event))

        assert result.best_effort is True
        draft = result.drafts[0]
        assert draft.source == OrderSource.STRIPE_SUBSCRIPTION
        assert draft.stripe_subscription_id == "sub_9"
        assert draft.customer_name == SUBSCRIPTION_NO_NAME
        assert draft.notes == "Suscripción inicial - Session: cs_sub, Subscription: sub_9"
        assert draft.total_amount == Decimal("99.00")
        assert gateway.calls == []

    async def test_subscription_placeholder_can_be_disabled(self):
        event = checkout_event(mode="subscription", subscription="sub_9")
        result = await _mapper(FakeGateway(), STRIPE_SUBSCRIPTION_PLACEHOLDER=False).map(parse_event(event))
        assert result.handled is True
        assert result.drafts == []

    async def test_invoice_quantity_expands_to_one_order_per_unit(self):
        gateway = FakeGateway(customer={"id": "cus_test_1", "name": "Luis", "phone": "555"})
        event = invoice_event(lines=[{"description": "Caja semanal", "amount": 1000, "quantity": 3}])
        result = await _mapper(gateway).map(parse_event(event))

        assert len(result.drafts) == 3
        for draft in result.drafts:
            assert [(p.name, p.quantity, p.price) for p in draft.products] == [
                ("Caja semanal", 1, Decimal("10.00"))
            ]
            assert draft.total_amount == Decimal("10.00")
            assert draft.customer_name == "Luis"
            assert draft.notes == "Suscripción - Invoice: in_test_1"
            assert draft.stripe_invoice_id == "in_test_1"
            assert draft.stripe_subscription_id == "sub_test_1"
            assert draft.delivery_time == NOW + timedelta(hours=24)
        assert gateway.calls == [("retrieve_customer", "cus_test_1")]

    async def test_invoice_customer_lookup_failure_uses_invoice_fields(self):
        gateway = FakeGateway(error=RuntimeError("timeout"))
        event = invoice_event(
            lines=[{"amount": 500, "quantity": 1}],
            customer_email="cliente@example.com",
            customer_address={"line1": "Calle 3", "city": "León"},
        )
        result = await _mapper(gateway).map(parse_event(event))

        draft = result.drafts[0]
        assert draft.customer_name == "cliente@example.com"
        assert draft.customer_address == "Calle 3, León"
        assert draft.products[0].name == "Producto de Suscripción"

    async def test_invoice_subscription_from_parent_details(self):
        event = invoice_event(
            lines=[{"amount": 500, "quantity": 1}],
            subscription=None,
            parent={
                "subscription_details": {
                    "subscription": "sub_parent",
                    "metadata": {"business_id": "biz-42"},
                }
            },
        )
        result = await _mapper(FakeGateway()).map(parse_event(event))
        assert result.drafts[0].stripe_subscription_id == "sub_parent"
        assert result.drafts[0].business_hint == "biz-42"

    async def test_invoice_without_lines_gives_no_orders(self):
        result = await _mapper(FakeGateway()).map(parse_event(invoice_event(lines=[])))
        assert result.handled is True
        assert result.drafts == []

    async def test_unhandled_event(self):
        event = {"id": "evt_x", "type": "customer.created", "data": {"object": {}}}
        result = await _mapper(FakeGateway()).map(parse_event(event))
        assert result.handled is False
        assert result.drafts == []

# Fin del archivo tests/modules/stripe_webhooks/test_mapper.py
