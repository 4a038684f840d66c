# -*- coding: utf-8 -*-
"""
app/modules/stripe_webhooks/__init__.py

Ingesta de webhooks Stripe: verificación de firma, mapeo de eventos a
pedidos y orquestación del endpoint.

Autor: Yava
Fecha: 2026-09-05
"""
