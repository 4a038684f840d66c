# -*- coding: utf-8 -*-
"""
app/__init__.py

Paquete principal del backend de Yava Delivery.

- app.modules.stripe_webhooks: ingesta de webhooks Stripe -> pedidos
- app.modules.orders:          pedidos, escritura y consultas del dashboard
- app.modules.businesses:      negocios y resolución del negocio destino
- app.shared:                  configuración, base de datos e integraciones

Autor: Yava
Fecha: 2026-09-02
"""

# Fin del archivo app/__init__.py
