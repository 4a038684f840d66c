# -*- coding: utf-8 -*-
"""
tests/shared/integrations/test_supabase_auth_admin.py

Tests del alta de identidades en Supabase Auth (httpx.MockTransport).

Autor: Yava
Fecha: 2026-09-11
"""
import json
from types import SimpleNamespace

import httpx
import pytest
from pydantic import SecretStr

from app.shared.integrations.supabase_auth_admin import (
    IdentityProvisioningError,
    LocalIdentityProvisioner,
    SupabaseAuthAdmin,
    build_identity_provisioner,
)

BASE_URL = "https://abc.supabase.co/"


def _admin(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseAuthAdmin(BASE_URL, "service-role-key", client=client)


@pytest.mark.asyncio
class TestSupabaseAuthAdmin:
    async def test_creates_confirmed_user(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "user-123", "email": "stripe-default@yava.com"})

        user_id = await _admin(handler).create_identity("stripe-default@yava.com", "Negocio por Defecto")

        assert user_id == "user-123"
        assert seen["url"] == "https://abc.supabase.co/auth/v1/admin/users"
        assert seen["headers"]["apikey"] == "service-role-key"
        assert seen["headers"]["authorization"] == "Bearer service-role-key"
        assert seen["body"]["email"] == "stripe-default@yava.com"
        assert seen["body"]["email_confirm"] is True
        assert len(seen["body"]["password"]) >= 24
        assert seen["body"]["user_metadata"] == {"business_name": "Negocio por Defecto"}

    async def test_rejected_request(self):
        def handler(request):
            return httpx.Response(422, json={"msg": "email already registered"})

        with pytest.raises(IdentityProvisioningError) as ei:
            await _admin(handler).create_identity("dup@yava.com", "X")
        assert "422" in str(ei.value)

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(IdentityProvisioningError):
            await _admin(handler).create_identity("a@yava.com", "X")

    async def test_response_without_id(self):
        def handler(request):
            return httpx.Response(200, json={"email": "a@yava.com"})

        with pytest.raises(IdentityProvisioningError):
            await _admin(handler).create_identity("a@yava.com", "X")


@pytest.mark.asyncio
async def test_local_provisioner_returns_uuid():
    user_id = await LocalIdentityProvisioner().create_identity("a@yava.com", "X")
    assert len(user_id) == 36


def test_build_uses_supabase_when_configured():
    settings = SimpleNamespace(
        supabase_configured=True,
        supabase_url="https://abc.supabase.co",
        supabase_service_role_key=SecretStr("k"),
        supabase_timeout_sec=5.0,
    )
    assert isinstance(build_identity_provisioner(settings), SupabaseAuthAdmin)


def test_build_falls_back_to_local():
    settings = SimpleNamespace(supabase_configured=False)
    assert isinstance(build_identity_provisioner(settings), LocalIdentityProvisioner)

# Fin del archivo tests/shared/integrations/test_supabase_auth_admin.py
