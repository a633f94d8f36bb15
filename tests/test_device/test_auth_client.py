"""Tests for the token store and the gateway login exchange."""

from __future__ import annotations

import httpx
import pytest

from energy_dashboard.device.auth import LoginCredentials
from energy_dashboard.device.errors import AuthError, NetworkError
from energy_dashboard.device.token_store import TokenStore


class TestTokenStore:
    def test_starts_empty(self) -> None:
        store = TokenStore()
        assert store.get() is None
        assert store.present is False

    def test_set_and_clear(self) -> None:
        store = TokenStore()
        store.set("abc")
        assert store.get() == "abc"
        assert store.present is True
        store.clear()
        assert store.get() is None
        assert store.present is False

    def test_set_overwrites(self) -> None:
        store = TokenStore("old")
        store.set("new")
        assert store.get() == "new"


class TestAuthClient:
    @pytest.mark.asyncio
    async def test_token_returned_and_stored(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(200, json={"token": "abc"})
        store = TokenStore()

        store.set(await auth_client.authenticate())

        assert store.get() == "abc"
        assert gateway.login_calls == 1

    @pytest.mark.asyncio
    async def test_login_payload(self, gateway, auth_client) -> None:
        await auth_client.authenticate()
        assert gateway.login_bodies == [
            {"username": "customer", "email": "owner@example.com", "password": "secret"}
        ]

    @pytest.mark.asyncio
    async def test_explicit_credentials_override(self, gateway, auth_client) -> None:
        await auth_client.authenticate(LoginCredentials(email="x@example.com", password="pw"))
        assert gateway.login_bodies[0]["email"] == "x@example.com"
        assert gateway.login_bodies[0]["password"] == "pw"

    @pytest.mark.asyncio
    async def test_missing_token_raises(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(200, json={})
        with pytest.raises(AuthError, match="no token in response"):
            await auth_client.authenticate()

    @pytest.mark.asyncio
    async def test_empty_token_raises(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(200, json={"token": ""})
        with pytest.raises(AuthError, match="no token in response"):
            await auth_client.authenticate()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [123, True, ["abc"], {"value": "abc"}])
    async def test_non_string_token_raises(self, gateway, auth_client, token) -> None:
        gateway.login_response = httpx.Response(200, json={"token": token})
        with pytest.raises(AuthError, match="no token in response"):
            await auth_client.authenticate()

    @pytest.mark.asyncio
    async def test_rejected_login_body_raises(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(
            401, json={"code": 401, "error": "bad credentials"}
        )
        with pytest.raises(AuthError):
            await auth_client.authenticate()

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(200, json=["token"])
        with pytest.raises(AuthError, match="no token in response"):
            await auth_client.authenticate()

    @pytest.mark.asyncio
    async def test_malformed_body_wraps_parse_error(self, gateway, auth_client) -> None:
        gateway.login_response = httpx.Response(200, text="<html>login</html>")
        with pytest.raises(AuthError) as exc_info:
            await auth_client.authenticate()
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_connection_failure_raises_network_error(self, gateway, auth_client) -> None:
        gateway.fail_with = httpx.ConnectError("connection refused")
        with pytest.raises(NetworkError) as exc_info:
            await auth_client.authenticate()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_credentials_repr_hides_password(self) -> None:
        creds = LoginCredentials(email="a@b.c", password="hunter2")
        assert "hunter2" not in repr(creds)

