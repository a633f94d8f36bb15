"""Shared test fixtures for Energy Dashboard."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from energy_dashboard.config.manager import ConfigManager
from energy_dashboard.config.schema import AppConfig
from energy_dashboard.device.auth import AuthClient, LoginCredentials
from energy_dashboard.device.requester import AuthenticatedRequester
from energy_dashboard.device.token_store import TokenStore

LOGIN_PATH = "/api/login/Basic"


class FakeGateway:
    """Scripted stand-in for the energy gateway HTTP API.

    Logins issue ``token-1``, ``token-2``, ... in order. Data requests answer
    with the next status from ``statuses`` (then ``default_status``) and the
    payload registered for the path.
    """

    def __init__(self) -> None:
        self.login_calls = 0
        self.login_bodies: list[dict[str, Any]] = []
        self.login_response: httpx.Response | None = None
        self.data_requests: list[httpx.Request] = []
        self.statuses: list[int] = []
        self.default_status = 200
        self.payloads: dict[str, Any] = {}
        self.raw_bodies: dict[str, str] = {}
        self.fail_with: Exception | None = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # Yield like a real network round trip so concurrent callers interleave
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        if request.url.path == LOGIN_PATH:
            self.login_calls += 1
            self.login_bodies.append(json.loads(request.content))
            if self.login_response is not None:
                return self.login_response
            return httpx.Response(200, json={"token": f"token-{self.login_calls}"})

        self.data_requests.append(request)
        status = self.statuses.pop(0) if self.statuses else self.default_status
        if status in (401, 403):
            return httpx.Response(status, json={"code": status, "error": "Unauthorized"})
        if request.url.path in self.raw_bodies:
            return httpx.Response(status, text=self.raw_bodies[request.url.path])
        return httpx.Response(status, json=self.payloads.get(request.url.path, {}))

    def authorization_headers(self) -> list[str | None]:
        return [r.headers.get("Authorization") for r in self.data_requests]


@pytest.fixture
def config() -> AppConfig:
    """Provide a default test configuration."""
    return AppConfig()


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Provide a config manager with test paths and an empty environment."""
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("device:\n  host: gateway.test\n")
    user = tmp_path / "config.yaml"
    mgr = ConfigManager(defaults_path=defaults, user_path=user, environ={})
    mgr.load()
    return mgr


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture
async def device_client(gateway: FakeGateway) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client routed to the fake gateway."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(gateway.handler),
        base_url="https://gateway.test",
    ) as client:
        yield client


@pytest.fixture
def credentials() -> LoginCredentials:
    return LoginCredentials(email="owner@example.com", password="secret")


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore()


@pytest.fixture
def auth_client(device_client: httpx.AsyncClient, credentials: LoginCredentials) -> AuthClient:
    return AuthClient(device_client, credentials)


@pytest.fixture
def requester(
    device_client: httpx.AsyncClient,
    auth_client: AuthClient,
    token_store: TokenStore,
) -> AuthenticatedRequester:
    return AuthenticatedRequester(device_client, auth_client, token_store)
