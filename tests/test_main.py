"""Tests for Application lifecycle wiring."""

from __future__ import annotations

import asyncio
import signal
import sys
from types import SimpleNamespace

import pytest

from energy_dashboard.config.schema import AppConfig
from energy_dashboard.device.client import PowerwallClient
from energy_dashboard.device.refresh import RefreshScheduler
from energy_dashboard.health.probe import HealthProbe
from energy_dashboard.main import Application, _serve
from energy_dashboard.weather.openmeteo import OpenMeteoProvider


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        device={"host": "powerwall.lan", "token_refresh_interval_seconds": 900},
        health={"timeout_seconds": 2.5},
    )


class TestApplicationConstruction:
    def test_create_application(self, config) -> None:
        app = Application(config)
        assert app.config is config
        assert app._running is False
        assert app.token_store.present is False

    def test_device_client_targets_gateway(self, config) -> None:
        app = Application(config)
        client = app.create_device_client()
        assert client.base_url.scheme == "https"
        assert client.base_url.host == "powerwall.lan"


class TestComponentWiring:
    @pytest.mark.asyncio
    async def test_build_components(self, config) -> None:
        app = Application(config)
        powerwall, refresh, weather, probe = app.build_components()

        assert isinstance(powerwall, PowerwallClient)
        assert isinstance(refresh, RefreshScheduler)
        assert isinstance(weather, OpenMeteoProvider)
        assert isinstance(probe, HealthProbe)
        assert probe.timeout_seconds == 2.5
        assert refresh._interval == 900
        assert refresh._tokens is app.token_store

        app._running = True
        await app.stop()
        assert app._device_client.is_closed

    @pytest.mark.asyncio
    async def test_stop_when_not_running_is_noop(self, config) -> None:
        app = Application(config)
        await app.stop()
        assert app._running is False


class TestServe:
    def test_request_exit_flags_server(self, config) -> None:
        app = Application(config)
        app._server = SimpleNamespace(should_exit=False)
        app.request_exit()
        assert app._server.should_exit is True

    @pytest.mark.asyncio
    async def test_components_stopped_once_after_server_returns(self, config, monkeypatch) -> None:
        app = Application(config)
        stopped: list[bool] = []
        real_stop = app.stop

        async def fake_start() -> None:
            app.build_components()
            app._running = True

        async def counting_stop() -> None:
            stopped.append(app._running)
            await real_stop()

        monkeypatch.setattr(app, "start", fake_start)
        monkeypatch.setattr(app, "stop", counting_stop)
        try:
            await _serve(app)
        finally:
            if sys.platform != "win32":
                loop = asyncio.get_running_loop()
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.remove_signal_handler(sig)

        assert stopped == [True]
        assert app._running is False
        assert app._device_client.is_closed
