"""Energy Dashboard application entry point and lifecycle orchestrator.

Startup sequence:
  config → gateway session (token store, auth, requester) →
  token refresh task → weather provider → health probe → dashboard
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

import httpx

from energy_dashboard import __version__
from energy_dashboard.config.manager import ConfigManager
from energy_dashboard.config.schema import AppConfig
from energy_dashboard.device.auth import AuthClient, LoginCredentials
from energy_dashboard.device.client import PowerwallClient
from energy_dashboard.device.refresh import RefreshScheduler
from energy_dashboard.device.requester import AuthenticatedRequester
from energy_dashboard.device.token_store import TokenStore
from energy_dashboard.health.probe import HealthProbe
from energy_dashboard.logging.structured import setup_logging
from energy_dashboard.weather.openmeteo import OpenMeteoProvider

logger = logging.getLogger(__name__)


class Application:
    """Main application lifecycle manager.

    Wires all modules together and manages startup/shutdown ordering.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._running = False

        # References held for cleanup
        self.token_store = TokenStore()
        self._device_client: httpx.AsyncClient | None = None
        self._refresh: RefreshScheduler | None = None
        self._weather: OpenMeteoProvider | None = None
        self._probe: HealthProbe | None = None
        self._server = None

    def create_device_client(self) -> httpx.AsyncClient:
        """HTTP client bound to the gateway's base URL."""
        device = self.config.device
        return httpx.AsyncClient(
            base_url=f"https://{device.host}",
            verify=device.verify_tls,
            timeout=device.request_timeout_seconds,
        )

    def build_components(self):
        """Construct the gateway session stack, weather provider and probe."""
        device = self.config.device
        self._device_client = self.create_device_client()
        auth = AuthClient(
            self._device_client,
            LoginCredentials(email=device.email, password=device.password),
        )
        requester = AuthenticatedRequester(self._device_client, auth, self.token_store)
        powerwall = PowerwallClient(requester)
        self._refresh = RefreshScheduler(
            auth,
            self.token_store,
            interval_seconds=device.token_refresh_interval_seconds,
        )
        self._weather = OpenMeteoProvider(self.config.weather)
        self._probe = HealthProbe(
            timeout_seconds=self.config.health.timeout_seconds,
            verify_tls=self.config.health.verify_tls,
        )
        return powerwall, self._refresh, self._weather, self._probe

    async def start(self) -> None:
        """Start all application components in dependency order."""
        logger.info("Starting Energy Dashboard v%s", __version__)
        self._running = True

        if not self.config.device.password:
            logger.warning("No gateway password configured (set POWERWALL_PASSWORD)")

        powerwall, refresh, weather, probe = self.build_components()

        # ── Proactive token refresh ──────────────────────────
        refresh.start()

        # ── Dashboard server ─────────────────────────────────
        from energy_dashboard.dashboard.app import create_app

        app = create_app(
            self.config,
            powerwall=powerwall,
            token_store=self.token_store,
            weather_provider=weather,
            health_probe=probe,
        )
        app.state.application = self

        import uvicorn

        uvi_config = uvicorn.Config(
            app,
            host=self.config.dashboard.host,
            port=self.config.dashboard.port,
            log_level="warning",
        )
        server = uvicorn.Server(uvi_config)
        # Signals are routed to request_exit() by main()
        server.install_signal_handlers = lambda: None
        self._server = server

        logger.info(
            "Dashboard available at http://%s:%d",
            self.config.dashboard.host,
            self.config.dashboard.port,
        )

        # Server.serve() blocks until shutdown
        await server.serve()

    def request_exit(self) -> None:
        """Ask the dashboard server to leave its serve loop."""
        if self._server is not None:
            self._server.should_exit = True

    async def stop(self) -> None:
        """Gracefully stop all components in reverse order."""
        if not self._running:
            return

        logger.info("Shutting down Energy Dashboard")
        self._running = False

        self.request_exit()

        if self._refresh is not None:
            await self._refresh.stop()

        for closeable in (self._probe, self._weather):
            if closeable is not None:
                try:
                    await closeable.close()
                except Exception:
                    logger.exception("Error closing %s", type(closeable).__name__)

        if self._device_client is not None:
            await self._device_client.aclose()

        self._server = None
        logger.info("Shutdown complete")


def main() -> None:
    """Entry point for the application."""
    config = ConfigManager(Path("config.defaults.yaml"), Path("config.yaml")).load()

    setup_logging(
        level=config.logging.level,
        fmt=config.logging.format,
        log_file=config.logging.file,
    )

    asyncio.run(_serve(Application(config)))


async def _serve(app: Application) -> None:
    if sys.platform != "win32":
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, app.request_exit)
    try:
        await app.start()
    finally:
        await app.stop()


if __name__ == "__main__":
    main()
