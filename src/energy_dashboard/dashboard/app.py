"""FastAPI application factory for the Energy Dashboard."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response

from energy_dashboard import __version__
from energy_dashboard.config.schema import AppConfig
from energy_dashboard.device.client import PowerwallClient
from energy_dashboard.device.errors import DeviceError
from energy_dashboard.device.token_store import TokenStore
from energy_dashboard.health.probe import HealthProbe, descriptors_from_config
from energy_dashboard.weather.base import WeatherError, WeatherProvider

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    config: AppConfig,
    powerwall: PowerwallClient | None = None,
    token_store: TokenStore | None = None,
    weather_provider: WeatherProvider | None = None,
    health_probe: HealthProbe | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Energy Dashboard",
        description="Home battery, weather and service status",
        version=__version__,
    )

    @app.middleware("http")
    async def api_headers(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Cache-Control"] = "no-store"
        return response

    # Store collaborators in app state for access in routes
    app.state.config = config
    app.state.powerwall = powerwall
    app.state.token_store = token_store
    app.state.weather_provider = weather_provider
    app.state.health_probe = health_probe
    app.state.services = descriptors_from_config(config.health.services)

    app.add_exception_handler(DeviceError, _upstream_error_handler)
    app.add_exception_handler(httpx.HTTPError, _upstream_error_handler)
    app.add_exception_handler(WeatherError, _upstream_error_handler)

    static_dir = Path(config.dashboard.static_dir) if config.dashboard.static_dir else STATIC_DIR

    @app.get("/", include_in_schema=False)
    @app.get("/index.html", include_in_schema=False)
    async def index() -> Response:
        page = static_dir / "index.html"
        if not page.is_file():
            logger.error("Dashboard page not found at %s", page)
            return PlainTextResponse("Error loading page", status_code=500)
        return FileResponse(page, media_type="text/html")

    from energy_dashboard.dashboard.routes.api import ComponentUnavailable, router as api_router

    app.add_exception_handler(ComponentUnavailable, _unavailable_handler)
    app.include_router(api_router, prefix="/api")

    return app


async def _upstream_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn an upstream failure into a 500 JSON error envelope."""
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


async def _unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=503)
