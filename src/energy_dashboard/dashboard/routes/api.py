"""REST API endpoints returning JSON data."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Request

from energy_dashboard.device.client import PowerwallClient
from energy_dashboard.health.probe import HealthProbe
from energy_dashboard.weather.base import WeatherProvider

router = APIRouter()
logger = logging.getLogger(__name__)


class ComponentUnavailable(Exception):
    """A route needs a collaborator the app was created without."""


def _require(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise ComponentUnavailable(f"{name} not configured")
    return component


# ── Energy gateway ───────────────────────────────────

@router.get("/battery")
async def battery(request: Request) -> dict:
    """Current battery state of energy."""
    powerwall: PowerwallClient = _require(request, "powerwall")
    return {"percentage": await powerwall.get_battery_level()}


@router.get("/power")
async def power(request: Request) -> dict:
    """Instantaneous solar, home, grid and battery power in watts."""
    powerwall: PowerwallClient = _require(request, "powerwall")
    flow = await powerwall.get_power_flow()
    return {
        "solar": flow.solar_w,
        "home": flow.home_w,
        "grid": flow.grid_w,
        "battery": flow.battery_w,
    }


@router.get("/energy")
async def energy(request: Request) -> dict:
    """Battery level and power flow in one payload."""
    powerwall: PowerwallClient = _require(request, "powerwall")
    status = await powerwall.get_status()
    return {
        "battery": status.battery_percentage,
        "solar": status.power.solar_w,
        "home": status.power.home_w,
        "grid": status.power.grid_w,
        "battery_power": status.power.battery_w,
    }


# ── Weather ──────────────────────────────────────────

@router.get("/weather")
async def weather(request: Request) -> dict:
    provider: WeatherProvider = _require(request, "weather_provider")
    current = await provider.fetch_current()
    data = asdict(current)
    data["fetched_at"] = current.fetched_at.isoformat()
    return data


# ── Services ─────────────────────────────────────────

@router.get("/services")
async def services(request: Request) -> list[dict]:
    """Reachability of every configured service, in configured order."""
    probe: HealthProbe = _require(request, "health_probe")
    results = await probe.check_all(request.app.state.services)
    return [asdict(r) for r in results]


@router.get("/health")
async def health(request: Request) -> dict:
    """Liveness of this backend itself."""
    token_store = request.app.state.token_store
    return {
        "status": "running",
        "token_present": bool(token_store and token_store.present),
    }
