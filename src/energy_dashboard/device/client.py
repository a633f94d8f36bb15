"""Typed accessors for the gateway endpoints the dashboard shows."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from energy_dashboard.device.errors import DeviceResponseError
from energy_dashboard.device.requester import AuthenticatedRequester

logger = logging.getLogger(__name__)

SOE_PATH = "/api/system_status/soe"
AGGREGATES_PATH = "/api/meters/aggregates"


@dataclass(frozen=True)
class PowerFlow:
    """Instantaneous power readings in watts.

    Sign conventions follow the gateway: grid positive = importing,
    battery positive = discharging.
    """

    solar_w: float = 0.0
    home_w: float = 0.0
    grid_w: float = 0.0
    battery_w: float = 0.0


@dataclass(frozen=True)
class EnergyStatus:
    battery_percentage: float
    power: PowerFlow


class PowerwallClient:
    """Reads battery level and meter aggregates through the requester."""

    def __init__(self, requester: AuthenticatedRequester) -> None:
        self._requester = requester

    async def get_battery_level(self) -> float:
        """Battery state of energy as a percentage."""
        data = self._expect_object(await self._requester.request(SOE_PATH), SOE_PATH)
        percentage = data.get("percentage")
        if not isinstance(percentage, (int, float)):
            raise DeviceResponseError(f"{SOE_PATH} response has no percentage")
        return float(percentage)

    async def get_power_flow(self) -> PowerFlow:
        data = self._expect_object(
            await self._requester.request(AGGREGATES_PATH), AGGREGATES_PATH
        )
        return PowerFlow(
            solar_w=_instant_power(data, "solar"),
            home_w=_instant_power(data, "load"),
            grid_w=_instant_power(data, "site"),
            battery_w=_instant_power(data, "battery"),
        )

    async def get_status(self) -> EnergyStatus:
        """Battery level and power flow, fetched concurrently."""
        percentage, power = await asyncio.gather(
            self.get_battery_level(), self.get_power_flow()
        )
        return EnergyStatus(battery_percentage=percentage, power=power)

    @staticmethod
    def _expect_object(body: Any, endpoint: str) -> dict[str, Any]:
        if not isinstance(body, dict):
            logger.warning("Unexpected payload from %s: %.200r", endpoint, body)
            raise DeviceResponseError(f"{endpoint} returned a non-JSON-object payload")
        return body


def _instant_power(aggregates: dict[str, Any], meter: str) -> float:
    """instant_power for a meter, 0 when the meter or reading is missing."""
    section = aggregates.get(meter)
    if not isinstance(section, dict):
        return 0.0
    value = section.get("instant_power")
    return float(value) if isinstance(value, (int, float)) else 0.0
