"""Open-Meteo current weather provider.

Free, no authentication required.
API docs: https://open-meteo.com/en/docs
"""

from __future__ import annotations

import logging

import httpx

from energy_dashboard.config.schema import WeatherConfig
from energy_dashboard.weather.base import CurrentWeather, WeatherError, WeatherProvider
from energy_dashboard.weather.codes import describe_weather_code

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
CURRENT_FIELDS = (
    "temperature_2m,apparent_temperature,relative_humidity_2m,"
    "is_day,weather_code,wind_speed_10m"
)


class OpenMeteoProvider(WeatherProvider):
    """Open-Meteo REST API weather provider."""

    def __init__(self, config: WeatherConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout_seconds)
        self._owns_client = client is None

    async def fetch_current(self) -> CurrentWeather:
        """Fetch current conditions from Open-Meteo."""
        params = {
            "latitude": self._config.latitude,
            "longitude": self._config.longitude,
            "current": CURRENT_FIELDS,
            "timezone": self._config.timezone,
        }
        resp = await self._client.get(FORECAST_URL, params=params)
        resp.raise_for_status()
        try:
            weather = self._parse_current(resp.json())
        except (ValueError, TypeError, AttributeError) as e:
            raise WeatherError(f"Malformed Open-Meteo response: {e}") from e
        logger.debug(
            "Open-Meteo current weather: %.1fC %s", weather.temperature_c, weather.description
        )
        return weather

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _parse_current(data: dict) -> CurrentWeather:
        """Parse the ``current`` block of an Open-Meteo response."""
        current = data.get("current") or {}
        code = current.get("weather_code")
        return CurrentWeather(
            temperature_c=float(current.get("temperature_2m", 0.0)),
            weather_code=int(code) if code is not None else -1,
            description=describe_weather_code(code),
            apparent_temperature_c=current.get("apparent_temperature"),
            humidity_pct=current.get("relative_humidity_2m"),
            wind_speed_kmh=current.get("wind_speed_10m"),
            is_day=bool(current.get("is_day", 1)),
            time=current.get("time", ""),
            provider="openmeteo",
        )
