"""Weather data model and provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class CurrentWeather:
    """Current conditions at the configured location."""

    temperature_c: float
    weather_code: int
    description: str
    apparent_temperature_c: float | None = None
    humidity_pct: float | None = None
    wind_speed_kmh: float | None = None
    is_day: bool = True
    time: str = ""  # Observation time as reported by the provider (local ISO)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    provider: str = ""


class WeatherError(Exception):
    """The provider answered with a body that could not be read as weather."""


class WeatherProvider(ABC):
    """Abstract base for weather providers."""

    @abstractmethod
    async def fetch_current(self) -> CurrentWeather:
        """Fetch current conditions."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
