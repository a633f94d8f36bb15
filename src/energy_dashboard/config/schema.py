"""Pydantic configuration models for all system settings."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DeviceConfig(BaseModel):
    """Energy gateway connection and session settings."""

    host: str = "192.168.91.1"
    email: str = ""
    password: str = ""
    verify_tls: bool = False  # Gateway ships a self-signed certificate
    token_refresh_interval_seconds: int = Field(1800, gt=0)
    request_timeout_seconds: float | None = None  # None = wait indefinitely


class WeatherConfig(BaseModel):
    latitude: float = -27.4698
    longitude: float = 153.0251
    timezone: str = "auto"
    request_timeout_seconds: float = 10.0


class ServiceConfig(BaseModel):
    id: str
    name: str
    url: str


class HealthConfig(BaseModel):
    timeout_seconds: float = Field(3.0, gt=0.0)
    verify_tls: bool = False
    services: list[ServiceConfig] = Field(default_factory=list)


class DashboardConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = ""  # Empty = bundled static directory


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file: str = ""


class AppConfig(BaseModel):
    """Root configuration model containing all system settings."""

    device: DeviceConfig = DeviceConfig()
    weather: WeatherConfig = WeatherConfig()
    health: HealthConfig = HealthConfig()
    dashboard: DashboardConfig = DashboardConfig()
    logging: LoggingConfig = LoggingConfig()
