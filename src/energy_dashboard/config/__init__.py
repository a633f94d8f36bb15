"""Configuration management for Energy Dashboard."""

from energy_dashboard.config.schema import AppConfig
from energy_dashboard.config.manager import ConfigManager

__all__ = ["AppConfig", "ConfigManager"]
