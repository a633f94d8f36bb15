"""Configuration loading, environment overrides and validation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from energy_dashboard.config.schema import AppConfig

logger = logging.getLogger(__name__)

# Environment variable → (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "POWERWALL_HOST": ("device", "host"),
    "POWERWALL_EMAIL": ("device", "email"),
    "POWERWALL_PASSWORD": ("device", "password"),
}


class ConfigManager:
    """Loads config from YAML files plus environment overrides and validates it."""

    def __init__(
        self,
        defaults_path: Path | None = None,
        user_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._defaults_path = defaults_path or Path("config.defaults.yaml")
        self._user_path = user_path or Path("config.yaml")
        self._environ = environ if environ is not None else os.environ
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded. Call load() first.")
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from defaults + user overrides + environment."""
        defaults = self._load_yaml(self._defaults_path)
        overrides = self._load_yaml(self._user_path) if self._user_path.exists() else {}
        merged = self._deep_merge(defaults, overrides)
        merged = self._deep_merge(merged, self._env_overrides())
        self._config = AppConfig.model_validate(merged)
        logger.info("Configuration loaded successfully")
        return self._config

    def _env_overrides(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for var, (section, key) in ENV_OVERRIDES.items():
            value = self._environ.get(var)
            if value:
                result.setdefault(section, {})[key] = value
                logger.debug("Config %s.%s taken from $%s", section, key, var)
        return result

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with open(path) as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, returning a new dict."""
        result = dict(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
