"""Energy Dashboard: home battery, weather and service status backend."""

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("energy-dashboard")
except Exception:
    __version__ = "dev"
