"""Exceptions raised while talking to the energy gateway."""

from __future__ import annotations


class DeviceError(Exception):
    """Base class for energy gateway failures."""


class NetworkError(DeviceError):
    """Connection to the gateway could not be established or was interrupted."""


class AuthError(DeviceError):
    """Login exchange completed but produced no usable token."""


class UpstreamAuthError(DeviceError):
    """Request was rejected (401/403) both before and after reauthentication."""

    def __init__(self, endpoint: str, status_code: int) -> None:
        super().__init__(
            f"Gateway rejected {endpoint} with {status_code} after reauthentication"
        )
        self.endpoint = endpoint
        self.status_code = status_code


class DeviceResponseError(DeviceError):
    """Gateway answered with a payload of unexpected shape."""
