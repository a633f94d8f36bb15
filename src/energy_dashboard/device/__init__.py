"""Energy gateway session handling and data accessors."""

from energy_dashboard.device.auth import AuthClient, LoginCredentials
from energy_dashboard.device.client import EnergyStatus, PowerFlow, PowerwallClient
from energy_dashboard.device.errors import (
    AuthError,
    DeviceError,
    DeviceResponseError,
    NetworkError,
    UpstreamAuthError,
)
from energy_dashboard.device.refresh import RefreshScheduler
from energy_dashboard.device.requester import AuthenticatedRequester, AuthenticatedResponse
from energy_dashboard.device.token_store import TokenStore

__all__ = [
    "AuthClient",
    "AuthError",
    "AuthenticatedRequester",
    "AuthenticatedResponse",
    "DeviceError",
    "DeviceResponseError",
    "EnergyStatus",
    "LoginCredentials",
    "NetworkError",
    "PowerFlow",
    "PowerwallClient",
    "RefreshScheduler",
    "TokenStore",
    "UpstreamAuthError",
]
