"""Login exchange against the energy gateway.

The gateway issues a bearer token from ``POST /api/login/Basic`` for the
fixed ``customer`` account. Retry policy lives in the callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from energy_dashboard.device.errors import AuthError, NetworkError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/login/Basic"
LOGIN_USERNAME = "customer"


@dataclass(frozen=True)
class LoginCredentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"LoginCredentials(email={self.email!r}, password='***')"


class AuthClient:
    """Performs the login call and returns a fresh token.

    Does not store the token; callers put it in the TokenStore.
    """

    def __init__(self, client: httpx.AsyncClient, credentials: LoginCredentials) -> None:
        self._client = client
        self._credentials = credentials

    async def authenticate(self, credentials: LoginCredentials | None = None) -> str:
        """Log in and return the issued token.

        Raises:
            NetworkError: the gateway could not be reached.
            AuthError: the response carried no usable token.
        """
        creds = credentials or self._credentials
        payload = {
            "username": LOGIN_USERNAME,
            "email": creds.email,
            "password": creds.password,
        }
        try:
            resp = await self._client.post(LOGIN_PATH, json=payload)
        except httpx.TransportError as e:
            raise NetworkError(f"Unable to reach gateway for login: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthError(f"Malformed login response: {e}") from e

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            logger.debug("Login returned status %d without a token", resp.status_code)
            raise AuthError("no token in response")

        logger.info("Authenticated with gateway")
        return token
