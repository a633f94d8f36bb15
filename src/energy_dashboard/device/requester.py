"""Bearer-authenticated requests with a single reauthentication retry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from energy_dashboard.device.auth import AuthClient
from energy_dashboard.device.errors import NetworkError, UpstreamAuthError
from energy_dashboard.device.token_store import TokenStore

logger = logging.getLogger(__name__)

# Status codes the gateway uses for an expired or invalid session
AUTH_FAILURE_CODES = frozenset({401, 403})


@dataclass(frozen=True)
class AuthenticatedResponse:
    """Outcome of one request attempt."""

    status_code: int
    body: Any  # Decoded JSON, or raw text when the body is not JSON


class AuthenticatedRequester:
    """Issues gateway requests using the stored token.

    Authenticates lazily when no token is stored. When the gateway rejects
    the token, the store is cleared, a new token is obtained and the request
    is sent exactly once more.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth_client: AuthClient,
        token_store: TokenStore,
    ) -> None:
        self._client = client
        self._auth = auth_client
        self._tokens = token_store

    async def request(self, endpoint: str) -> Any:
        """Fetch ``endpoint`` and return the decoded body.

        Raises:
            NetworkError: the gateway could not be reached.
            AuthError: (re)authentication produced no token.
            UpstreamAuthError: the retried request was rejected again.
        """
        if not self._tokens.present:
            await self._reauthenticate()

        response = await self._send(endpoint)
        if response.status_code in AUTH_FAILURE_CODES:
            logger.info(
                "Gateway rejected %s with %d, reauthenticating",
                endpoint, response.status_code,
            )
            self._tokens.clear()
            await self._reauthenticate()
            response = await self._send(endpoint)
            if response.status_code in AUTH_FAILURE_CODES:
                logger.error(
                    "Gateway rejected %s with %d after reauthentication - check credentials",
                    endpoint, response.status_code,
                )
                raise UpstreamAuthError(endpoint, response.status_code)

        return response.body

    async def _reauthenticate(self) -> None:
        token = await self._auth.authenticate()
        self._tokens.set(token)

    async def _send(self, endpoint: str) -> AuthenticatedResponse:
        token = self._tokens.get()
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = await self._client.get(endpoint, headers=headers)
        except httpx.TransportError as e:
            raise NetworkError(f"Unable to reach gateway at {endpoint}: {e}") from e

        try:
            body: Any = resp.json()
        except ValueError:
            body = resp.text
        return AuthenticatedResponse(status_code=resp.status_code, body=body)
