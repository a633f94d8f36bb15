"""In-memory holder for the gateway session token."""

from __future__ import annotations


class TokenStore:
    """Holds the current bearer token, or None when no session exists.

    Not locked. Concurrent requests and the refresh task may each
    authenticate and overwrite the token; the last write wins.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    @property
    def present(self) -> bool:
        return self._token is not None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
