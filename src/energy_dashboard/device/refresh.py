"""Background task that renews the gateway token on a fixed schedule."""

from __future__ import annotations

import asyncio
import logging

import structlog

from energy_dashboard.device.auth import AuthClient
from energy_dashboard.device.errors import DeviceError
from energy_dashboard.device.token_store import TokenStore

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Reauthenticates immediately on start and then every ``interval_seconds``.

    Failures are logged and the loop keeps running. This path races with the
    reactive retry in AuthenticatedRequester; both only ever store fresh tokens.
    """

    def __init__(
        self,
        auth_client: AuthClient,
        token_store: TokenStore,
        interval_seconds: float = 1800,
    ) -> None:
        self._auth = auth_client
        self._tokens = token_store
        self._interval = interval_seconds
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None
        self.refresh_count = 0
        self.failure_count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start the refresh loop as a background task."""
        if self.running:
            return self._task  # type: ignore[return-value]
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="token_refresh")
        return self._task

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it."""
        self._stop_event.set()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

    async def run(self) -> None:
        structlog.contextvars.bind_contextvars(task="token_refresh")
        logger.info("Token refresh scheduled every %ss", self._interval)
        while not self._stop_event.is_set():
            await self.refresh_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass

    async def refresh_once(self) -> bool:
        """Fetch and store a new token. Returns False if the attempt failed."""
        try:
            token = await self._auth.authenticate()
        except DeviceError as e:
            self.failure_count += 1
            logger.warning("Scheduled token refresh failed: %s", e)
            return False
        except Exception:
            self.failure_count += 1
            logger.exception("Unexpected error during scheduled token refresh")
            return False
        self._tokens.set(token)
        self.refresh_count += 1
        logger.debug("Token refreshed")
        return True
