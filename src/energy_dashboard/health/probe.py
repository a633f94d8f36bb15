"""Concurrent reachability checks for self-hosted services."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

import httpx

from energy_dashboard.config.schema import ServiceConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 3.0


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service to probe."""

    id: str
    name: str
    address: str


@dataclass(frozen=True)
class HealthResult:
    """Health of a single service for one probe cycle."""

    id: str
    name: str
    healthy: bool


class HealthProbe:
    """Probes service addresses with a hard per-probe timeout.

    A service is healthy when it answers with a status below 500 before the
    timeout. Every failure mode collapses to unhealthy; nothing is raised.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        verify_tls: bool = False,
    ) -> None:
        self._timeout = timeout_seconds
        # The wait_for deadline bounds each probe; the client itself never times out first
        self._client = client or httpx.AsyncClient(
            timeout=None,
            verify=verify_tls,
            follow_redirects=False,
        )
        self._owns_client = client is None

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def check_one(self, address: str) -> bool:
        """Return True if ``address`` answers below 500 within the timeout."""
        try:
            # wait_for cancels the pending request (and its socket) on timeout
            resp = await asyncio.wait_for(self._client.get(address), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.debug("Probe of %s timed out after %ss", address, self._timeout)
            return False
        except httpx.HTTPError as e:
            logger.debug("Probe of %s failed: %s", address, e)
            return False
        except Exception as e:
            logger.debug("Probe of %s failed unexpectedly: %r", address, e)
            return False
        return resp.status_code < 500

    async def check_all(self, services: Iterable[ServiceDescriptor]) -> list[HealthResult]:
        """Probe every service concurrently; results follow input order."""
        services = list(services)
        statuses = await asyncio.gather(*(self.check_one(s.address) for s in services))
        results = [
            HealthResult(id=s.id, name=s.name, healthy=ok)
            for s, ok in zip(services, statuses)
        ]
        unhealthy = [r.id for r in results if not r.healthy]
        if unhealthy:
            logger.info("Unhealthy services: %s", ", ".join(unhealthy))
        return results

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def descriptors_from_config(services: Iterable[ServiceConfig]) -> list[ServiceDescriptor]:
    """Build descriptors from ``ServiceConfig`` entries."""
    return [ServiceDescriptor(id=s.id, name=s.name, address=s.url) for s in services]
