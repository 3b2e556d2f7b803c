"""
Base classes for downstream service clients.

Storage adapters and transformation services are plain HTTP services
addressed per request (the host depends on the series value type or the
function route), so clients work with absolute URLs on one shared
connection pool.

Every call is a single attempt. Transport failures (connect errors,
timeouts, exhausted pool) become UpstreamUnavailable; interpreting the
status code is left to the concrete client.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from extension_transformation.config import AppSettings
from extension_transformation.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """
    Connection bounds for a service client.

    `timeout` is a deadline for the whole call, response body included;
    `connect_timeout` bounds connection establishment within it.
    """

    # Per-call and connection-establish timeouts
    timeout: float = 10.0
    connect_timeout: float = 5.0

    # Pool
    max_connections: int = 10
    keepalive_expiry: float = 30.0

    # Observability
    log_requests: bool = True
    log_responses: bool = False

    @classmethod
    def from_settings(cls, settings: AppSettings) -> ServiceConfig:
        """Build client bounds from application settings."""
        return cls(
            timeout=settings.request_timeout,
            connect_timeout=settings.connect_timeout,
            max_connections=settings.max_connections,
            keepalive_expiry=settings.keepalive_expiry,
            log_responses=settings.debug,
        )


# =============================================================================
# Base Client
# =============================================================================


class ServiceClient(ABC):
    """
    Abstract base class for downstream service clients.

    Provides common functionality:
    - HTTP client management with bounded pool and timeouts
    - Transport error mapping to UpstreamUnavailable
    - Request/response logging

    Subclasses must implement:
    - name: Service identifier used in logs and error messages
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the service client.

        Args:
            config: Connection bounds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.config = config or ServiceConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this service kind."""
        ...

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout),
                limits=httpx.Limits(
                    max_connections=self.config.max_connections,
                    max_keepalive_connections=self.config.max_connections,
                    keepalive_expiry=self.config.keepalive_expiry,
                ),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        content: str | bytes | None = None,
    ) -> httpx.Response:
        """
        Execute a single HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL, query included
            content: Pre-encoded JSON body

        Returns:
            httpx.Response, whatever its status

        Raises:
            UpstreamUnavailable: On timeout or network failure
        """
        client = await self._get_client()
        headers = {"Content-Type": "application/json"} if content is not None else None

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {method} {url}")

        try:
            async with asyncio.timeout(self.config.timeout):
                response = await client.request(method, url, content=content, headers=headers)
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning(f"[{self.name}] Timeout on {method} {url}: {e}")
            raise UpstreamUnavailable(f"Request timeout: {method} {url}", self.name) from e
        except httpx.TransportError as e:
            logger.warning(f"[{self.name}] Network error on {method} {url}: {e}")
            raise UpstreamUnavailable(f"Network error: {method} {url}", self.name) from e

        if self.config.log_responses:
            logger.debug(
                f"[{self.name}] Response: status={response.status_code} "
                f"body={response.text[:500] if response.text else 'empty'}"
            )

        if not response.is_success:
            logger.warning(
                f"[{self.name}] {method} {url} failed: status={response.status_code} "
                f"body={response.text[:200]}"
            )

        return response

    async def __aenter__(self) -> ServiceClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
