"""Liveness probes for downstream servers."""

import logging
from typing import Optional

import httpx

from app.services.node_directory import Node

from .models import ServerObservation, ServerStatus

logger = logging.getLogger(__name__)

# Media servers answer a bare GET with 404 when alive and idle
DEFAULT_SENTINEL_STATUS = 404


class ProbeExecutor:
    """Single best-effort liveness check against one target."""

    def __init__(
        self,
        timeout: float = 5.0,
        sentinel_status: int = DEFAULT_SENTINEL_STATUS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.sentinel_status = sentinel_status
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client connections."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def probe_server(self, address: str) -> ServerObservation:
        """
        Probe a media server with a single GET request.

        Args:
            address: URL of the server

        Returns:
            ServerObservation: ``offline`` on transport failure, ``not_ready``
            when the response is not the sentinel code, ``ok`` otherwise
        """
        client = await self._get_client()
        try:
            response = await client.get(address)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # Some httpx errors (e.g. ConnectTimeout) stringify to ""
            detail = str(e) or type(e).__name__
            logger.warning(
                f"Probe of {address} failed: {detail}",
                extra={"address": address, "error_type": type(e).__name__},
            )
            return ServerObservation(
                address=address, status=ServerStatus.OFFLINE, detail=detail
            )

        if response.status_code != self.sentinel_status:
            logger.warning(
                f"Probe of {address} got unexpected status {response.status_code}",
                extra={"address": address, "status_code": response.status_code},
            )
            return ServerObservation(
                address=address,
                status=ServerStatus.NOT_READY,
                detail=f"http status {response.status_code}",
            )

        return ServerObservation(address=address, status=ServerStatus.OK)

    def observe_node(self, node: Node) -> ServerObservation:
        """Report a directory member; membership alone counts as healthy."""
        return ServerObservation(address=node.address, status=ServerStatus.OK)
