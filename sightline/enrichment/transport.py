"""Outbound HTTP transport shared by the geocoding and translation clients."""
import logging
from typing import Any, Protocol

import httpx

from sightline.enrichment.errors import NetworkError, RequestTimeout

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can send a prepared request within a deadline."""

    async def send(self, request: httpx.Request, deadline: float) -> httpx.Response:
        ...


class HttpxTransport:
    """Transport backed by a fresh ``httpx.AsyncClient`` per request."""

    def __init__(self, **client_options: Any) -> None:
        # Extra options (e.g. ``transport=httpx.MockTransport(...)``) go straight to the client
        self.client_options = client_options

    async def send(self, request: httpx.Request, deadline: float) -> httpx.Response:
        """
        Send ``request`` and return the fully-read response.

        Raises:
            RequestTimeout: httpx gave up waiting on connect/read/write/pool
            NetworkError: any other transport-level failure
        """
        try:
            async with httpx.AsyncClient(timeout=deadline, **self.client_options) as client:
                response = await client.send(request)
                await response.aread()
                return response
        except httpx.TimeoutException as exc:
            raise RequestTimeout(f"Request to {request.url.host} timed out") from exc
        except httpx.RequestError as exc:
            logger.debug(f"Network error calling {request.url.host}: {exc}")
            raise NetworkError(f"Request to {request.url.host} failed: {exc}") from exc
