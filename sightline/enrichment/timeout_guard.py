"""Deadline wrapper for a single outbound call."""
import asyncio
import logging
from typing import Optional

import httpx

from sightline.enrichment.errors import RequestTimeout
from sightline.enrichment.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class TimeoutGuard:
    """
    Run one outbound request with a hard deadline.

    When the deadline elapses the in-flight send is cancelled, which aborts
    the underlying httpx request, and ``RequestTimeout`` is raised. Retrying
    is left to the caller.
    """

    def __init__(self, transport: Optional[Transport] = None):
        self.transport = transport if transport is not None else HttpxTransport()

    async def call(self, request: httpx.Request, deadline: float) -> httpx.Response:
        try:
            return await asyncio.wait_for(self.transport.send(request, deadline), timeout=deadline)
        except asyncio.TimeoutError as exc:
            logger.warning(f"{request.method} {request.url.host} exceeded {deadline}s deadline")
            raise RequestTimeout(f"Request to {request.url.host} timed out after {deadline}s") from exc
