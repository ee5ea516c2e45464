"""Errors raised by the outbound enrichment calls."""
from typing import Optional


class EnrichmentError(Exception):
    """Base class for failures talking to an external enrichment service."""


class RequestTimeout(EnrichmentError):
    """The outbound call did not complete before its deadline."""


class NetworkError(EnrichmentError):
    """Connection-level failure (refused, reset, DNS, ...)."""


class ServiceError(EnrichmentError):
    """The service answered, but not with something we can use."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ServiceError):
    """The response body could not be decoded or failed validation."""
