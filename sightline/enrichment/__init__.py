"""
Enrichment Module
=================

Wraps the third-party services used to enrich asset/location records:

- Geocoding of free-text place queries (Nominatim) and bounding-box helpers
- English normalization of display names (OpenAI chat completions)

Every outbound call goes through ``TimeoutGuard``. Geocoding retries timeouts
once and then fails loudly; translation never fails and falls back to the
original text.
"""

from .errors import (
    EnrichmentError,
    MalformedResponseError,
    NetworkError,
    RequestTimeout,
    ServiceError,
)
from .timeout_guard import TimeoutGuard
from .geocoder import (
    GeocodeResolver,
    bbox_to_string,
    calculate_bounding_box,
    expand_bounding_box,
    geocode_resolver,
    select_candidate,
)
from .translator import (
    TranslationBatcher,
    needs_translation,
    translation_batcher,
)

__all__ = [
    "EnrichmentError",
    "MalformedResponseError",
    "NetworkError",
    "RequestTimeout",
    "ServiceError",
    "TimeoutGuard",
    "GeocodeResolver",
    "bbox_to_string",
    "calculate_bounding_box",
    "expand_bounding_box",
    "geocode_resolver",
    "select_candidate",
    "TranslationBatcher",
    "needs_translation",
    "translation_batcher",
]
