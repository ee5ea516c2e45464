"""
Geocode Resolver
Resolves free-text place queries through Nominatim and derives search bounding boxes.
"""
import asyncio
import logging
import math
from decimal import Decimal
from typing import List, Optional

import httpx
from pydantic import ValidationError

from sightline.config import settings
from sightline.enrichment.errors import (
    EnrichmentError,
    MalformedResponseError,
    RequestTimeout,
    ServiceError,
)
from sightline.enrichment.timeout_guard import TimeoutGuard
from sightline.models.geo import BoundingBox, GeoCandidate, NominatimResult
from sightline.enrichment.transport import Transport

logger = logging.getLogger(__name__)

RESULT_LIMIT = 5
KM_PER_DEGREE_LAT = 111.0

# Types that describe an area rather than a point of interest
ADMIN_TYPES = frozenset({
    "administrative",
    "state",
    "city",
    "town",
    "village",
    "county",
    "district",
})


class GeocodeResolver:
    """Service for turning place queries into candidates via Nominatim."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        transport: Optional[Transport] = None,
    ):
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocode_timeout
        self.max_attempts = max_attempts if max_attempts is not None else settings.geocode_max_attempts
        self.retry_backoff = (
            retry_backoff if retry_backoff is not None else settings.geocode_retry_backoff
        )
        self.guard = TimeoutGuard(transport)

    def _headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _build_request(self, query: str, country_hint: Optional[str]) -> httpx.Request:
        params = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "limit": str(RESULT_LIMIT),
        }
        if country_hint:
            params["countrycodes"] = country_hint

        return httpx.Request(
            "GET",
            f"{self.base_url}/search",
            params=params,
            headers=self._headers(),
        )

    async def geocode(self, query: str, country_hint: Optional[str] = None) -> List[GeoCandidate]:
        """
        Search Nominatim for a place.

        Only timeouts are retried; every other failure propagates on the
        attempt it happened.

        Args:
            query: Free-text place query
            country_hint: Optional ISO country code(s) to restrict the search

        Returns:
            Candidates in the service's own ranking order (at most 5)

        Raises:
            RequestTimeout: every attempt timed out
            ServiceError: non-2xx status or malformed payload
            NetworkError: connection-level failure
        """
        request = self._build_request(query, country_hint)
        last_error: Optional[EnrichmentError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.guard.call(request, self.timeout)
                return self._parse_response(response)
            except RequestTimeout as exc:
                last_error = exc
                if attempt < self.max_attempts:
                    delay = self.retry_backoff * attempt
                    logger.warning(
                        f"Geocode attempt {attempt}/{self.max_attempts} for '{query}' timed out, "
                        f"retrying in {delay}s"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error(f"Geocode for '{query}' timed out after {attempt} attempts")
                raise
            except EnrichmentError as exc:
                logger.error(f"Geocode for '{query}' failed: {exc}")
                raise

        raise last_error or ServiceError("Geocoding failed")

    def _parse_response(self, response: httpx.Response) -> List[GeoCandidate]:
        if not response.is_success:
            raise ServiceError(
                f"Nominatim request failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                "Nominatim returned invalid JSON", status_code=response.status_code
            ) from exc

        if not isinstance(data, list):
            raise MalformedResponseError(
                f"Expected a JSON array from Nominatim, got {type(data).__name__}",
                status_code=response.status_code,
            )

        try:
            return [GeoCandidate.from_nominatim(NominatimResult.model_validate(item)) for item in data]
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Unexpected Nominatim result shape: {exc.error_count()} error(s)",
                status_code=response.status_code,
            ) from exc

    async def resolve_location(
        self,
        query: str,
        country_hint: Optional[str] = None,
    ) -> Optional[GeoCandidate]:
        """
        Pick the best candidate for an area search.

        Returns:
            The chosen candidate, or None when the search found nothing
        """
        candidates = await self.geocode(query, country_hint)
        if not candidates:
            logger.info(f"No geocode results for '{query}'")
            return None
        return select_candidate(candidates)


def select_candidate(candidates: List[GeoCandidate]) -> GeoCandidate:
    """
    Pick the candidate best suited to an area search.

    In service order: the first administrative area, else the first clearly
    relevant hit (importance above 0.5), else the most important one.
    ``max`` keeps the first of equal scores, so ties follow service order.
    """
    for candidate in candidates:
        if candidate.type in ADMIN_TYPES:
            return candidate
    for candidate in candidates:
        if candidate.importance > 0.5:
            return candidate
    return max(candidates, key=lambda c: c.importance)


def calculate_bounding_box(lat: float, lon: float, radius_km: float) -> BoundingBox:
    """
    Build a box of ``radius_km`` around a point.

    The longitude span grows as 1/cos(lat); it is capped at 180 degrees so the
    poles give a full-longitude box instead of infinities.

    Raises:
        ValueError: non-finite input, latitude outside [-90, 90] or negative radius
    """
    if not all(math.isfinite(v) for v in (lat, lon, radius_km)):
        raise ValueError(f"Coordinates and radius must be finite, got {lat}, {lon}, {radius_km}")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"Latitude must be within [-90, 90], got {lat}")
    if radius_km < 0:
        raise ValueError(f"Radius must be non-negative, got {radius_km}")

    lat_delta = radius_km / KM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(lat))
    if cos_lat <= 0:
        lon_delta = 180.0
    else:
        lon_delta = min(radius_km / (KM_PER_DEGREE_LAT * cos_lat), 180.0)

    return BoundingBox(
        south=max(lat - lat_delta, -90.0),
        north=min(lat + lat_delta, 90.0),
        west=lon - lon_delta,
        east=lon + lon_delta,
    )


def expand_bounding_box(box: BoundingBox, factor: float = 1.1) -> BoundingBox:
    """Scale a box about its own centre; 1.0 leaves it unchanged."""
    if not math.isfinite(factor) or factor <= 0:
        raise ValueError(f"Expansion factor must be a positive number, got {factor}")

    south, north, west, east = box
    lat_center = (south + north) / 2
    lon_center = (west + east) / 2
    lat_half = (north - south) / 2 * factor
    lon_half = (east - west) / 2 * factor

    return BoundingBox(
        south=lat_center - lat_half,
        north=lat_center + lat_half,
        west=lon_center - lon_half,
        east=lon_center + lon_half,
    )


def _format_degrees(value: float) -> str:
    # Plain decimal notation, shortest round-trip digits
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def bbox_to_string(box: BoundingBox) -> str:
    """Serialize as Nominatim's viewbox order: ``south,west,north,east``."""
    south, north, west, east = box
    return ",".join(_format_degrees(v) for v in (south, west, north, east))


# Global instance
geocode_resolver = GeocodeResolver()
