"""
Geocoding Router
Resolves place queries to candidates and search bounding boxes via Nominatim
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from sightline.config import settings
from sightline.enrichment import (
    EnrichmentError,
    RequestTimeout,
    bbox_to_string,
    calculate_bounding_box,
    expand_bounding_box,
    geocode_resolver,
)
from sightline.models.geo import (
    BoundingBoxResponse,
    GeocodeSearchResponse,
    LocationResolution,
)

router = APIRouter(prefix="/geocoding", tags=["geocoding"])
logger = logging.getLogger(__name__)


def _to_http_error(exc: EnrichmentError) -> HTTPException:
    if isinstance(exc, RequestTimeout):
        return HTTPException(status_code=504, detail="Geocoding service timed out")
    return HTTPException(status_code=502, detail="Failed to fetch geocoding results")


@router.get("/search", response_model=GeocodeSearchResponse)
async def search_locations(
    q: str = Query(..., min_length=1, description="Free-text place query"),
    country: Optional[str] = Query(None, description="ISO country code restriction"),
):
    """
    Return every candidate Nominatim found for the query.

    Args:
        q: Search query string
        country: Optional country code(s), e.g. "fr" or "fr,be"

    Returns:
        Candidates in Nominatim's ranking order
    """
    try:
        results = await geocode_resolver.geocode(q, country)
    except EnrichmentError as e:
        logger.error(f"Geocoding search error: {e}")
        raise _to_http_error(e)

    return GeocodeSearchResponse(results=results)


@router.get("/resolve", response_model=LocationResolution)
async def resolve_location(
    q: str = Query(..., min_length=1, description="Free-text place query"),
    country: Optional[str] = Query(None, description="ISO country code restriction"),
    radius_km: Optional[float] = Query(None, gt=0, description="Search radius around the place centre"),
    factor: Optional[float] = Query(None, gt=0, description="Expansion factor for the place's own box"),
):
    """
    Pick the best candidate for an area search and derive its search box.

    With ``radius_km`` the box is built around the candidate centre; without
    it the candidate's own bounding box is expanded by ``factor``.
    """
    try:
        candidate = await geocode_resolver.resolve_location(q, country)
    except EnrichmentError as e:
        logger.error(f"Geocoding resolve error: {e}")
        raise _to_http_error(e)

    if candidate is None:
        raise HTTPException(status_code=404, detail="Location not found")

    try:
        if radius_km is not None:
            box = calculate_bounding_box(candidate.lat, candidate.lon, radius_km)
        else:
            box = expand_bounding_box(
                candidate.bounding_box,
                factor if factor is not None else settings.bbox_expand_factor,
            )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LocationResolution(candidate=candidate, bounding_box=box, viewbox=bbox_to_string(box))


@router.get("/bbox", response_model=BoundingBoxResponse)
async def bounding_box(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    radius_km: float = Query(..., description="Radius in kilometers"),
):
    """Compute a search box of ``radius_km`` around a point."""
    try:
        box = calculate_bounding_box(lat, lon, radius_km)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BoundingBoxResponse(bounding_box=box, viewbox=bbox_to_string(box))
