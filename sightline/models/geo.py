"""Pydantic models for geocoding."""
from pydantic import BaseModel, Field
from typing import Optional, List, NamedTuple


class BoundingBox(NamedTuple):
    """Geographic extent in degrees, in Nominatim ``boundingbox`` order."""
    south: float
    north: float
    west: float
    east: float


class NominatimAddress(BaseModel):
    """Subset of the ``address`` object returned with ``addressdetails=1``."""
    city: Optional[str] = None
    town: Optional[str] = None
    village: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None


class NominatimResult(BaseModel):
    """Single item of a Nominatim ``/search?format=json`` response."""
    place_id: Optional[int] = None
    licence: Optional[str] = None
    osm_type: Optional[str] = None
    osm_id: Optional[int] = None
    lat: float  # sent as a string
    lon: float  # sent as a string
    display_name: str
    address: NominatimAddress = Field(default_factory=NominatimAddress)
    boundingbox: BoundingBox  # four strings: south, north, west, east
    importance: Optional[float] = None
    type: str = ""
    # "class" is a keyword
    category: Optional[str] = Field(None, alias="class")


class CandidateAddress(BaseModel):
    """Best-effort decomposed address of a candidate."""
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None


class GeoCandidate(BaseModel):
    """A place-search hit, normalized for consumers."""
    display_name: str
    lat: float
    lon: float
    bounding_box: BoundingBox
    type: str
    importance: float = Field(0.0, description="Service relevance score in [0, 1]")
    address: CandidateAddress = Field(default_factory=CandidateAddress)

    @classmethod
    def from_nominatim(cls, item: NominatimResult) -> "GeoCandidate":
        return cls(
            display_name=item.display_name,
            lat=item.lat,
            lon=item.lon,
            bounding_box=item.boundingbox,
            type=item.type,
            importance=item.importance or 0.0,
            address=CandidateAddress(
                country=item.address.country,
                state=item.address.state,
                city=item.address.city or item.address.town or item.address.village,
            ),
        )


class GeocodeSearchResponse(BaseModel):
    """Response for the geocoding search endpoint."""
    results: List[GeoCandidate]


class LocationResolution(BaseModel):
    """Chosen candidate plus the bounding box to search within."""
    candidate: GeoCandidate
    bounding_box: BoundingBox
    viewbox: str = Field(..., description="south,west,north,east")


class BoundingBoxResponse(BaseModel):
    """Computed bounding box and its viewbox serialization."""
    bounding_box: BoundingBox
    viewbox: str
