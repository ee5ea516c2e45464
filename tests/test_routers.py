"""
Tests for the HTTP surface: translate and geocoding routers.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from sightline.enrichment import RequestTimeout, ServiceError, geocode_resolver, translation_batcher
from sightline.main import app
from sightline.models.geo import BoundingBox, GeoCandidate


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def paris() -> GeoCandidate:
    return GeoCandidate(
        display_name="Paris, Ile-de-France, France",
        lat=48.8589,
        lon=2.32,
        bounding_box=BoundingBox(48.0, 50.0, 2.0, 4.0),
        type="city",
        importance=0.8,
    )


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_translate_coerces_names(client):
    """Entries are stringified, null becoming an empty string."""
    with patch.object(
        translation_batcher, "translate_batch", new_callable=AsyncMock
    ) as mock_translate:
        mock_translate.return_value = ["Beijing", "", "3"]

        response = client.post("/api/v1/translate", json={"names": ["北京", None, 3]})

    assert response.status_code == 200
    assert response.json() == {"translated": ["Beijing", "", "3"]}
    mock_translate.assert_awaited_once_with(["北京", "", "3"])


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"names": "北京"},
        ["北京"],
    ],
)
def test_translate_requires_names_array(client, body):
    response = client.post("/api/v1/translate", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Body must include 'names' array"}


def test_translate_invalid_json_body(client):
    response = client.post(
        "/api/v1/translate",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_translate_unexpected_failure(client):
    with patch.object(
        translation_batcher, "translate_batch", new_callable=AsyncMock
    ) as mock_translate:
        mock_translate.side_effect = RuntimeError("boom")

        response = client.post("/api/v1/translate", json={"names": ["北京"]})

    assert response.status_code == 500
    assert response.json() == {"error": "Translation failed"}


def test_resolve_expands_candidate_box(client, paris):
    with patch.object(
        geocode_resolver, "resolve_location", new_callable=AsyncMock
    ) as mock_resolve:
        mock_resolve.return_value = paris

        response = client.get("/api/v1/geocoding/resolve", params={"q": "Paris", "country": "fr", "factor": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["candidate"]["display_name"] == "Paris, Ile-de-France, France"
    assert data["bounding_box"] == [47.0, 51.0, 1.0, 5.0]
    assert data["viewbox"] == "47,1,51,5"
    mock_resolve.assert_awaited_once_with("Paris", "fr")


def test_resolve_with_radius_uses_candidate_centre(client, paris):
    paris.lat = 0.0
    paris.lon = 0.0
    with patch.object(
        geocode_resolver, "resolve_location", new_callable=AsyncMock
    ) as mock_resolve:
        mock_resolve.return_value = paris

        response = client.get("/api/v1/geocoding/resolve", params={"q": "Paris", "radius_km": 111})

    assert response.status_code == 200
    assert response.json()["bounding_box"] == pytest.approx([-1, 1, -1, 1])


def test_resolve_not_found(client):
    with patch.object(
        geocode_resolver, "resolve_location", new_callable=AsyncMock
    ) as mock_resolve:
        mock_resolve.return_value = None

        response = client.get("/api/v1/geocoding/resolve", params={"q": "Atlantis"})

    assert response.status_code == 404


@pytest.mark.parametrize(
    "error,status_code",
    [
        (RequestTimeout("timed out"), 504),
        (ServiceError("Nominatim request failed: 503", status_code=503), 502),
    ],
)
def test_geocoding_errors_map_to_gateway_statuses(client, error, status_code):
    with patch.object(geocode_resolver, "geocode", new_callable=AsyncMock) as mock_geocode:
        mock_geocode.side_effect = error

        response = client.get("/api/v1/geocoding/search", params={"q": "Paris"})

    assert response.status_code == status_code


def test_search_returns_candidates(client, paris):
    with patch.object(geocode_resolver, "geocode", new_callable=AsyncMock) as mock_geocode:
        mock_geocode.return_value = [paris]

        response = client.get("/api/v1/geocoding/search", params={"q": "Paris"})

    assert response.status_code == 200
    assert [r["type"] for r in response.json()["results"]] == ["city"]


def test_bbox_endpoint(client):
    response = client.get("/api/v1/geocoding/bbox", params={"lat": 0, "lon": 0, "radius_km": 111})

    assert response.status_code == 200
    data = response.json()
    assert data["bounding_box"] == pytest.approx([-1, 1, -1, 1])
    assert data["viewbox"] == "-1,-1,1,1"


def test_bbox_endpoint_rejects_invalid_latitude(client):
    response = client.get("/api/v1/geocoding/bbox", params={"lat": 95, "lon": 0, "radius_km": 10})

    assert response.status_code == 400


@pytest.mark.parametrize("lon", ["inf", "-inf", "nan"])
def test_bbox_endpoint_rejects_non_finite_longitude(client, lon):
    response = client.get("/api/v1/geocoding/bbox", params={"lat": 0, "lon": lon, "radius_km": 10})

    assert response.status_code == 400


def test_resolve_rejects_non_finite_factor(client, paris):
    with patch.object(
        geocode_resolver, "resolve_location", new_callable=AsyncMock
    ) as mock_resolve:
        mock_resolve.return_value = paris

        response = client.get("/api/v1/geocoding/resolve", params={"q": "Paris", "factor": "inf"})

    assert response.status_code == 400


def test_translate_stringifies_like_json_clients(client):
    """Booleans and integral floats are rendered as a JavaScript client would."""
    with patch.object(
        translation_batcher, "translate_batch", new_callable=AsyncMock
    ) as mock_translate:
        mock_translate.return_value = ["true", "false", "2", "2.5"]

        response = client.post("/api/v1/translate", json={"names": [True, False, 2.0, 2.5]})

    assert response.status_code == 200
    mock_translate.assert_awaited_once_with(["true", "false", "2", "2.5"])
