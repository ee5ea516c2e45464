"""
Shared helpers for enrichment tests.

``FakeTransport`` replays scripted outcomes instead of touching the network,
so resolver and batcher behavior can be checked deterministically.
"""

from typing import Any, Dict, List, Optional, Union

import httpx

Outcome = Union[httpx.Response, BaseException]


class FakeTransport:
    """Scripted transport: every ``send`` consumes the next outcome."""

    def __init__(self, *outcomes: Outcome):
        self.outcomes: List[Outcome] = list(outcomes)
        self.requests: List[httpx.Request] = []
        self.deadlines: List[float] = []

    async def send(self, request: httpx.Request, deadline: float) -> httpx.Response:
        self.requests.append(request)
        self.deadlines.append(deadline)
        if not self.outcomes:
            raise AssertionError(f"Unexpected request to {request.url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def nominatim_item(
    display_name: str = "Paris, Ile-de-France, France",
    place_type: str = "city",
    importance: float = 0.8,
    lat: str = "48.8588897",
    lon: str = "2.3200410",
    boundingbox: Optional[List[str]] = None,
    address: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build one Nominatim search result the way the API returns it (numbers as strings)."""
    return {
        "place_id": 88066702,
        "licence": "Data (c) OpenStreetMap contributors, ODbL 1.0.",
        "osm_type": "relation",
        "osm_id": 7444,
        "lat": lat,
        "lon": lon,
        "display_name": display_name,
        "address": address if address is not None else {"city": "Paris", "country": "France"},
        "boundingbox": boundingbox or ["48.8155755", "48.9021560", "2.2241220", "2.4697602"],
        "importance": importance,
        "type": place_type,
        "class": "boundary",
    }


def chat_response(content: str, status_code: int = 200) -> httpx.Response:
    """Build an OpenAI chat-completion response carrying ``content``."""
    return httpx.Response(
        status_code,
        json={
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        },
    )
