"""
Pytest configuration and common fixtures for the enrichment tests.
"""

import pytest

from tests.utils import FakeTransport


@pytest.fixture
def fake_transport() -> FakeTransport:
    """
    Provide an empty scripted transport.

    Tests queue outcomes with ``fake_transport.outcomes.extend(...)``.

    Returns:
        FakeTransport: transport that records every request it receives
    """
    return FakeTransport()
