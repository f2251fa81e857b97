"""
Fixtures for adapter tests.

The OpenFlights sample tables under tests/data/openflights mix clean rows
with rows the loader must skip or repair:

    airlines.dat  5 loaded  (missing ID, non-numeric ID, short row skipped)
    airports.dat  3 loaded  (missing ID, short row skipped)
    routes.dat    4 loaded  (missing airline ID, missing destination ID,
                             short row skipped)
"""

from pathlib import Path

import pytest

from src.flight_network.adapters.data_providers.openflights_provider import (
    OpenFlightsDataProvider,
)
from src.flight_network.adapters.repositories.network_store import NetworkStore

OPENFLIGHTS_DIR = Path(__file__).resolve().parent.parent / "data" / "openflights"


@pytest.fixture
def openflights_dir() -> Path:
    return OPENFLIGHTS_DIR


@pytest.fixture
def provider() -> OpenFlightsDataProvider:
    return OpenFlightsDataProvider.from_directory(OPENFLIGHTS_DIR)


@pytest.fixture
def loaded_store(provider: OpenFlightsDataProvider) -> NetworkStore:
    """NetworkStore loaded from the sample tables."""
    store = NetworkStore()
    store.load_airlines(provider.get_airlines())
    store.load_airports(provider.get_airports())
    store.load_routes(provider.get_routes())
    return store
