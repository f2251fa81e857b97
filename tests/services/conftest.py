"""
Fixtures for service tests.

The sample network is small enough to reason about by hand:

    Airports (id, code, lat, lon):
        10 SRC (0, 0)   20 MID (0, 10)   30 DST (0, 20)   40 FAR (30, 10)

    Routes (airline: src -> dst, stops):
        r0  1: 10 -> 40, 0
        r1  1: 40 -> 30, 0
        r2  1: 10 -> 20, 0
        r3  2: 20 -> 30, 0
        r4  2: 10 -> 20, 0      parallel to r2
        r5 99: 20 -> 30, 0      airline 99 does not exist
        r6  1: 10 -> 30, 1      not direct
        r7  1: 10 -> 999, 0     airport 999 does not exist
        r8  2: 30 -> 10, 0
"""

import pandas as pd
import pytest

from src.flight_network.adapters.repositories.network_store import NetworkStore
from src.flight_network.schemas.frames import (
    AirlineFrameSchema,
    AirportFrameSchema,
    IngestionBatch,
    RouteFrameSchema,
)
from src.flight_network.services.network_mutation_service import NetworkMutationService
from src.flight_network.services.network_query_service import NetworkQueryService

SAMPLE_ROUTES = [
    (1, 10, 40, 0),
    (1, 40, 30, 0),
    (1, 10, 20, 0),
    (2, 20, 30, 0),
    (2, 10, 20, 0),
    (99, 20, 30, 0),
    (1, 10, 30, 1),
    (1, 10, 999, 0),
    (2, 30, 10, 0),
]


def airline_batch() -> IngestionBatch:
    frame = pd.DataFrame(
        {
            "id": [1, 2, 3],
            "code": ["AA", "BA", ""],
            "name": ["American Airlines", "British Airways", "Nameless Air"],
            "country": ["United States", "United Kingdom", "Nowhere"],
            "active": [True, True, False],
        }
    )
    return IngestionBatch("airlines", AirlineFrameSchema.validate(frame))


def airport_batch() -> IngestionBatch:
    frame = pd.DataFrame(
        {
            "id": [10, 20, 30, 40],
            "code": ["SRC", "MID", "DST", "FAR"],
            "name": ["Source", "Middle", "Destination", "Far Away"],
            "city": ["Src City", "Mid City", "Dst City", "Far City"],
            "country": ["A", "B", "C", "D"],
            "latitude": [0.0, 0.0, 0.0, 30.0],
            "longitude": [0.0, 10.0, 20.0, 10.0],
        }
    )
    return IngestionBatch("airports", AirportFrameSchema.validate(frame))


def route_batch(routes=SAMPLE_ROUTES) -> IngestionBatch:
    frame = pd.DataFrame(
        list(routes),
        columns=["airline_id", "source_airport_id", "destination_airport_id", "stops"],
    )
    return IngestionBatch("routes", RouteFrameSchema.validate(frame))


def build_store(routes=SAMPLE_ROUTES) -> NetworkStore:
    network_store = NetworkStore()
    network_store.load_airlines(airline_batch())
    network_store.load_airports(airport_batch())
    network_store.load_routes(route_batch(routes))
    return network_store


@pytest.fixture
def sample_routes():
    return list(SAMPLE_ROUTES)


@pytest.fixture
def store_factory():
    """Build a sample-network store over a custom route list."""
    return build_store


@pytest.fixture
def store() -> NetworkStore:
    """NetworkStore loaded with the sample network."""
    return build_store()


@pytest.fixture
def queries(store: NetworkStore) -> NetworkQueryService:
    return NetworkQueryService(store)


@pytest.fixture
def mutations(store: NetworkStore) -> NetworkMutationService:
    return NetworkMutationService(store)
