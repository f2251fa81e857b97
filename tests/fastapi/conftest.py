"""
Fixtures for FastAPI endpoint tests.

The API runs against a small network built through the facade instead of
the OpenFlights files:

    Airports: 1 AAA (0, 0)   2 BBB (0, 90)   3 CCC (0, 180)
    Airlines: 1 L1, 2 L2
    Routes:   L1 AAA -> BBB, L2 BBB -> CCC, and airline 99 BBB -> CCC
              (loaded in bulk, airline 99 does not exist)
"""

import pandas as pd
import pytest
from httpx import ASGITransport, AsyncClient

from src.fastapi.network_api import app, get_network
from src.flight_network.application import FlightNetwork
from src.flight_network.schemas.frames import IngestionBatch, RouteFrameSchema


@pytest.fixture
def network(tmp_path) -> FlightNetwork:
    flight_network = FlightNetwork(data_dir=tmp_path)

    flight_network.add_airline(1, "L1", "Leg One Air", country="Equatoria")
    flight_network.add_airline(2, "L2", "Leg Two Air", country="Equatoria")
    flight_network.add_airport(1, "AAA", "Alpha", city="A City", latitude=0.0, longitude=0.0)
    flight_network.add_airport(2, "BBB", "Bravo", city="B City", latitude=0.0, longitude=90.0)
    flight_network.add_airport(3, "CCC", "Charlie", city="C City", latitude=0.0, longitude=180.0)
    flight_network.add_route(1, 1, 2)
    flight_network.add_route(2, 2, 3)

    dangling = pd.DataFrame(
        [(99, 2, 3, 0)],
        columns=["airline_id", "source_airport_id", "destination_airport_id", "stops"],
    )
    flight_network.store.load_routes(
        IngestionBatch("routes", RouteFrameSchema.validate(dangling))
    )
    return flight_network


@pytest.fixture
def anyio_backend():
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
async def client(network: FlightNetwork, anyio_backend):
    """HTTP client for the app with the shared network replaced by the fixture network."""
    app.dependency_overrides[get_network] = lambda: network
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as http_client:
        yield http_client
    app.dependency_overrides.clear()
