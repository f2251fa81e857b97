"""
FlightNetwork - Public API for the flight network store.

Acts as a Facade/Factory: builds the data provider, store and services
with sensible defaults, loads the bulk data, and exposes the query and
mutation operations.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

from src.flight_network.adapters.data_providers.openflights_provider import (
    OpenFlightsDataProvider,
)
from src.flight_network.adapters.repositories.network_store import NetworkStore
from src.flight_network.config import Config
from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.schemas.records import (
    Airline,
    AirlineRoutes,
    Airport,
    AirportRoutes,
    LoadReport,
    NetworkStats,
    OneHopResult,
    Route,
)
from src.flight_network.services.network_mutation_service import NetworkMutationService
from src.flight_network.services.network_query_service import NetworkQueryService

logger = logging.getLogger(__name__)


class FlightNetwork:
    """
    Public API for the flight network.

    Example usage:
        >>> network = FlightNetwork(data_dir="data")
        >>> network.load()
        >>> result = network.one_hop("SFO", "JFK")
        >>> for itinerary in result.itineraries[:3]:
        ...     print(itinerary.via.code, round(itinerary.total_miles))

    Attributes:
        _provider: Bulk data source.
        _store: The in-memory network store.
        _queries: Read-only query service.
        _mutations: Add/update service.
    """

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        data_provider: Optional[NetworkDataProvider] = None,
        store: Optional[NetworkStore] = None,
    ) -> None:
        """
        Initialize the network with optional custom dependencies.

        Args:
            data_dir: Directory with the OpenFlights files. Ignored when a
                data_provider is given. Defaults to the configured paths.
            data_provider: Custom bulk data source.
            store: Pre-built store (mainly for tests). Defaults to empty.
        """
        if data_provider is not None:
            self._provider = data_provider
        elif data_dir is not None:
            self._provider = OpenFlightsDataProvider.from_directory(data_dir)
        else:
            airlines_path, airports_path, routes_path = Config.data_paths()
            self._provider = OpenFlightsDataProvider(
                airlines_path=airlines_path,
                airports_path=airports_path,
                routes_path=routes_path,
            )

        self._store = store if store is not None else NetworkStore()
        self._queries = NetworkQueryService(self._store)
        self._mutations = NetworkMutationService(self._store)
        self._load_reports: Dict[str, LoadReport] = {}

        logger.info("FlightNetwork initialized with %s provider", self._provider.name)

    def load(self) -> Dict[str, LoadReport]:
        """
        Bulk-load airlines, airports and routes from the provider.

        Returns:
            LoadReport per record kind.

        Raises:
            FileNotFoundError: If a source file is missing.
        """
        start_time = time.perf_counter()

        reports = {
            "airlines": self._store.load_airlines(self._provider.get_airlines()),
            "airports": self._store.load_airports(self._provider.get_airports()),
            "routes": self._store.load_routes(self._provider.get_routes()),
        }
        self._load_reports = reports

        logger.info(
            "Network loaded in %.1fms: %d airlines, %d airports, %d routes",
            (time.perf_counter() - start_time) * 1000,
            reports["airlines"].loaded,
            reports["airports"].loaded,
            reports["routes"].loaded,
        )
        return reports

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def airline(self, code: Optional[str]) -> Airline:
        return self._queries.airline_by_code(code)

    def airport(self, code: Optional[str]) -> Airport:
        return self._queries.airport_by_code(code)

    def airline_routes(self, code: Optional[str]) -> AirlineRoutes:
        return self._queries.airline_routes(code)

    def airport_routes(self, code: Optional[str]) -> AirportRoutes:
        return self._queries.airport_routes(code)

    def one_hop(
        self,
        source_code: Optional[str],
        destination_code: Optional[str],
    ) -> OneHopResult:
        return self._queries.one_hop(source_code, destination_code)

    def airlines_by_code(self) -> List[Airline]:
        return self._queries.airlines_by_code()

    def airports_by_code(self) -> List[Airport]:
        return self._queries.airports_by_code()

    def stats(self) -> NetworkStats:
        return self._queries.stats()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_airline(
        self, airline_id: int, code: Optional[str], name: Optional[str], **fields
    ) -> Airline:
        return self._mutations.add_airline(airline_id, code, name, **fields)

    def update_airline(self, airline_id: int, **fields) -> Airline:
        return self._mutations.update_airline(airline_id, **fields)

    def add_airport(
        self, airport_id: int, code: Optional[str], name: Optional[str], **fields
    ) -> Airport:
        return self._mutations.add_airport(airport_id, code, name, **fields)

    def update_airport(self, airport_id: int, **fields) -> Airport:
        return self._mutations.update_airport(airport_id, **fields)

    def add_route(
        self,
        airline_id: int,
        source_airport_id: int,
        destination_airport_id: int,
        stops: Optional[int] = None,
    ) -> Route:
        return self._mutations.add_route(
            airline_id, source_airport_id, destination_airport_id, stops
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def store(self) -> NetworkStore:
        return self._store

    @property
    def load_reports(self) -> Dict[str, LoadReport]:
        """Reports from the last load(); empty before the first load."""
        return dict(self._load_reports)

    @property
    def is_loaded(self) -> bool:
        """Check if bulk data has been loaded."""
        return bool(self._load_reports)
