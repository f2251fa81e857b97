"""
Network Query Service - read-only operations over the flight network.

Provides:
- Point lookups by code
- Route-count aggregation by airline and by airport
- One-hop itinerary search ranked by great-circle distance
- Code-ordered listings
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import TYPE_CHECKING, List, Optional, Tuple

from src.flight_network.exceptions import InvalidArgumentError, RecordNotFoundError
from src.flight_network.schemas.records import (
    Airline,
    AirlineRouteCount,
    AirlineRoutes,
    Airport,
    AirportRouteCount,
    AirportRoutes,
    NetworkStats,
    OneHopItinerary,
    OneHopResult,
    normalize_code,
)
from src.flight_network.services.distance import great_circle_miles

if TYPE_CHECKING:
    from src.flight_network.adapters.repositories.network_store import NetworkStore

logger = logging.getLogger(__name__)


def rank_counts(counts: Counter) -> List[Tuple[int, int]]:
    """
    Order (key, count) pairs by count descending, then key ascending.

    Example:
        >>> rank_counts(Counter({7: 2, 3: 2, 9: 5}))
        [(9, 5), (3, 2), (7, 2)]
    """
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class NetworkQueryService:
    """
    Read-only queries against a NetworkStore.

    Stateless apart from the store reference; safe to share between threads.

    Attributes:
        _store: The network store being queried.
    """

    def __init__(self, store: NetworkStore) -> None:
        self._store = store

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_code(code: Optional[str], argument: str) -> str:
        # Empty and "\N" codes are never indexed, so they resolve to not-found
        if code is None:
            raise InvalidArgumentError(argument, f"Missing '{argument}' parameter")
        return normalize_code(code)

    def airline_by_code(self, code: Optional[str]) -> Airline:
        """
        Resolve an airline by its code (case-insensitive).

        Raises:
            InvalidArgumentError: If the code is missing.
            RecordNotFoundError: If no airline has this code.
        """
        normalized = self._require_code(code, "iata")
        airline = self._store.airline_by_code(normalized)
        if airline is None:
            raise RecordNotFoundError("airline", normalized, "Airline not found")
        return airline

    def airport_by_code(self, code: Optional[str], argument: str = "iata") -> Airport:
        """
        Resolve an airport by its code (case-insensitive).

        Raises:
            InvalidArgumentError: If the code is missing.
            RecordNotFoundError: If no airport has this code.
        """
        normalized = self._require_code(code, argument)
        airport = self._store.airport_by_code(normalized)
        if airport is None:
            raise RecordNotFoundError("airport", normalized, "Airport not found")
        return airport

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def count_routes_by_airline(self, airline_id: int) -> List[Tuple[int, int]]:
        """
        Count route endpoints per airport for one airline.

        Every route of the airline adds one to its source airport and one to
        its destination airport, so a route counts twice overall.

        Returns:
            (airport_id, count) pairs, busiest first, ties by airport ID.
        """
        counts: Counter = Counter()
        for route in self._store.routes():
            if route.airline_id != airline_id:
                continue
            counts[route.source_airport_id] += 1
            counts[route.destination_airport_id] += 1
        return rank_counts(counts)

    def count_routes_by_airport(self, airport_id: int) -> List[Tuple[int, int]]:
        """
        Count routes touching one airport, per airline.

        A route with the airport at either end adds one to its airline.

        Returns:
            (airline_id, count) pairs, busiest first, ties by airline ID.
        """
        counts: Counter = Counter()
        for route in self._store.routes():
            if (
                route.source_airport_id == airport_id
                or route.destination_airport_id == airport_id
            ):
                counts[route.airline_id] += 1
        return rank_counts(counts)

    def airline_routes(self, code: Optional[str]) -> AirlineRoutes:
        """
        Airports served by the airline with this code, with endpoint counts.

        Airports that no longer resolve are left out.
        """
        start_time = time.perf_counter()
        airline = self.airline_by_code(code)

        entries = []
        for airport_id, count in self.count_routes_by_airline(airline.id):
            airport = self._store.airport_by_id(airport_id)
            if airport is None:
                continue
            entries.append(AirportRouteCount(airport=airport, route_count=count))

        logger.debug(
            "Airline %s serves %d airports (%.3fms)",
            airline.code,
            len(entries),
            (time.perf_counter() - start_time) * 1000,
        )
        return AirlineRoutes(airline=airline, airports=tuple(entries))

    def airport_routes(self, code: Optional[str]) -> AirportRoutes:
        """
        Airlines flying to or from the airport with this code, with route counts.

        Airlines that no longer resolve are left out.
        """
        start_time = time.perf_counter()
        airport = self.airport_by_code(code)

        entries = []
        for airline_id, count in self.count_routes_by_airport(airport.id):
            airline = self._store.airline_by_id(airline_id)
            if airline is None:
                continue
            entries.append(AirlineRouteCount(airline=airline, route_count=count))

        logger.debug(
            "Airport %s is served by %d airlines (%.3fms)",
            airport.code,
            len(entries),
            (time.perf_counter() - start_time) * 1000,
        )
        return AirportRoutes(airport=airport, airlines=tuple(entries))

    # -------------------------------------------------------------------------
    # One-hop search
    # -------------------------------------------------------------------------

    def one_hop(
        self,
        source_code: Optional[str],
        destination_code: Optional[str],
    ) -> OneHopResult:
        """
        Find every source -> via -> destination pair of direct routes.

        Parallel routes are not merged: each matching (first leg, second leg)
        pair of routes is its own itinerary. Results are ordered by total
        great-circle distance, shortest first; equal distances keep the
        order in which they were found.

        Args:
            source_code: Origin airport code.
            destination_code: Final airport code.

        Returns:
            OneHopResult with the resolved endpoints and ranked itineraries.

        Raises:
            InvalidArgumentError: If either code is missing.
            RecordNotFoundError: If either airport does not exist.
        """
        start_time = time.perf_counter()

        source = self.airport_by_code(source_code, "src")
        destination = self.airport_by_code(destination_code, "dst")

        itineraries: List[OneHopItinerary] = []
        for first_leg in self._store.routes_from(source.id):
            if not first_leg.is_direct:
                continue

            via = self._store.airport_by_id(first_leg.destination_airport_id)
            if via is None:
                continue

            leg1_miles: Optional[float] = None
            for second_leg in self._store.routes_from(via.id):
                if not second_leg.is_direct:
                    continue
                if second_leg.destination_airport_id != destination.id:
                    continue

                if leg1_miles is None:
                    leg1_miles = great_circle_miles(source, via)

                itineraries.append(
                    OneHopItinerary(
                        via=via,
                        first_leg=first_leg,
                        second_leg=second_leg,
                        leg1_miles=leg1_miles,
                        leg2_miles=great_circle_miles(via, destination),
                        airline1=self._store.airline_by_id(first_leg.airline_id),
                        airline2=self._store.airline_by_id(second_leg.airline_id),
                    )
                )

        itineraries.sort(key=lambda itinerary: itinerary.total_miles)

        logger.debug(
            "One-hop %s -> %s: %d itineraries in %.3fms",
            source.code,
            destination.code,
            len(itineraries),
            (time.perf_counter() - start_time) * 1000,
        )
        return OneHopResult(
            source=source,
            destination=destination,
            itineraries=tuple(itineraries),
        )

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def airlines_by_code(self) -> List[Airline]:
        """All airlines ordered by code; airlines without a code come first."""
        return sorted(self._store.airlines(), key=lambda airline: airline.code)

    def airports_by_code(self) -> List[Airport]:
        """All airports ordered by code; airports without a code come first."""
        return sorted(self._store.airports(), key=lambda airport: airport.code)

    def stats(self) -> NetworkStats:
        return self._store.stats()
