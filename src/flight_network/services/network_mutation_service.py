"""
Network Mutation Service - inserts and updates that keep indices consistent.

Normalizes caller input the same way bulk ingestion does (trimmed text,
upper-case codes, "\\N" meaning no code) before handing complete records
to the store. Every operation either fully applies or raises without
changing anything.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.flight_network.exceptions import InvalidArgumentError
from src.flight_network.schemas.records import (
    Airline,
    Airport,
    Route,
    normalize_code,
    normalize_text,
)

if TYPE_CHECKING:
    from src.flight_network.adapters.repositories.network_store import NetworkStore

logger = logging.getLogger(__name__)


def _require_int(value: Any, argument: str) -> int:
    if value is None:
        raise InvalidArgumentError(argument, f"Missing required field: {argument}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(argument, f"'{argument}' must be an integer")
    return value


def _require_text(value: Optional[str], argument: str) -> str:
    if value is None:
        raise InvalidArgumentError(argument, f"Missing required field: {argument}")
    return normalize_text(value)


def _check_coordinate(value: float, limit: float, argument: str) -> float:
    if not -limit <= value <= limit:
        raise InvalidArgumentError(
            argument, f"'{argument}' must be within [-{limit:g}, {limit:g}], got {value}"
        )
    return float(value)


class NetworkMutationService:
    """
    Add and update operations for airlines, airports and routes.

    Attributes:
        _store: The network store being modified.
    """

    def __init__(self, store: NetworkStore) -> None:
        self._store = store

    # -------------------------------------------------------------------------
    # Airlines
    # -------------------------------------------------------------------------

    def add_airline(
        self,
        airline_id: int,
        code: Optional[str],
        name: Optional[str],
        country: Optional[str] = None,
        active: bool = True,
    ) -> Airline:
        """
        Add a new airline.

        Raises:
            InvalidArgumentError: If the ID or name is missing.
            DuplicateRecordError: If the ID already exists.
        """
        airline = Airline(
            id=_require_int(airline_id, "id"),
            code=normalize_code(code),
            name=_require_text(name, "name"),
            country=normalize_text(country),
            active=bool(active),
        )
        added = self._store.add_airline(airline)
        logger.info("Added airline %d (%s)", added.id, added.code or "no code")
        return added

    def update_airline(
        self,
        airline_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        country: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> Airline:
        """
        Update the supplied fields of an existing airline.

        Fields left as None keep their current values.

        Raises:
            InvalidArgumentError: If the ID is missing.
            RecordNotFoundError: If the ID does not exist.
        """
        changes: Dict[str, Any] = {}
        if code is not None:
            changes["code"] = normalize_code(code)
        if name is not None:
            changes["name"] = normalize_text(name)
        if country is not None:
            changes["country"] = normalize_text(country)
        if active is not None:
            changes["active"] = bool(active)

        updated = self._store.update_airline(_require_int(airline_id, "id"), changes)
        logger.info("Updated airline %d: %s", updated.id, sorted(changes))
        return updated

    # -------------------------------------------------------------------------
    # Airports
    # -------------------------------------------------------------------------

    def add_airport(
        self,
        airport_id: int,
        code: Optional[str],
        name: Optional[str],
        city: Optional[str] = None,
        country: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Airport:
        """
        Add a new airport. Missing coordinates default to 0.0.

        Raises:
            InvalidArgumentError: If the ID or name is missing, or a
                coordinate is out of range.
            DuplicateRecordError: If the ID already exists.
        """
        airport = Airport(
            id=_require_int(airport_id, "id"),
            code=normalize_code(code),
            name=_require_text(name, "name"),
            city=normalize_text(city),
            country=normalize_text(country),
            latitude=_check_coordinate(latitude or 0.0, 90.0, "latitude"),
            longitude=_check_coordinate(longitude or 0.0, 180.0, "longitude"),
        )
        added = self._store.add_airport(airport)
        logger.info("Added airport %d (%s)", added.id, added.code or "no code")
        return added

    def update_airport(
        self,
        airport_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Airport:
        """
        Update the supplied fields of an existing airport.

        Raises:
            InvalidArgumentError: If the ID is missing or a coordinate is
                out of range.
            RecordNotFoundError: If the ID does not exist.
        """
        changes: Dict[str, Any] = {}
        if code is not None:
            changes["code"] = normalize_code(code)
        if name is not None:
            changes["name"] = normalize_text(name)
        if city is not None:
            changes["city"] = normalize_text(city)
        if country is not None:
            changes["country"] = normalize_text(country)
        if latitude is not None:
            changes["latitude"] = _check_coordinate(latitude, 90.0, "latitude")
        if longitude is not None:
            changes["longitude"] = _check_coordinate(longitude, 180.0, "longitude")

        updated = self._store.update_airport(_require_int(airport_id, "id"), changes)
        logger.info("Updated airport %d: %s", updated.id, sorted(changes))
        return updated

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    def add_route(
        self,
        airline_id: int,
        source_airport_id: int,
        destination_airport_id: int,
        stops: Optional[int] = None,
    ) -> Route:
        """
        Add a route between existing airports for an existing airline.

        Raises:
            InvalidArgumentError: If an ID is missing or stops is negative.
            UnknownReferenceError: If the airline or an airport does not exist.
        """
        stops = 0 if stops is None else _require_int(stops, "stops")
        if stops < 0:
            raise InvalidArgumentError("stops", f"'stops' must be >= 0, got {stops}")

        route = Route(
            airline_id=_require_int(airline_id, "airline_id"),
            source_airport_id=_require_int(source_airport_id, "src_id"),
            destination_airport_id=_require_int(destination_airport_id, "dst_id"),
            stops=stops,
        )
        added = self._store.add_route(route)
        logger.info(
            "Added route %d -> %d (airline %d, %d stops)",
            added.source_airport_id,
            added.destination_airport_id,
            added.airline_id,
            added.stops,
        )
        return added
