"""
Record types for the flight network.

Records are immutable; an update replaces the stored record with a new
instance, so a reader holding a record never sees it change underneath it.
Foreign keys are plain integer IDs resolved through the store at read time.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# Reserved token in OpenFlights data meaning "value unknown"
NO_VALUE_SENTINEL = "\\N"


def normalize_text(value: Optional[str]) -> str:
    """Trim surrounding whitespace; None becomes the empty string."""
    if value is None:
        return ""
    return value.strip()


def normalize_code(value: Optional[str]) -> str:
    """
    Normalize a short airline/airport code.

    Trims, upper-cases and maps the "no code" sentinel to the empty string,
    which means "absent" everywhere in the store.

    Examples:
        >>> normalize_code(" lo ")
        'LO'
        >>> normalize_code("\\\\N")
        ''
    """
    code = normalize_text(value).upper()
    if code == NO_VALUE_SENTINEL:
        return ""
    return code


@dataclass(frozen=True)
class Airline:
    """
    Airline record.

    Attributes:
        id: Externally assigned OpenFlights airline ID.
        code: IATA designator, upper-case; empty when absent.
        name: Airline name.
        country: Country of registration.
        active: Whether the airline is currently operating.
    """

    id: int
    code: str
    name: str
    country: str = ""
    active: bool = True


@dataclass(frozen=True)
class Airport:
    """
    Airport record.

    Attributes:
        id: Externally assigned OpenFlights airport ID.
        code: IATA code, upper-case; empty when absent.
        name: Airport name.
        city: Served city.
        country: Country.
        latitude: Degrees, in [-90, 90].
        longitude: Degrees, in [-180, 180].
    """

    id: int
    code: str
    name: str
    city: str = ""
    country: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class Route:
    """A route flown by an airline between two airports; stops == 0 is direct."""

    airline_id: int
    source_airport_id: int
    destination_airport_id: int
    stops: int = 0

    @property
    def is_direct(self) -> bool:
        return self.stops == 0


@dataclass(frozen=True)
class LoadReport:
    """Outcome of a bulk load: rows accepted and rows skipped."""

    kind: str
    loaded: int
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.loaded + self.skipped


@dataclass(frozen=True)
class AirportRouteCount:
    """An airport served by an airline, with the number of route endpoints there."""

    airport: Airport
    route_count: int


@dataclass(frozen=True)
class AirlineRouteCount:
    """An airline flying to/from an airport, with the number of routes touching it."""

    airline: Airline
    route_count: int


@dataclass(frozen=True)
class AirlineRoutes:
    """An airline and the airports it serves, busiest first."""

    airline: Airline
    airports: Tuple[AirportRouteCount, ...]


@dataclass(frozen=True)
class AirportRoutes:
    """An airport and the airlines flying there, busiest first."""

    airport: Airport
    airlines: Tuple[AirlineRouteCount, ...]


@dataclass(frozen=True)
class OneHopItinerary:
    """
    Two direct routes chained through an intermediate airport.

    The airline of either leg is None when its ID no longer resolves.
    """

    via: Airport
    first_leg: Route
    second_leg: Route
    leg1_miles: float
    leg2_miles: float
    airline1: Optional[Airline] = None
    airline2: Optional[Airline] = None

    @property
    def total_miles(self) -> float:
        """Sum of both leg distances."""
        return self.leg1_miles + self.leg2_miles


@dataclass(frozen=True)
class OneHopResult:
    """Ranked one-hop itineraries between two resolved airports, shortest first."""

    source: Airport
    destination: Airport
    itineraries: Tuple[OneHopItinerary, ...]


@dataclass(frozen=True)
class NetworkStats:
    """Sizes of the store's collections."""

    airlines: int
    airports: int
    routes: int
    source_airports: int
