"""
Schema definitions for the flight network.

Frozen dataclass records for the store, Pandera-validated frames for ingestion.
"""

from .frames import (
    AirlineFrameSchema,
    AirportFrameSchema,
    IngestionBatch,
    RouteFrameSchema,
)
from .records import (
    NO_VALUE_SENTINEL,
    Airline,
    AirlineRouteCount,
    AirlineRoutes,
    Airport,
    AirportRouteCount,
    AirportRoutes,
    LoadReport,
    NetworkStats,
    OneHopItinerary,
    OneHopResult,
    Route,
    normalize_code,
    normalize_text,
)

__all__ = [
    # Records
    "Airline",
    "Airport",
    "Route",
    "NO_VALUE_SENTINEL",
    "normalize_code",
    "normalize_text",
    # Reports
    "LoadReport",
    "NetworkStats",
    "AirportRouteCount",
    "AirlineRouteCount",
    "AirlineRoutes",
    "AirportRoutes",
    "OneHopItinerary",
    "OneHopResult",
    # Ingestion frames
    "AirlineFrameSchema",
    "AirportFrameSchema",
    "RouteFrameSchema",
    "IngestionBatch",
]
