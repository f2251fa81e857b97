"""
Great-circle distance between airports.

Haversine formula on a spherical Earth of mean radius 6371 km, reported in
statute miles.
"""

import math

from src.flight_network.schemas.records import Airport

EARTH_RADIUS_KM = 6371.0
MILES_PER_KM = 0.621371


def _deg2rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def haversine_miles(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """
    Great-circle distance in statute miles between two coordinates.

    Args:
        lat1: Latitude of the first point, degrees.
        lon1: Longitude of the first point, degrees.
        lat2: Latitude of the second point, degrees.
        lon2: Longitude of the second point, degrees.

    Returns:
        Distance in miles.

    Example:
        >>> round(haversine_miles(0.0, 0.0, 0.0, 90.0), 1)
        6218.4
    """
    phi1 = _deg2rad(lat1)
    phi2 = _deg2rad(lat2)
    d_phi = phi2 - phi1
    d_lambda = _deg2rad(lon2) - _deg2rad(lon1)

    sin_d_phi = math.sin(d_phi / 2.0)
    sin_d_lambda = math.sin(d_lambda / 2.0)
    a = sin_d_phi * sin_d_phi + math.cos(phi1) * math.cos(phi2) * sin_d_lambda * sin_d_lambda
    # Rounding can push near-antipodal points just above 1
    a = min(a, 1.0)

    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c * MILES_PER_KM


def great_circle_miles(origin: Airport, destination: Airport) -> float:
    """Great-circle distance in miles between two airports."""
    return haversine_miles(
        origin.latitude,
        origin.longitude,
        destination.latitude,
        destination.longitude,
    )
