"""
Repository adapters holding the in-memory flight network.
"""

from src.flight_network.adapters.repositories.network_store import (
    NetworkStore,
    RecordTable,
    RouteTable,
)

__all__ = [
    "NetworkStore",
    "RecordTable",
    "RouteTable",
]
