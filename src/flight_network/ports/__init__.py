"""
Port interfaces for the flight network.

Ports define the abstract interfaces that the domain layer uses to
communicate with external systems (Ports and Adapters architecture).
"""

from src.flight_network.ports.network_data_provider import NetworkDataProvider

__all__ = [
    "NetworkDataProvider",
]
