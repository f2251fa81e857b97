"""
Application layer for the flight network.

Provides the public facade that wires the data provider, the store and the
services together.
"""

from src.flight_network.application.flight_network import FlightNetwork

__all__ = ["FlightNetwork"]
