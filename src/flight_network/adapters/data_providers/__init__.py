"""
Data provider adapters for bulk network data sources.
"""

from src.flight_network.adapters.data_providers.openflights_provider import (
    OpenFlightsDataProvider,
)

__all__ = [
    "OpenFlightsDataProvider",
]
