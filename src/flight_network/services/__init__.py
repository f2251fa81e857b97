"""
Domain services for the flight network.

Services implement the query and mutation operations on top of the
NetworkStore, plus the distance helpers they share.
"""

from src.flight_network.services.network_mutation_service import NetworkMutationService
from src.flight_network.services.network_query_service import NetworkQueryService

__all__ = ["NetworkMutationService", "NetworkQueryService"]
