"""
Network Data Provider port interface.

Defines the abstract contract for bulk sources of airline, airport and
route records. Implementations handle the file or database format; the
store only ever sees normalized, schema-validated frames.
"""

from abc import ABC, abstractmethod

from src.flight_network.schemas.frames import IngestionBatch


class NetworkDataProvider(ABC):
    """
    Abstract interface for bulk network data providers.

    Each method returns an IngestionBatch whose frame has already been
    filtered (rows without a usable identity are dropped and counted) and
    validated against the matching frame schema.

    Implementations:
    - OpenFlightsDataProvider: OpenFlights .dat files
    - MockDataProvider (tests): In-memory frames
    """

    @abstractmethod
    def get_airlines(self) -> IngestionBatch:
        """
        Return airline rows validated against AirlineFrameSchema.

        Raises:
            FileNotFoundError: If the airline source is missing.
        """
        ...

    @abstractmethod
    def get_airports(self) -> IngestionBatch:
        """
        Return airport rows validated against AirportFrameSchema.

        Raises:
            FileNotFoundError: If the airport source is missing.
        """
        ...

    @abstractmethod
    def get_routes(self) -> IngestionBatch:
        """
        Return route rows validated against RouteFrameSchema.

        Route foreign keys are NOT checked against airlines or airports;
        dangling references are tolerated and fail to resolve at query time.

        Raises:
            FileNotFoundError: If the route source is missing.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Human-readable name of this data provider.

        Returns:
            Provider identifier (e.g., "OpenFlights", "Mock Provider").
        """
        ...
