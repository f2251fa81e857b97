"""
Network Store - In-memory Record Store and Adjacency Index.

Holds the three record collections of the flight network:
- Airlines and airports in RecordTables (slot list + ID index + code index)
- Routes in a RouteTable (slot list + source-airport adjacency)

Each table owns one lock covering its collection and all of its indices,
so an index update and the record it points at are installed together.
Tables never share a lock; no operation performs I/O while holding one.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import replace
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from src.flight_network.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    UnknownReferenceError,
)
from src.flight_network.schemas.frames import (
    AirlineDataFrame,
    AirportDataFrame,
    IngestionBatch,
    RouteDataFrame,
)
from src.flight_network.schemas.records import (
    Airline,
    Airport,
    LoadReport,
    NetworkStats,
    Route,
    normalize_code,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", Airline, Airport)


# =============================================================================
# RECORD TABLE: slot list with ID and code indices
# =============================================================================


class RecordTable(Generic[R]):
    """
    Append-only collection of airlines or airports with O(1) lookups.

    Records live in slots of a list; ``_id_index`` and ``_code_index`` map
    an ID or a normalized code to a slot. Updates replace the record in its
    slot and move the code entry under the same lock.

    Attributes:
        kind: Singular record kind used in error messages ("airline").
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._records: List[R] = []
        self._id_index: Dict[int, int] = {}
        self._code_index: Dict[str, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _append_unlocked(self, record: R) -> None:
        slot = len(self._records)
        self._records.append(record)
        self._id_index[record.id] = slot
        if record.code:
            self._code_index[record.code] = slot

    def _resolve_unlocked(self, slot: Optional[int]) -> Optional[R]:
        if slot is None:
            return None
        assert slot < len(self._records), f"{self.kind} index points past slot {slot}"
        return self._records[slot]

    def extend(self, records: Iterable[R]) -> int:
        """
        Bulk-append records without duplicate checks.

        A repeated ID or code re-points the index at the newest record.

        Returns:
            Number of records appended.
        """
        count = 0
        with self._lock:
            for record in records:
                self._append_unlocked(record)
                count += 1
        return count

    def insert(self, record: R) -> R:
        """
        Append a single record whose ID must be new.

        Raises:
            DuplicateRecordError: If the ID is already indexed.
        """
        with self._lock:
            if record.id in self._id_index:
                raise DuplicateRecordError(self.kind, record.id)
            self._append_unlocked(record)
        return record

    def _latest_holder_unlocked(self, code: str, exclude: int) -> Optional[int]:
        # Bulk loads may leave several slots with one code; only slots still
        # indexed by their ID are live.
        for slot in range(len(self._records) - 1, -1, -1):
            record = self._records[slot]
            if (
                slot != exclude
                and record.code == code
                and self._id_index.get(record.id) == slot
            ):
                return slot
        return None

    def update(self, record_id: int, changes: Dict[str, Any]) -> R:
        """
        Replace the record with ``record_id`` by a copy carrying ``changes``.

        If the code changes, the old code entry (when it still points at
        this record) moves to the newest other live record sharing that
        code, or is dropped when there is none. The new non-empty code is
        installed inside the same critical section as the slot replacement.

        Raises:
            RecordNotFoundError: If no record has this ID.
        """
        assert "id" not in changes, "record identity cannot be updated"
        with self._lock:
            slot = self._id_index.get(record_id)
            current = self._resolve_unlocked(slot)
            if current is None:
                raise RecordNotFoundError(self.kind, record_id)

            updated = replace(current, **changes)

            if updated.code != current.code:
                if current.code and self._code_index.get(current.code) == slot:
                    holder = self._latest_holder_unlocked(current.code, slot)
                    if holder is None:
                        del self._code_index[current.code]
                    else:
                        self._code_index[current.code] = holder
                if updated.code:
                    self._code_index[updated.code] = slot

            self._records[slot] = updated
        return updated

    def get_by_id(self, record_id: int) -> Optional[R]:
        """Return the record with this ID, or None."""
        with self._lock:
            return self._resolve_unlocked(self._id_index.get(record_id))

    def get_by_code(self, code: str) -> Optional[R]:
        """Return the record with this code (case-insensitive), or None."""
        normalized = normalize_code(code)
        if not normalized:
            return None
        with self._lock:
            return self._resolve_unlocked(self._code_index.get(normalized))

    def contains(self, record_id: int) -> bool:
        with self._lock:
            return record_id in self._id_index

    def snapshot(self) -> Tuple[R, ...]:
        """Return all records in slot order."""
        with self._lock:
            return tuple(self._records)


# =============================================================================
# ROUTE TABLE: slot list with source-airport adjacency
# =============================================================================


class RouteTable:
    """
    Append-only route collection plus its adjacency index.

    ``_adjacency`` maps a source airport ID to the slots of routes departing
    from it, in insertion order. It grows with every append and is never
    rebuilt or pruned.
    """

    def __init__(self) -> None:
        self._routes: List[Route] = []
        self._adjacency: Dict[int, List[int]] = defaultdict(list)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)

    def _append_unlocked(self, route: Route) -> None:
        slot = len(self._routes)
        self._routes.append(route)
        self._adjacency[route.source_airport_id].append(slot)

    def append(self, route: Route) -> Route:
        with self._lock:
            self._append_unlocked(route)
        return route

    def extend(self, routes: Iterable[Route]) -> int:
        count = 0
        with self._lock:
            for route in routes:
                self._append_unlocked(route)
                count += 1
        return count

    def routes_from(self, airport_id: int) -> Tuple[Route, ...]:
        """Return routes departing ``airport_id`` in insertion order; may be empty."""
        with self._lock:
            slots = self._adjacency.get(airport_id)
            if not slots:
                return ()
            assert slots[-1] < len(self._routes), "adjacency points past route slots"
            return tuple(self._routes[slot] for slot in slots)

    def snapshot(self) -> Tuple[Route, ...]:
        with self._lock:
            return tuple(self._routes)

    @property
    def source_airport_count(self) -> int:
        with self._lock:
            return len(self._adjacency)


# =============================================================================
# FRAME -> RECORD CONVERSION
# =============================================================================


def airlines_from_frame(frame: AirlineDataFrame) -> Iterator[Airline]:
    for row in frame.itertuples(index=False):
        yield Airline(
            id=int(row.id),
            code=str(row.code),
            name=str(row.name),
            country=str(row.country),
            active=bool(row.active),
        )


def airports_from_frame(frame: AirportDataFrame) -> Iterator[Airport]:
    for row in frame.itertuples(index=False):
        yield Airport(
            id=int(row.id),
            code=str(row.code),
            name=str(row.name),
            city=str(row.city),
            country=str(row.country),
            latitude=float(row.latitude),
            longitude=float(row.longitude),
        )


def routes_from_frame(frame: RouteDataFrame) -> Iterator[Route]:
    for row in frame.itertuples(index=False):
        yield Route(
            airline_id=int(row.airline_id),
            source_airport_id=int(row.source_airport_id),
            destination_airport_id=int(row.destination_airport_id),
            stops=int(row.stops),
        )


# =============================================================================
# NETWORK STORE: the single owner of all collections and indices
# =============================================================================


class NetworkStore:
    """
    In-memory flight network.

    The only way to read or change airlines, airports and routes. Callers
    get immutable records and tuples, never the underlying lists or dicts.

    Usage:
        >>> store = NetworkStore()
        >>> store.load_airports(provider.get_airports())
        >>> store.airport_by_code("waw")
        Airport(id=..., code='WAW', ...)
    """

    def __init__(self) -> None:
        self._airlines: RecordTable[Airline] = RecordTable("airline")
        self._airports: RecordTable[Airport] = RecordTable("airport")
        self._routes = RouteTable()

    # -------------------------------------------------------------------------
    # Bulk ingestion
    # -------------------------------------------------------------------------

    def load_airlines(self, batch: IngestionBatch) -> LoadReport:
        loaded = self._airlines.extend(airlines_from_frame(batch.frame))
        logger.info("Loaded %d airlines (%d rows skipped)", loaded, batch.skipped)
        return LoadReport(kind="airlines", loaded=loaded, skipped=batch.skipped)

    def load_airports(self, batch: IngestionBatch) -> LoadReport:
        loaded = self._airports.extend(airports_from_frame(batch.frame))
        logger.info("Loaded %d airports (%d rows skipped)", loaded, batch.skipped)
        return LoadReport(kind="airports", loaded=loaded, skipped=batch.skipped)

    def load_routes(self, batch: IngestionBatch) -> LoadReport:
        """Load routes without checking their airline/airport references."""
        loaded = self._routes.extend(routes_from_frame(batch.frame))
        logger.info("Loaded %d routes (%d rows skipped)", loaded, batch.skipped)
        return LoadReport(kind="routes", loaded=loaded, skipped=batch.skipped)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def airline_by_id(self, airline_id: int) -> Optional[Airline]:
        return self._airlines.get_by_id(airline_id)

    def airline_by_code(self, code: str) -> Optional[Airline]:
        return self._airlines.get_by_code(code)

    def airport_by_id(self, airport_id: int) -> Optional[Airport]:
        return self._airports.get_by_id(airport_id)

    def airport_by_code(self, code: str) -> Optional[Airport]:
        return self._airports.get_by_code(code)

    def routes_from(self, airport_id: int) -> Tuple[Route, ...]:
        return self._routes.routes_from(airport_id)

    def airlines(self) -> Tuple[Airline, ...]:
        return self._airlines.snapshot()

    def airports(self) -> Tuple[Airport, ...]:
        return self._airports.snapshot()

    def routes(self) -> Tuple[Route, ...]:
        return self._routes.snapshot()

    def stats(self) -> NetworkStats:
        return NetworkStats(
            airlines=len(self._airlines),
            airports=len(self._airports),
            routes=len(self._routes),
            source_airports=self._routes.source_airport_count,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_airline(self, airline: Airline) -> Airline:
        return self._airlines.insert(airline)

    def update_airline(self, airline_id: int, changes: Dict[str, Any]) -> Airline:
        return self._airlines.update(airline_id, changes)

    def add_airport(self, airport: Airport) -> Airport:
        return self._airports.insert(airport)

    def update_airport(self, airport_id: int, changes: Dict[str, Any]) -> Airport:
        return self._airports.update(airport_id, changes)

    def add_route(self, route: Route) -> Route:
        """
        Append a route whose airline and both airports exist.

        Raises:
            UnknownReferenceError: For the first reference that does not
                resolve; nothing is appended.
        """
        if not self._airlines.contains(route.airline_id):
            raise UnknownReferenceError("airline_id", route.airline_id)
        if not self._airports.contains(route.source_airport_id):
            raise UnknownReferenceError("src_id", route.source_airport_id)
        if not self._airports.contains(route.destination_airport_id):
            raise UnknownReferenceError("dst_id", route.destination_airport_id)
        return self._routes.append(route)
