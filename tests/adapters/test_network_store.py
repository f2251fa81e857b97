"""
Tests for the in-memory NetworkStore.

Tests cover:
- RecordTable ID/code indexing, last-write-wins bulk loads, updates
- RouteTable adjacency in insertion order
- NetworkStore bulk loading from provider batches
- Route reference checks
- Index consistency under concurrent readers and writers
"""

import threading

import pandas as pd
import pytest

from src.flight_network.adapters.repositories.network_store import (
    NetworkStore,
    RecordTable,
    RouteTable,
    routes_from_frame,
)
from src.flight_network.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    UnknownReferenceError,
)
from src.flight_network.schemas.frames import RouteFrameSchema
from src.flight_network.schemas.records import Airline, Airport, Route


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def airline_table() -> RecordTable:
    table = RecordTable("airline")
    table.extend(
        [
            Airline(id=1, code="AA", name="American Airlines"),
            Airline(id=2, code="BA", name="British Airways"),
            Airline(id=3, code="", name="Codeless"),
        ]
    )
    return table


@pytest.fixture
def small_store() -> NetworkStore:
    store = NetworkStore()
    store.add_airline(Airline(id=1, code="AA", name="American Airlines"))
    store.add_airport(Airport(id=10, code="JFK", name="Kennedy"))
    store.add_airport(Airport(id=20, code="LHR", name="Heathrow"))
    return store


# =============================================================================
# RECORD TABLE
# =============================================================================


class TestRecordTable:
    def test_lookup_by_id_and_code(self, airline_table):
        assert airline_table.get_by_id(2).name == "British Airways"
        assert airline_table.get_by_code("ba").id == 2
        assert airline_table.get_by_id(99) is None
        assert airline_table.get_by_code("ZZ") is None

    def test_empty_code_is_not_indexed(self, airline_table):
        assert airline_table.get_by_id(3).code == ""
        assert airline_table.get_by_code("") is None
        assert airline_table.get_by_code("\\N") is None

    def test_bulk_duplicates_last_write_wins(self, airline_table):
        airline_table.extend(
            [
                Airline(id=2, code="B2", name="Second BA"),
                Airline(id=4, code="AA", name="Another AA"),
            ]
        )

        assert len(airline_table) == 5
        assert airline_table.get_by_id(2).name == "Second BA"
        assert airline_table.get_by_code("AA").id == 4
        assert airline_table.get_by_code("BA").name == "British Airways"

    def test_insert_duplicate_id_raises(self, airline_table):
        with pytest.raises(DuplicateRecordError) as exc_info:
            airline_table.insert(Airline(id=1, code="XX", name="Dup"))

        assert exc_info.value.record_id == 1
        assert len(airline_table) == 3
        assert airline_table.get_by_code("XX") is None

    def test_insert_may_take_over_existing_code(self, airline_table):
        airline_table.insert(Airline(id=5, code="AA", name="New AA"))

        assert airline_table.get_by_code("AA").id == 5
        assert airline_table.get_by_id(1).code == "AA"

    def test_update_replaces_record_in_place(self, airline_table):
        before = airline_table.snapshot()

        updated = airline_table.update(2, {"name": "BA Renamed"})

        assert updated.name == "BA Renamed"
        assert airline_table.snapshot()[1] is updated
        assert before[1].name == "British Airways"
        assert len(airline_table) == 3

    def test_update_code_keeps_foreign_index_entry(self, airline_table):
        """Renaming a record whose old code points elsewhere leaves that entry alone."""
        airline_table.insert(Airline(id=5, code="AA", name="New AA"))

        airline_table.update(1, {"code": "AX"})

        assert airline_table.get_by_code("AA").id == 5
        assert airline_table.get_by_code("AX").id == 1

    def test_rename_repoints_shared_code_to_other_holder(self, airline_table):
        """Two bulk records share a code; renaming the indexed one exposes the other."""
        airline_table.extend(
            [
                Airline(id=7, code="XX", name="Seven"),
                Airline(id=8, code="XX", name="Eight"),
            ]
        )
        assert airline_table.get_by_code("XX").id == 8

        airline_table.update(8, {"code": "YY"})

        assert airline_table.get_by_code("XX").id == 7
        assert airline_table.get_by_code("YY").id == 8

    def test_rename_ignores_superseded_records(self, airline_table):
        """A slot replaced by a later record with the same ID never gets the code back."""
        airline_table.extend(
            [
                Airline(id=7, code="XX", name="Old Seven"),
                Airline(id=7, code="ZZ", name="New Seven"),
                Airline(id=8, code="XX", name="Eight"),
            ]
        )

        airline_table.update(8, {"code": "YY"})

        assert airline_table.get_by_code("XX") is None
        assert airline_table.get_by_code("ZZ").name == "New Seven"

    def test_clearing_code_repoints_shared_code(self, airline_table):
        airline_table.insert(Airline(id=5, code="AA", name="New AA"))

        airline_table.update(5, {"code": ""})

        assert airline_table.get_by_code("AA").id == 1

    def test_update_unknown_id_raises(self, airline_table):
        with pytest.raises(RecordNotFoundError) as exc_info:
            airline_table.update(404, {"name": "Ghost"})
        assert exc_info.value.key == 404

    def test_contains(self, airline_table):
        assert airline_table.contains(1)
        assert not airline_table.contains(404)


# =============================================================================
# ROUTE TABLE
# =============================================================================


class TestRouteTable:
    def test_adjacency_keeps_insertion_order(self):
        table = RouteTable()
        first = Route(airline_id=1, source_airport_id=10, destination_airport_id=20)
        second = Route(airline_id=2, source_airport_id=20, destination_airport_id=10)
        third = Route(airline_id=3, source_airport_id=10, destination_airport_id=30)

        table.extend([first, second])
        table.append(third)

        assert table.routes_from(10) == (first, third)
        assert table.routes_from(20) == (second,)
        assert len(table) == 3
        assert table.source_airport_count == 2

    def test_unknown_source_is_empty(self):
        table = RouteTable()
        assert table.routes_from(10) == ()
        assert table.source_airport_count == 0

    def test_adjacency_covers_every_route(self):
        table = RouteTable()
        routes = [
            Route(airline_id=1, source_airport_id=src, destination_airport_id=dst)
            for src, dst in [(1, 2), (2, 3), (1, 3), (3, 1), (1, 2)]
        ]
        table.extend(routes)

        def endpoints(route):
            return (route.source_airport_id, route.destination_airport_id)

        from_adjacency = [r for src in (1, 2, 3) for r in table.routes_from(src)]
        assert sorted(map(endpoints, from_adjacency)) == sorted(map(endpoints, routes))
        assert len(from_adjacency) == len(table.snapshot())


# =============================================================================
# NETWORK STORE
# =============================================================================


class TestNetworkStoreLoading:
    def test_load_reports(self, provider):
        store = NetworkStore()

        airlines = store.load_airlines(provider.get_airlines())
        airports = store.load_airports(provider.get_airports())
        routes = store.load_routes(provider.get_routes())

        assert (airlines.kind, airlines.loaded, airlines.skipped) == ("airlines", 5, 3)
        assert (airports.loaded, airports.skipped) == (3, 2)
        assert (routes.loaded, routes.skipped) == (4, 3)
        assert routes.total == 7

    def test_routes_from_frame(self):
        frame = RouteFrameSchema.validate(
            pd.DataFrame(
                [("1", "10", "20", "0"), ("2", "20", "10", "1")],
                columns=["airline_id", "source_airport_id", "destination_airport_id", "stops"],
            )
        )

        assert list(routes_from_frame(frame)) == [
            Route(airline_id=1, source_airport_id=10, destination_airport_id=20, stops=0),
            Route(airline_id=2, source_airport_id=20, destination_airport_id=10, stops=1),
        ]

    def test_loaded_records(self, loaded_store):
        nh = loaded_store.airline_by_code("NH")
        assert nh.id == 324
        assert nh.name == "All Nippon Airways"

        lhr = loaded_store.airport_by_code("lhr")
        assert lhr.city == "London"
        assert lhr.latitude == pytest.approx(51.4706)

        assert loaded_store.airport_by_id(8).code == ""

    def test_loaded_adjacency(self, loaded_store):
        from_jfk = loaded_store.routes_from(3797)
        from_lhr = loaded_store.routes_from(507)

        assert [r.airline_id for r in from_jfk] == [1, 1]
        assert [r.airline_id for r in from_lhr] == [2, 324]
        assert [r.stops for r in from_lhr] == [0, 1]

    def test_stats(self, loaded_store):
        stats = loaded_store.stats()
        assert (stats.airlines, stats.airports, stats.routes) == (5, 3, 4)
        assert stats.source_airports == 2

    def test_snapshots_are_tuples(self, loaded_store):
        assert isinstance(loaded_store.airlines(), tuple)
        assert isinstance(loaded_store.airports(), tuple)
        assert isinstance(loaded_store.routes(), tuple)


class TestNetworkStoreRoutes:
    def test_add_route_with_known_references(self, small_store):
        route = Route(airline_id=1, source_airport_id=10, destination_airport_id=20)

        assert small_store.add_route(route) == route
        assert small_store.routes_from(10) == (route,)

    def test_checks_airline_first(self, small_store):
        with pytest.raises(UnknownReferenceError) as exc_info:
            small_store.add_route(
                Route(airline_id=9, source_airport_id=99, destination_airport_id=98)
            )
        assert exc_info.value.field == "airline_id"
        assert exc_info.value.value == 9
        assert small_store.routes() == ()

    def test_checks_source_before_destination(self, small_store):
        with pytest.raises(UnknownReferenceError) as exc_info:
            small_store.add_route(
                Route(airline_id=1, source_airport_id=99, destination_airport_id=98)
            )
        assert exc_info.value.field == "src_id"

    def test_checks_destination(self, small_store):
        with pytest.raises(UnknownReferenceError, match="Unknown dst_id: 98"):
            small_store.add_route(
                Route(airline_id=1, source_airport_id=10, destination_airport_id=98)
            )
        assert small_store.routes_from(10) == ()


# =============================================================================
# CONCURRENCY
# =============================================================================


class TestConcurrency:
    """Readers never observe an index entry disagreeing with its record."""

    def test_code_index_consistent_during_renames(self, small_store):
        stop = threading.Event()
        mismatches = []

        def rename():
            for i in range(500):
                small_store.update_airline(1, {"code": "AX" if i % 2 == 0 else "AA"})
            stop.set()

        def read():
            while not stop.is_set():
                for code in ("AA", "AX"):
                    airline = small_store.airline_by_code(code)
                    if airline is not None and airline.code != code:
                        mismatches.append((code, airline.code))

        readers = [threading.Thread(target=read) for _ in range(4)]
        writer = threading.Thread(target=rename)
        for thread in readers:
            thread.start()
        writer.start()
        writer.join()
        for thread in readers:
            thread.join()

        assert mismatches == []
        assert small_store.airline_by_code("AA").id == 1
        assert small_store.airline_by_code("AX") is None

    def test_concurrent_route_inserts(self, small_store):
        per_thread = 200

        def add_routes(source, destination):
            for _ in range(per_thread):
                small_store.add_route(
                    Route(
                        airline_id=1,
                        source_airport_id=source,
                        destination_airport_id=destination,
                    )
                )

        threads = [
            threading.Thread(target=add_routes, args=pair)
            for pair in [(10, 20), (20, 10), (10, 20), (20, 10)]
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(small_store.routes()) == 4 * per_thread
        assert len(small_store.routes_from(10)) == 2 * per_thread
        assert len(small_store.routes_from(20)) == 2 * per_thread
