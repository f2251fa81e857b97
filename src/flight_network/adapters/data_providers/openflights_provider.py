"""
OpenFlights Data Provider - .dat files to validated DataFrames.

Reads the headerless OpenFlights CSV tables (airlines.dat, airports.dat,
routes.dat) and normalizes them into frames matching the ingestion schemas.

Ingestion is permissive: rows whose identity (or, for routes, any of the
three foreign keys) is missing, the "\\N" sentinel, or not an integer are
dropped and counted, never raised. Other numeric fields that fail to parse
default to zero.
"""

import csv
import logging
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
import pandas as pd

from src.flight_network.ports.network_data_provider import NetworkDataProvider
from src.flight_network.schemas.frames import (
    AirlineFrameSchema,
    AirportFrameSchema,
    IngestionBatch,
    RouteFrameSchema,
)
from src.flight_network.schemas.records import NO_VALUE_SENTINEL

logger = logging.getLogger(__name__)

# Column layouts of the OpenFlights tables (only the columns we read)
AIRLINE_COLUMNS: List[str] = [
    "id", "name", "alias", "code", "icao", "callsign", "country", "active",
]
AIRPORT_COLUMNS: List[str] = [
    "id", "name", "city", "country", "code", "icao", "latitude", "longitude",
]
ROUTE_COLUMNS: List[str] = [
    "airline_code", "airline_id",
    "source_code", "source_airport_id",
    "destination_code", "destination_airport_id",
    "codeshare", "stops", "equipment",
]

ACTIVE_FLAGS = ("Y", "y", "1")

# Up to 18 digits always fits in int64
INTEGER_PATTERN = r"[+-]?[0-9]{1,18}"


# =============================================================================
# RAW READING
# =============================================================================


def read_dat_rows(
    path: Union[str, Path],
    columns: List[str],
) -> Tuple[pd.DataFrame, int]:
    """
    Read a headerless OpenFlights table into a frame of raw strings.

    Rows with fewer fields than ``columns`` are dropped; extra trailing
    fields are ignored. Blank lines are ignored without being counted.

    Args:
        path: Path to the .dat file.
        columns: Names for the leading fields to keep.

    Returns:
        Tuple of (raw string DataFrame, number of short rows dropped).

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    width = len(columns)
    rows: List[List[str]] = []
    short_rows = 0

    with path.open(newline="", encoding="utf-8", errors="replace") as handle:
        for fields in csv.reader(handle):
            if not fields:
                continue
            if len(fields) < width:
                short_rows += 1
                continue
            rows.append(fields[:width])

    return pd.DataFrame(rows, columns=columns, dtype=object), short_rows


# =============================================================================
# VECTORIZED FIELD NORMALIZATION
# =============================================================================


def _to_number(values: pd.Series) -> pd.Series:
    """Parse trimmed strings as floats; anything unparseable becomes NaN."""
    return pd.to_numeric(values.astype(str).str.strip(), errors="coerce").astype(float)


def parse_ids_vectorized(values: pd.Series) -> pd.Series:
    """
    Parse identity fields, leaving <NA> where a value is not a plain integer.

    Only optionally signed digit strings are accepted; "12.0" and "1e3" are
    not identities. Digits are converted directly to int64.

    Examples:
        >>> parse_ids_vectorized(pd.Series(["12", " 7 ", "\\\\N", "", "1.5"]))
        0      12
        1       7
        2    <NA>
        3    <NA>
        4    <NA>
        dtype: Int64
    """
    stripped = values.astype(str).str.strip()
    is_integer = stripped.str.fullmatch(INTEGER_PATTERN).fillna(False).astype(bool)

    ids = pd.Series(pd.NA, index=values.index, dtype="Int64")
    ids[is_integer] = stripped[is_integer].astype("int64")
    return ids


def normalize_codes_vectorized(values: pd.Series) -> pd.Series:
    """Trim and upper-case codes; the "\\N" sentinel becomes empty."""
    codes = values.astype(str).str.strip().str.upper()
    return pd.Series(
        np.where(codes == NO_VALUE_SENTINEL, "", codes),
        index=values.index,
        dtype=object,
    )


def parse_coordinates_vectorized(
    values: pd.Series,
    limit: float,
) -> pd.Series:
    """Parse degrees; unparseable or out of [-limit, limit] becomes 0.0."""
    numeric = _to_number(values)
    return numeric.where(numeric.between(-limit, limit), 0.0).astype(float)


def parse_stops_vectorized(values: pd.Series) -> pd.Series:
    """Parse stop counts, truncating toward zero; unparseable becomes 0."""
    numeric = _to_number(values)
    numeric = numeric.where(np.isfinite(numeric), 0.0)
    return np.trunc(numeric).astype("int64")


def _strip(values: pd.Series) -> pd.Series:
    return values.astype(str).str.strip()


# =============================================================================
# PER-KIND NORMALIZATION
# =============================================================================


def normalize_airlines(raw: pd.DataFrame, short_rows: int = 0) -> IngestionBatch:
    """
    Turn raw airline rows into an AirlineFrameSchema-valid batch.

    Args:
        raw: Frame with AIRLINE_COLUMNS of raw strings.
        short_rows: Rows already dropped by the reader.

    Returns:
        IngestionBatch of normalized airlines.
    """
    ids = parse_ids_vectorized(raw["id"])
    keep = ids.notna()
    accepted = raw[keep]

    frame = pd.DataFrame(
        {
            "id": ids[keep].astype("int64"),
            "code": normalize_codes_vectorized(accepted["code"]),
            "name": _strip(accepted["name"]),
            "country": _strip(accepted["country"]),
            "active": _strip(accepted["active"]).isin(ACTIVE_FLAGS),
        }
    ).reset_index(drop=True)

    return IngestionBatch(
        kind="airlines",
        frame=AirlineFrameSchema.validate(frame),
        skipped=short_rows + int((~keep).sum()),
    )


def normalize_airports(raw: pd.DataFrame, short_rows: int = 0) -> IngestionBatch:
    """
    Turn raw airport rows into an AirportFrameSchema-valid batch.

    Args:
        raw: Frame with AIRPORT_COLUMNS of raw strings.
        short_rows: Rows already dropped by the reader.

    Returns:
        IngestionBatch of normalized airports.
    """
    ids = parse_ids_vectorized(raw["id"])
    keep = ids.notna()
    accepted = raw[keep]

    frame = pd.DataFrame(
        {
            "id": ids[keep].astype("int64"),
            "code": normalize_codes_vectorized(accepted["code"]),
            "name": _strip(accepted["name"]),
            "city": _strip(accepted["city"]),
            "country": _strip(accepted["country"]),
            "latitude": parse_coordinates_vectorized(accepted["latitude"], 90.0),
            "longitude": parse_coordinates_vectorized(accepted["longitude"], 180.0),
        }
    ).reset_index(drop=True)

    return IngestionBatch(
        kind="airports",
        frame=AirportFrameSchema.validate(frame),
        skipped=short_rows + int((~keep).sum()),
    )


def normalize_routes(raw: pd.DataFrame, short_rows: int = 0) -> IngestionBatch:
    """
    Turn raw route rows into a RouteFrameSchema-valid batch.

    A route needs all three of airline ID, source airport ID and
    destination airport ID; the codes in the neighbouring columns are
    ignored.

    Args:
        raw: Frame with ROUTE_COLUMNS of raw strings.
        short_rows: Rows already dropped by the reader.

    Returns:
        IngestionBatch of normalized routes.
    """
    airline_ids = parse_ids_vectorized(raw["airline_id"])
    source_ids = parse_ids_vectorized(raw["source_airport_id"])
    destination_ids = parse_ids_vectorized(raw["destination_airport_id"])
    keep = airline_ids.notna() & source_ids.notna() & destination_ids.notna()

    frame = pd.DataFrame(
        {
            "airline_id": airline_ids[keep].astype("int64"),
            "source_airport_id": source_ids[keep].astype("int64"),
            "destination_airport_id": destination_ids[keep].astype("int64"),
            "stops": parse_stops_vectorized(raw.loc[keep, "stops"]),
        }
    ).reset_index(drop=True)

    return IngestionBatch(
        kind="routes",
        frame=RouteFrameSchema.validate(frame),
        skipped=short_rows + int((~keep).sum()),
    )


# =============================================================================
# PROVIDER
# =============================================================================


class OpenFlightsDataProvider(NetworkDataProvider):
    """
    Data provider for the OpenFlights .dat tables.

    Files are re-read on every call; the store is loaded once at startup
    so there is nothing to cache here.

    Attributes:
        airlines_path: Path to airlines.dat.
        airports_path: Path to airports.dat.
        routes_path: Path to routes.dat.
    """

    def __init__(
        self,
        airlines_path: Union[str, Path],
        airports_path: Union[str, Path],
        routes_path: Union[str, Path],
    ) -> None:
        self.airlines_path = Path(airlines_path)
        self.airports_path = Path(airports_path)
        self.routes_path = Path(routes_path)

    @classmethod
    def from_directory(cls, data_dir: Union[str, Path]) -> "OpenFlightsDataProvider":
        """Create a provider for the standard file names inside ``data_dir``."""
        data_dir = Path(data_dir)
        return cls(
            airlines_path=data_dir / "airlines.dat",
            airports_path=data_dir / "airports.dat",
            routes_path=data_dir / "routes.dat",
        )

    def get_airlines(self) -> IngestionBatch:
        raw, short_rows = read_dat_rows(self.airlines_path, AIRLINE_COLUMNS)
        batch = normalize_airlines(raw, short_rows)
        logger.debug(
            "Parsed %s: %d airlines, %d skipped",
            self.airlines_path, len(batch), batch.skipped,
        )
        return batch

    def get_airports(self) -> IngestionBatch:
        raw, short_rows = read_dat_rows(self.airports_path, AIRPORT_COLUMNS)
        batch = normalize_airports(raw, short_rows)
        logger.debug(
            "Parsed %s: %d airports, %d skipped",
            self.airports_path, len(batch), batch.skipped,
        )
        return batch

    def get_routes(self) -> IngestionBatch:
        raw, short_rows = read_dat_rows(self.routes_path, ROUTE_COLUMNS)
        batch = normalize_routes(raw, short_rows)
        logger.debug(
            "Parsed %s: %d routes, %d skipped",
            self.routes_path, len(batch), batch.skipped,
        )
        return batch

    @property
    def name(self) -> str:
        return "OpenFlights"
