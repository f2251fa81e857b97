"""
Normalized ingestion frames using Pandera.

Defines the contract between the bulk data provider and the record store.
Schema validation happens once per frame at the boundary, not per-row.
"""

from dataclasses import dataclass

import pandas as pd
import pandera as pa
from pandera.typing import DataFrame, Series


class AirlineFrameSchema(pa.DataFrameModel):
    """Airline rows after identity filtering and field normalization."""

    id: Series[int] = pa.Field(nullable=False, description="OpenFlights airline ID")
    code: Series[str] = pa.Field(
        nullable=False,
        description="Upper-case IATA code, empty string when absent",
    )
    name: Series[str] = pa.Field(nullable=False)
    country: Series[str] = pa.Field(nullable=False)
    active: Series[bool] = pa.Field(nullable=False)

    class Config:
        strict = "filter"
        coerce = True
        name = "AirlineFrameSchema"


class AirportFrameSchema(pa.DataFrameModel):
    """Airport rows after identity filtering and field normalization."""

    id: Series[int] = pa.Field(nullable=False, description="OpenFlights airport ID")
    code: Series[str] = pa.Field(
        nullable=False,
        description="Upper-case IATA code, empty string when absent",
    )
    name: Series[str] = pa.Field(nullable=False)
    city: Series[str] = pa.Field(nullable=False)
    country: Series[str] = pa.Field(nullable=False)
    latitude: Series[float] = pa.Field(ge=-90, le=90)
    longitude: Series[float] = pa.Field(ge=-180, le=180)

    class Config:
        strict = "filter"
        coerce = True
        name = "AirportFrameSchema"


class RouteFrameSchema(pa.DataFrameModel):
    """Route rows whose three foreign keys all parsed as integers."""

    airline_id: Series[int] = pa.Field(nullable=False)
    source_airport_id: Series[int] = pa.Field(nullable=False)
    destination_airport_id: Series[int] = pa.Field(nullable=False)
    stops: Series[int] = pa.Field(nullable=False, description="0 means direct")

    class Config:
        strict = "filter"
        coerce = True
        name = "RouteFrameSchema"


AirlineDataFrame = DataFrame[AirlineFrameSchema]
AirportDataFrame = DataFrame[AirportFrameSchema]
RouteDataFrame = DataFrame[RouteFrameSchema]


@dataclass(frozen=True)
class IngestionBatch:
    """
    A validated frame plus the number of source rows filtered out.

    Attributes:
        kind: Record kind ("airlines", "airports" or "routes").
        frame: Frame validated against the kind's schema.
        skipped: Source rows dropped for a missing or malformed identity.
    """

    kind: str
    frame: pd.DataFrame
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.frame)
