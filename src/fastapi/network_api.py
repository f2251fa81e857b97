import logging
import threading
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.flight_network.application import FlightNetwork
from src.flight_network.config import Config, setup_logging
from src.flight_network.exceptions import FlightNetworkError
from src.flight_network.schemas.records import AirlineRoutes, AirportRoutes

logger = logging.getLogger(__name__)

# Taxonomy code -> HTTP status
STATUS_BY_ERROR_CODE = {
    "invalid-argument": 400,
    "not-found": 404,
    "conflict": 409,
    "unknown-reference": 400,
}

_network: Optional[FlightNetwork] = None
_network_lock = threading.Lock()


def get_network() -> FlightNetwork:
    """Build and load the shared FlightNetwork on first use."""
    global _network
    if _network is None:
        with _network_lock:
            if _network is None:
                setup_logging(Config.LOG_LEVEL)
                network = FlightNetwork()
                network.load()
                logger.info("Serving %s", network.stats())
                _network = network
    return _network


app = FastAPI(title="Flight Network API")


# --- Pydantic Schemas (The JSON Contract) ---
# Records keep their code in `code`; the wire name is `iata`.


class AirlineSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str = Field(validation_alias=AliasChoices("iata", "code"))
    name: str


class AirlineSchema(AirlineSummarySchema):
    country: str
    active: bool


class AirportSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str = Field(validation_alias=AliasChoices("iata", "code"))
    name: str
    city: str
    country: str


class AirportSchema(AirportSummarySchema):
    latitude: float
    longitude: float


class RouteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    airline_id: int
    src_id: int = Field(validation_alias=AliasChoices("src_id", "source_airport_id"))
    dst_id: int = Field(
        validation_alias=AliasChoices("dst_id", "destination_airport_id")
    )
    stops: int


class AirportRouteCountSchema(BaseModel):
    airport_id: int
    iata: str
    name: str
    city: str
    country: str
    route_count: int


class AirlineRouteCountSchema(BaseModel):
    airline_id: int
    iata: str
    name: str
    country: str
    route_count: int


class AirlineRoutesResponse(BaseModel):
    airline: AirlineSummarySchema
    airports: List[AirportRouteCountSchema]

    @classmethod
    def from_result(cls, result: AirlineRoutes) -> "AirlineRoutesResponse":
        return cls(
            airline=AirlineSummarySchema.model_validate(result.airline),
            airports=[
                AirportRouteCountSchema(
                    airport_id=entry.airport.id,
                    iata=entry.airport.code,
                    name=entry.airport.name,
                    city=entry.airport.city,
                    country=entry.airport.country,
                    route_count=entry.route_count,
                )
                for entry in result.airports
            ],
        )


class AirportRoutesResponse(BaseModel):
    airport: AirportSummarySchema
    airlines: List[AirlineRouteCountSchema]

    @classmethod
    def from_result(cls, result: AirportRoutes) -> "AirportRoutesResponse":
        return cls(
            airport=AirportSummarySchema.model_validate(result.airport),
            airlines=[
                AirlineRouteCountSchema(
                    airline_id=entry.airline.id,
                    iata=entry.airline.code,
                    name=entry.airline.name,
                    country=entry.airline.country,
                    route_count=entry.route_count,
                )
                for entry in result.airlines
            ],
        )


class AirlineListResponse(BaseModel):
    airlines: List[AirlineSchema]


class AirportListResponse(BaseModel):
    airports: List[AirportSchema]


class OneHopItinerarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    via: AirportSummarySchema
    leg1_miles: float
    leg2_miles: float
    total_miles: float  # Captures @property
    airline1: Optional[AirlineSummarySchema] = None
    airline2: Optional[AirlineSummarySchema] = None


class OneHopResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source: AirportSummarySchema
    destination: AirportSummarySchema
    routes: List[OneHopItinerarySchema] = Field(
        validation_alias=AliasChoices("routes", "itineraries")
    )


class HealthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str = "ok"
    airlines: int
    airports: int
    routes: int
    source_airports: int


class AirlineAddRequest(BaseModel):
    id: int
    iata: str
    name: str
    country: Optional[str] = None
    active: bool = True


class AirlineUpdateRequest(BaseModel):
    id: int
    iata: Optional[str] = None
    name: Optional[str] = None
    country: Optional[str] = None
    active: Optional[bool] = None


class AirportAddRequest(BaseModel):
    id: int
    iata: str
    name: str
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0


class AirportUpdateRequest(BaseModel):
    id: int
    iata: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RouteAddRequest(BaseModel):
    airline_id: int
    src_id: int
    dst_id: int
    stops: Optional[int] = None


class AirlineMutationResponse(BaseModel):
    status: str = "ok"
    message: str
    airline: AirlineSchema


class AirportMutationResponse(BaseModel):
    status: str = "ok"
    message: str
    airport: AirportSchema


class RouteMutationResponse(BaseModel):
    status: str = "ok"
    message: str
    route: RouteSchema


# --- Error Mapping ---


@app.exception_handler(FlightNetworkError)
async def flight_network_error_handler(request: Request, exc: FlightNetworkError):
    status_code = STATUS_BY_ERROR_CODE.get(exc.code, 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(problems), "error": "invalid-argument"},
    )


# --- API Endpoints ---


@app.get("/health", response_model=HealthResponse)
def health(network: FlightNetwork = Depends(get_network)):
    return HealthResponse.model_validate(network.stats())


@app.get("/airline", response_model=AirlineSchema)
def get_airline(iata: Optional[str] = None, network: FlightNetwork = Depends(get_network)):
    return AirlineSchema.model_validate(network.airline(iata))


@app.get("/airport", response_model=AirportSchema)
def get_airport(iata: Optional[str] = None, network: FlightNetwork = Depends(get_network)):
    return AirportSchema.model_validate(network.airport(iata))


@app.get("/airline-routes", response_model=AirlineRoutesResponse)
def get_airline_routes(
    iata: Optional[str] = None, network: FlightNetwork = Depends(get_network)
):
    return AirlineRoutesResponse.from_result(network.airline_routes(iata))


@app.get("/airport-routes", response_model=AirportRoutesResponse)
def get_airport_routes(
    iata: Optional[str] = None, network: FlightNetwork = Depends(get_network)
):
    return AirportRoutesResponse.from_result(network.airport_routes(iata))


@app.get("/airlines-by-iata", response_model=AirlineListResponse)
def list_airlines(network: FlightNetwork = Depends(get_network)):
    return AirlineListResponse(
        airlines=[AirlineSchema.model_validate(a) for a in network.airlines_by_code()]
    )


@app.get("/airports-by-iata", response_model=AirportListResponse)
def list_airports(network: FlightNetwork = Depends(get_network)):
    return AirportListResponse(
        airports=[AirportSchema.model_validate(a) for a in network.airports_by_code()]
    )


@app.post("/airline-add", response_model=AirlineMutationResponse)
def add_airline(request: AirlineAddRequest, network: FlightNetwork = Depends(get_network)):
    airline = network.add_airline(
        request.id,
        request.iata,
        request.name,
        country=request.country,
        active=request.active,
    )
    return AirlineMutationResponse(
        message="Airline added in memory",
        airline=AirlineSchema.model_validate(airline),
    )


@app.post("/airline-update", response_model=AirlineMutationResponse)
def update_airline(
    request: AirlineUpdateRequest, network: FlightNetwork = Depends(get_network)
):
    airline = network.update_airline(
        request.id,
        code=request.iata,
        name=request.name,
        country=request.country,
        active=request.active,
    )
    return AirlineMutationResponse(
        message="Airline updated in memory",
        airline=AirlineSchema.model_validate(airline),
    )


@app.post("/airport-add", response_model=AirportMutationResponse)
def add_airport(request: AirportAddRequest, network: FlightNetwork = Depends(get_network)):
    airport = network.add_airport(
        request.id,
        request.iata,
        request.name,
        city=request.city,
        country=request.country,
        latitude=request.latitude,
        longitude=request.longitude,
    )
    return AirportMutationResponse(
        message="Airport added in memory",
        airport=AirportSchema.model_validate(airport),
    )


@app.post("/airport-update", response_model=AirportMutationResponse)
def update_airport(
    request: AirportUpdateRequest, network: FlightNetwork = Depends(get_network)
):
    airport = network.update_airport(
        request.id,
        code=request.iata,
        name=request.name,
        city=request.city,
        country=request.country,
        latitude=request.latitude,
        longitude=request.longitude,
    )
    return AirportMutationResponse(
        message="Airport updated in memory",
        airport=AirportSchema.model_validate(airport),
    )


@app.post("/route-add", response_model=RouteMutationResponse)
def add_route(request: RouteAddRequest, network: FlightNetwork = Depends(get_network)):
    route = network.add_route(
        request.airline_id,
        request.src_id,
        request.dst_id,
        stops=request.stops,
    )
    return RouteMutationResponse(
        message="Route added in memory",
        route=RouteSchema.model_validate(route),
    )


@app.get(
    "/one-hop",
    response_model=OneHopResponse,
    response_model_exclude_none=True,
)
def one_hop(
    src: Optional[str] = None,
    dst: Optional[str] = None,
    network: FlightNetwork = Depends(get_network),
):
    """
    One-stop itineraries from src to dst over direct routes, shortest first.

    An itinerary leg whose airline no longer resolves omits that airline.
    """
    return OneHopResponse.model_validate(network.one_hop(src, dst))
