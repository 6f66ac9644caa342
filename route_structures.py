# Defines the standardized, internal data structures for the routes client.

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cached_property
from typing import TypeVar

import polyline_codec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoCoord:
    """
    A pair of latitude and longitude coordinates, stored as degrees.

    The latitude is clamped to [-90.0, 90.0] and the longitude is
    normalized to the half-open interval [-180.0, 180.0).
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        latitude = min(max(float(self.latitude), -90.0), 90.0)
        longitude = float(self.longitude)
        if not -180.0 <= longitude < 180.0:
            longitude = (longitude + 180.0) % 360.0 - 180.0
        object.__setattr__(self, 'latitude', latitude)
        object.__setattr__(self, 'longitude', longitude)


@dataclass(frozen=True)
class GeoCoordBounds:
    """
    A latitude/longitude aligned rectangle.

    When southwest.longitude is greater than northeast.longitude the box
    crosses the antimeridian and covers [southwest.longitude, 180) plus
    [-180, northeast.longitude].
    """
    southwest: GeoCoord
    northeast: GeoCoord

    def __post_init__(self):
        if self.southwest.latitude > self.northeast.latitude:
            raise ValueError(
                f"Southwest latitude {self.southwest.latitude} is north of "
                f"northeast latitude {self.northeast.latitude}.")

    def contains(self, point: GeoCoord) -> bool:
        """Returns whether the rectangle contains the given point."""
        return self._contains_latitude(point.latitude) and self._contains_longitude(point.longitude)

    def _contains_latitude(self, lat: float) -> bool:
        return self.southwest.latitude <= lat <= self.northeast.latitude

    def _contains_longitude(self, lng: float) -> bool:
        if self.southwest.longitude <= self.northeast.longitude:
            return self.southwest.longitude <= lng <= self.northeast.longitude
        return self.southwest.longitude <= lng or lng <= self.northeast.longitude


# --- Enumerations ---
# Members are keyed by the identifier the service sends on the wire.

class TravelMode(str, Enum):
    """Travel modes accepted in a request and reported on a step."""
    BICYCLE = 'BICYCLE'
    DRIVE = 'DRIVE'
    TRANSIT = 'TRANSIT'
    WALK = 'WALK'
    TWO_WHEELER = 'TWO_WHEELER'

    def __str__(self) -> str:
        return self.value


class DirectionsStatus(str, Enum):
    OK = 'OK'
    NOT_FOUND = 'NOT_FOUND'
    ZERO_RESULTS = 'ZERO_RESULTS'
    MAX_WAYPOINTS_EXCEEDED = 'MAX_WAYPOINTS_EXCEEDED'
    MAX_ROUTE_LENGTH_EXCEEDED = 'MAX_ROUTE_LENGTH_EXCEEDED'
    INVALID_REQUEST = 'INVALID_REQUEST'
    OVER_DAILY_LIMIT = 'OVER_DAILY_LIMIT'
    OVER_QUERY_LIMIT = 'OVER_QUERY_LIMIT'
    REQUEST_DENIED = 'REQUEST_DENIED'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'

    def __str__(self) -> str:
        return self.value


class VehicleType(str, Enum):
    """Vehicle types used by transit lines."""
    BUS = 'BUS'
    CABLE_CAR = 'CABLE_CAR'
    COMMUTER_TRAIN = 'COMMUTER_TRAIN'
    FERRY = 'FERRY'
    FUNICULAR = 'FUNICULAR'
    GONDOLA_LIFT = 'GONDOLA_LIFT'
    HEAVY_RAIL = 'HEAVY_RAIL'
    HIGH_SPEED_TRAIN = 'HIGH_SPEED_TRAIN'
    INTERCITY_BUS = 'INTERCITY_BUS'
    LONG_DISTANCE_TRAIN = 'LONG_DISTANCE_TRAIN'
    METRO_RAIL = 'METRO_RAIL'
    MONORAIL = 'MONORAIL'
    OTHER = 'OTHER'
    RAIL = 'RAIL'
    SHARE_TAXI = 'SHARE_TAXI'
    SUBWAY = 'SUBWAY'
    TRAM = 'TRAM'
    TROLLEYBUS = 'TROLLEYBUS'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownEnumValue:
    """An identifier the service sent that is not in the known set; kept verbatim."""
    enum_name: str
    value: str

    def __str__(self) -> str:
        return self.value


E = TypeVar('E', bound=Enum)


def parse_enum(enum_cls: type[E], raw: str | None) -> E | UnknownEnumValue | None:
    """Maps a raw identifier to the matching member, or an UnknownEnumValue."""
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning(f"Unrecognized {enum_cls.__name__} value: {raw!r}")
        return UnknownEnumValue(enum_name=enum_cls.__name__, value=str(raw))


# --- Response value objects ---

@dataclass(frozen=True)
class Distance:
    text: str | None = None
    value: float | None = None  # meters


@dataclass(frozen=True)
class Duration:
    text: str | None = None
    value: float | None = None  # seconds


@dataclass(frozen=True)
class Time:
    """An arrival or departure time, as reported for transit."""
    text: str | None = None
    time_zone: str | None = None
    value: datetime | None = None


@dataclass(frozen=True)
class Fare:
    text: str | None = None
    currency: str | None = None
    value: float | None = None


@dataclass(frozen=True)
class TransitAgency:
    name: str | None = None
    phone: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class Vehicle:
    name: str | None = None
    type: VehicleType | UnknownEnumValue | None = None
    icon: str | None = None
    local_icon: str | None = None


@dataclass(frozen=True)
class TransitStop:
    name: str | None = None
    location: GeoCoord | None = None


@dataclass(frozen=True)
class TransitLine:
    name: str | None = None
    short_name: str | None = None
    color: str | None = None
    agencies: tuple[TransitAgency, ...] | None = None
    url: str | None = None
    icon: str | None = None
    text_color: str | None = None
    vehicle: Vehicle | None = None


@dataclass(frozen=True)
class TransitDetails:
    """Transit-specific information attached to a step."""
    arrival_stop: TransitStop | None = None
    departure_stop: TransitStop | None = None
    arrival_time: Time | None = None
    departure_time: Time | None = None
    headsign: str | None = None
    headway: float | None = None  # seconds between departures
    line: TransitLine | None = None
    num_stops: float | None = None
    trip_short_name: str | None = None


@dataclass(frozen=True)
class GeocodedWaypoint:
    geocoder_status: str | None = None
    partial_match: bool = False
    place_id: str | None = None
    types: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ViaWaypoint:
    location: GeoCoord | None = None
    step_index: int | None = None
    step_interpolation: float | None = None


@dataclass(frozen=True)
class Step:
    """The smallest navigable unit of a leg: one instruction."""
    start_location: GeoCoord | None = None
    instruction: str | None = None
    maneuver: str | None = None
    end_location: GeoCoord | None = None
    distance: Distance | None = None
    duration: Duration | None = None
    travel_mode: TravelMode | UnknownEnumValue | None = None
    transit_details: TransitDetails | None = None


@dataclass(frozen=True)
class Leg:
    """The portion of a route between two consecutive waypoints."""
    steps: tuple[Step, ...] = ()
    distance: Distance | None = None
    duration: Duration | None = None
    start_address: str | None = None
    end_address: str | None = None
    start_location: GeoCoord | None = None
    end_location: GeoCoord | None = None
    via_waypoints: tuple[ViaWaypoint, ...] | None = None


@dataclass(frozen=True)
class Route:
    legs: tuple[Leg, ...] = ()
    bounds: GeoCoordBounds | None = None
    copyrights: str | None = None
    overview_polyline: str | None = None
    summary: str | None = None
    description: str | None = None
    warnings: tuple[str, ...] | None = None
    waypoint_order: tuple[float, ...] | None = None
    fare: Fare | None = None
    distance: Distance | None = None
    duration: Duration | None = None

    @cached_property
    def overview_path(self) -> tuple[GeoCoord, ...] | None:
        """The decoded overview polyline. Decoded on first access only."""
        if not self.overview_polyline:
            return None
        return tuple(GeoCoord(lat, lng) for lat, lng in polyline_codec.decode(self.overview_polyline))


@dataclass(frozen=True)
class DirectionsResult:
    """The typed form of one routes response."""
    routes: tuple[Route, ...] = ()
    geocoded_waypoints: tuple[GeocodedWaypoint, ...] | None = None
    status: DirectionsStatus | UnknownEnumValue | None = None
    available_travel_modes: tuple[TravelMode | UnknownEnumValue, ...] | None = None
    error_message: str | None = None
