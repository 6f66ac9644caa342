"""
Maps a decoded routes response (plain dicts and lists, as returned by
``response.json()``) onto the typed structures in route_structures.

Only the top-level ``routes`` list and the ``legs``/``steps`` lists inside
it are structural. Every other field is optional: when it is missing,
null or of the wrong JSON type the typed field is left as None rather
than filled with a default.

Field names follow the Directions API snake_case spelling; the camelCase
spelling used by the Routes API is accepted for the same fields.
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from route_errors import ShapeError
from route_structures import (
    DirectionsResult, DirectionsStatus, Distance, Duration, Fare, GeoCoord,
    GeoCoordBounds, GeocodedWaypoint, Leg, Route, Step, Time, TransitAgency,
    TransitDetails, TransitLine, TransitStop, TravelMode, Vehicle, VehicleType,
    ViaWaypoint, parse_enum,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Protobuf JSON durations, e.g. "165s" or "0.5s".
_DURATION_RE = re.compile(r'^(-?\d+(?:\.\d+)?)s$')


# --- Primitive helpers ---

def _get(data: Mapping, *keys: str) -> Any:
    """Returns the first non-null value found under any of the given keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _mapping(value: Any) -> Mapping | None:
    return value if isinstance(value, Mapping) else None


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _number(value: Any, allow_text: bool = False) -> float | None:
    """Normalizes a JSON int or float to float. Booleans are not numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if allow_text and isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _integer(value: Any) -> int | None:
    number = _number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _strings(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(item for item in value if isinstance(item, str))


def _objects(value: Any, mapper: Callable[[Mapping], T]) -> tuple[T, ...] | None:
    """Maps an optional list of objects, dropping entries that are not objects."""
    if not isinstance(value, list):
        return None
    return tuple(mapper(item) for item in value if isinstance(item, Mapping))


def _required_objects(data: Mapping, key: str, mapper: Callable[[Mapping], T]) -> tuple[T, ...]:
    """Maps one of the structural lists (legs, steps). Absent means empty."""
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ShapeError(f"Expected '{key}' to be a list, got {type(value).__name__}.")

    items = []
    for position, item in enumerate(value):
        if not isinstance(item, Mapping):
            raise ShapeError(
                f"Expected '{key}[{position}]' to be an object, got {type(item).__name__}.")
        items.append(mapper(item))
    return tuple(items)


# --- Leaf objects ---

def map_location(value: Any) -> GeoCoord | None:
    """
    Reads a coordinate from {lat, lng}, {latitude, longitude} or
    {latLng: {latitude, longitude}}.
    """
    data = _mapping(value)
    if data is None:
        return None
    if 'latLng' in data:
        return map_location(data['latLng'])

    lat = _number(_get(data, 'lat', 'latitude'), allow_text=True)
    lng = _number(_get(data, 'lng', 'longitude'), allow_text=True)
    if lat is None or lng is None:
        return None
    return GeoCoord(lat, lng)


def map_bounds(value: Any) -> GeoCoordBounds | None:
    data = _mapping(value)
    if data is None:
        return None
    southwest = map_location(_get(data, 'southwest', 'low'))
    northeast = map_location(_get(data, 'northeast', 'high'))
    if southwest is None or northeast is None:
        return None
    if southwest.latitude > northeast.latitude:
        logger.debug(f"Dropping bounds with inverted latitudes: {southwest} / {northeast}")
        return None
    return GeoCoordBounds(southwest=southwest, northeast=northeast)


def map_distance(value: Any) -> Distance | None:
    if isinstance(value, Mapping):
        return Distance(text=_string(value.get('text')), value=_number(value.get('value')))
    meters = _number(value)
    if meters is not None:
        return Distance(value=meters)
    return None


def map_duration(value: Any) -> Duration | None:
    """Reads {text, value}, a bare number of seconds or a "123s" string."""
    if isinstance(value, Mapping):
        return Duration(text=_string(value.get('text')), value=_number(value.get('value')))
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match:
            return Duration(value=float(match.group(1)))
        return None
    seconds = _number(value)
    if seconds is not None:
        return Duration(value=seconds)
    return None


def map_time(data: Mapping) -> Time:
    """The value is Unix epoch seconds; text and time zone are kept as sent."""
    seconds = _number(data.get('value'))
    value = None
    if seconds is not None:
        try:
            value = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Time value {seconds!r} is outside the datetime range")
    return Time(
        text=_string(data.get('text')),
        time_zone=_string(_get(data, 'time_zone', 'timeZone')),
        value=value,
    )


def map_fare(data: Mapping) -> Fare:
    return Fare(
        text=_string(data.get('text')),
        currency=_string(_get(data, 'currency', 'currencyCode')),
        value=_number(data.get('value')),
    )


def map_transit_agency(data: Mapping) -> TransitAgency:
    return TransitAgency(
        name=_string(data.get('name')),
        phone=_string(_get(data, 'phone', 'phoneNumber')),
        url=_string(_get(data, 'url', 'uri')),
    )


def map_vehicle(data: Mapping) -> Vehicle:
    return Vehicle(
        name=_vehicle_name(data.get('name')),
        type=parse_enum(VehicleType, _string(data.get('type'))),
        icon=_string(_get(data, 'icon', 'iconUri')),
        local_icon=_string(_get(data, 'local_icon', 'localIconUri')),
    )


def _vehicle_name(value: Any) -> str | None:
    # The Routes API wraps localized names as {"text": ..., "languageCode": ...}.
    if isinstance(value, Mapping):
        return _string(value.get('text'))
    return _string(value)


def map_transit_stop(data: Mapping) -> TransitStop:
    return TransitStop(
        name=_string(data.get('name')),
        location=map_location(data.get('location')),
    )


def map_transit_line(data: Mapping) -> TransitLine:
    vehicle = _mapping(data.get('vehicle'))
    return TransitLine(
        name=_string(data.get('name')),
        short_name=_string(_get(data, 'short_name', 'nameShort')),
        color=_string(data.get('color')),
        agencies=_objects(data.get('agencies'), map_transit_agency),
        url=_string(_get(data, 'url', 'uri')),
        icon=_string(_get(data, 'icon', 'iconUri')),
        text_color=_string(_get(data, 'text_color', 'textColor')),
        vehicle=map_vehicle(vehicle) if vehicle is not None else None,
    )


def map_transit_details(data: Mapping) -> TransitDetails:
    arrival_stop = _mapping(_get(data, 'arrival_stop', 'arrivalStop'))
    departure_stop = _mapping(_get(data, 'departure_stop', 'departureStop'))
    arrival_time = _mapping(_get(data, 'arrival_time', 'arrivalTime'))
    departure_time = _mapping(_get(data, 'departure_time', 'departureTime'))
    line = _mapping(_get(data, 'line', 'transitLine'))

    return TransitDetails(
        arrival_stop=map_transit_stop(arrival_stop) if arrival_stop is not None else None,
        departure_stop=map_transit_stop(departure_stop) if departure_stop is not None else None,
        arrival_time=map_time(arrival_time) if arrival_time is not None else None,
        departure_time=map_time(departure_time) if departure_time is not None else None,
        headsign=_string(data.get('headsign')),
        headway=_number(data.get('headway')),
        line=map_transit_line(line) if line is not None else None,
        num_stops=_number(_get(data, 'num_stops', 'stopCount')),
        trip_short_name=_string(_get(data, 'trip_short_name', 'tripShortText')),
    )


def map_geocoded_waypoint(data: Mapping) -> GeocodedWaypoint:
    return GeocodedWaypoint(
        geocoder_status=_string(data.get('geocoder_status')),
        # The service sends this flag as the string token "true", not a JSON boolean.
        partial_match=data.get('partial_match') == 'true',
        place_id=_string(_get(data, 'place_id', 'placeId')),
        types=_strings(data.get('types')),
    )


def map_via_waypoint(data: Mapping) -> ViaWaypoint:
    return ViaWaypoint(
        location=map_location(data.get('location')),
        step_index=_integer(data.get('step_index')),
        step_interpolation=_number(data.get('step_interpolation')),
    )


# --- Route graph ---

def map_step(data: Mapping) -> Step:
    instruction = _get(data, 'navigationInstruction', 'html_instructions', 'instructions')
    maneuver = _string(data.get('maneuver'))
    if isinstance(instruction, Mapping):
        maneuver = _string(instruction.get('maneuver')) or maneuver
        instruction = instruction.get('instructions')

    transit = _mapping(_get(data, 'transit_details', 'transitDetails'))

    return Step(
        start_location=map_location(_get(data, 'start_location', 'startLocation')),
        instruction=_string(instruction),
        maneuver=maneuver,
        end_location=map_location(_get(data, 'end_location', 'endLocation')),
        distance=map_distance(_get(data, 'distance', 'distanceMeters')),
        duration=map_duration(_get(data, 'duration', 'staticDuration')),
        travel_mode=parse_enum(TravelMode, _string(_get(data, 'travel_mode', 'travelMode'))),
        transit_details=map_transit_details(transit) if transit is not None else None,
    )


def map_leg(data: Mapping) -> Leg:
    return Leg(
        steps=_required_objects(data, 'steps', map_step),
        distance=map_distance(_get(data, 'distance', 'distanceMeters')),
        duration=map_duration(_get(data, 'duration', 'staticDuration')),
        start_address=_string(data.get('start_address')),
        end_address=_string(data.get('end_address')),
        start_location=map_location(_get(data, 'start_location', 'startLocation')),
        end_location=map_location(_get(data, 'end_location', 'endLocation')),
        via_waypoints=_objects(_get(data, 'via_waypoint', 'via_waypoints'), map_via_waypoint),
    )


def _overview_polyline(data: Mapping) -> str | None:
    polyline = _mapping(_get(data, 'overview_polyline', 'polyline'))
    if polyline is None:
        return None
    return _string(_get(polyline, 'points', 'encodedPolyline'))


def map_route(data: Mapping) -> Route:
    waypoint_order = data.get('waypoint_order', data.get('optimizedIntermediateWaypointIndex'))
    fare = _mapping(data.get('fare'))

    return Route(
        legs=_required_objects(data, 'legs', map_leg),
        bounds=map_bounds(_get(data, 'bounds', 'viewport')),
        copyrights=_string(data.get('copyrights')),
        overview_polyline=_overview_polyline(data),
        summary=_string(data.get('summary')),
        description=_string(data.get('description')),
        warnings=_strings(data.get('warnings')),
        waypoint_order=(
            tuple(n for n in map(_number, waypoint_order) if n is not None)
            if isinstance(waypoint_order, list) else None),
        fare=map_fare(fare) if fare is not None else None,
        distance=map_distance(_get(data, 'distance', 'distanceMeters')),
        duration=map_duration(_get(data, 'duration', 'staticDuration')),
    )


def map_directions_result(document: Any) -> DirectionsResult:
    """
    Builds the typed result for a whole response document.

    Raises ShapeError when the document is not an object or its 'routes'
    entry is missing or not a list. Nothing is returned in that case.
    """
    if not isinstance(document, Mapping):
        raise ShapeError(f"Expected the response to be an object, got {type(document).__name__}.")
    if 'routes' not in document:
        raise ShapeError("Response has no 'routes' entry.")
    if not isinstance(document['routes'], list):
        raise ShapeError(
            f"Expected 'routes' to be a list, got {type(document['routes']).__name__}.")

    modes = _strings(document.get('available_travel_modes'))
    result = DirectionsResult(
        routes=_required_objects(document, 'routes', map_route),
        geocoded_waypoints=_objects(
            document.get('geocoded_waypoints'), map_geocoded_waypoint),
        status=parse_enum(DirectionsStatus, _string(document.get('status'))),
        available_travel_modes=(
            tuple(parse_enum(TravelMode, mode) for mode in modes) if modes is not None else None),
        error_message=_string(document.get('error_message')),
    )
    logger.debug(f"Mapped response with {len(result.routes)} route(s).")
    return result
