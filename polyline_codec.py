"""
Encoder and decoder for Google's encoded polyline format.

Each coordinate is stored as a delta from the previous point, scaled by 1e5,
zig-zag encoded and split into 5-bit chunks offset by 63. Latitude comes
before longitude. See
https://developers.google.com/maps/documentation/utilities/polylinealgorithm
"""

from collections.abc import Iterable, Iterator

from route_errors import DecodeError

LatLng = tuple[float, float]

PRECISION = 1e5


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    """Reads one zig-zag varint starting at index. Returns (value, next_index)."""
    result, shift = 0, 0
    while True:
        if index >= len(encoded):
            raise DecodeError(
                f"Polyline ends in the middle of a value at index {index}", index=index)
        byte = ord(encoded[index]) - 63
        if byte < 0 or byte > 0x3f:
            raise DecodeError(
                f"Invalid polyline character {encoded[index]!r} at index {index}", index=index)
        index += 1
        result |= (byte & 0x1f) << shift
        shift += 5
        if byte < 0x20:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index


def decode_iter(encoded: str) -> Iterator[LatLng]:
    """Yields the (lat, lng) pairs of an encoded polyline in order."""
    index, lat, lng = 0, 0, 0

    while index < len(encoded):
        d_lat, index = _decode_value(encoded, index)
        if index >= len(encoded):
            raise DecodeError(
                f"Polyline has a latitude without a longitude at index {index}", index=index)
        d_lng, index = _decode_value(encoded, index)

        # Accumulate in integer units so rounding error does not build up.
        lat += d_lat
        lng += d_lng
        yield lat / PRECISION, lng / PRECISION


def decode(encoded: str) -> list[LatLng]:
    """Decode a polyline string into a list of (lat, lng) coordinates."""
    if not encoded:
        return []
    return list(decode_iter(encoded))


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)

    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1f)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return ''.join(chunks)


def _lat_lng(point) -> LatLng:
    if hasattr(point, 'latitude') and hasattr(point, 'longitude'):
        return point.latitude, point.longitude
    lat, lng = point
    return lat, lng


def encode(coordinates: Iterable) -> str:
    """
    Encode points into a polyline string, rounding to 5 decimal places.

    Each point is either a (lat, lng) pair or an object with latitude and
    longitude attributes, such as the GeoCoord values of Route.overview_path.
    """
    encoded = []
    prev_lat, prev_lng = 0, 0

    for point in coordinates:
        lat, lng = _lat_lng(point)
        lat_int = int(round(lat * PRECISION))
        lng_int = int(round(lng * PRECISION))

        encoded.append(_encode_value(lat_int - prev_lat))
        encoded.append(_encode_value(lng_int - prev_lng))

        prev_lat, prev_lng = lat_int, lng_int

    return ''.join(encoded)
