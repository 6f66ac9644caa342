"""
Tests for the encoded polyline codec.
"""

from unittest import TestCase

import polyline_codec
from route_errors import DecodeError
from route_structures import GeoCoord, Route


# Published example from the polyline algorithm documentation.
CANONICAL_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
CANONICAL_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]


class DecodeTests(TestCase):
    """Tests for polyline_codec.decode."""

    def assertPointsAlmostEqual(self, actual, expected):
        self.assertEqual(len(actual), len(expected))
        for (lat, lng), (exp_lat, exp_lng) in zip(actual, expected):
            self.assertAlmostEqual(lat, exp_lat, places=5)
            self.assertAlmostEqual(lng, exp_lng, places=5)

    def test_decode_empty_string(self):
        """Test that an empty polyline decodes to no points."""
        self.assertEqual(polyline_codec.decode(""), [])

    def test_decode_canonical_vector(self):
        """Test decoding the published example."""
        points = polyline_codec.decode(CANONICAL_POLYLINE)
        self.assertPointsAlmostEqual(points, CANONICAL_POINTS)

    def test_decode_first_two_points(self):
        """Test that the first two points are (38.5, -120.2) and (40.7, -120.95)."""
        points = polyline_codec.decode(CANONICAL_POLYLINE)
        self.assertPointsAlmostEqual(points[:2], [(38.5, -120.2), (40.7, -120.95)])

    def test_decode_single_point(self):
        """Test decoding a polyline holding one point."""
        self.assertPointsAlmostEqual(polyline_codec.decode("_p~iF~ps|U"), [(38.5, -120.2)])

    def test_decode_iter_is_lazy(self):
        """Test that decode_iter yields points one at a time."""
        points = polyline_codec.decode_iter(CANONICAL_POLYLINE)
        lat, lng = next(points)
        self.assertAlmostEqual(lat, 38.5)
        self.assertAlmostEqual(lng, -120.2)

    def test_truncated_mid_value(self):
        """Test that a string ending inside a continuation group is rejected."""
        with self.assertRaises(DecodeError) as context:
            polyline_codec.decode(CANONICAL_POLYLINE[:-1])
        self.assertEqual(context.exception.index, len(CANONICAL_POLYLINE) - 1)

    def test_truncated_inside_first_value(self):
        """Test truncation before the first latitude is complete."""
        with self.assertRaises(DecodeError):
            polyline_codec.decode("_p~i")

    def test_latitude_without_longitude(self):
        """Test that a trailing latitude with no longitude is rejected."""
        with self.assertRaises(DecodeError):
            polyline_codec.decode("_p~iF")

    def test_invalid_character(self):
        """Test that characters outside the encoding alphabet are rejected."""
        with self.assertRaises(DecodeError) as context:
            polyline_codec.decode("_p~iF ps|U")
        self.assertEqual(context.exception.index, 5)

    def test_decode_error_is_value_error(self):
        """Test that callers catching ValueError also catch decode errors."""
        with self.assertRaises(ValueError):
            polyline_codec.decode("?")


class EncodeTests(TestCase):
    """Tests for polyline_codec.encode."""

    def test_encode_empty(self):
        """Test that no points encode to an empty string."""
        self.assertEqual(polyline_codec.encode([]), "")

    def test_encode_canonical_vector(self):
        """Test encoding the published example."""
        self.assertEqual(polyline_codec.encode(CANONICAL_POINTS), CANONICAL_POLYLINE)

    def test_decode_encode_symmetry(self):
        """Test that decoding an encoded path gives back the points within 1e-5."""
        path = [
            (6.5244, 3.3792),
            (6.600001, 3.450004),
            (-33.86882, 151.20929),
            (0.0, 0.0),
            (89.99999, -179.99999),
            (-89.99999, 179.99999),
        ]
        decoded = polyline_codec.decode(polyline_codec.encode(path))

        self.assertEqual(len(decoded), len(path))
        for (lat, lng), (exp_lat, exp_lng) in zip(decoded, path):
            self.assertLessEqual(abs(lat - exp_lat), 1e-5)
            self.assertLessEqual(abs(lng - exp_lng), 1e-5)

    def test_encode_geo_coords(self):
        """Test that points with latitude and longitude attributes encode like pairs."""
        points = [GeoCoord(lat, lng) for lat, lng in CANONICAL_POINTS]
        self.assertEqual(polyline_codec.encode(points), CANONICAL_POLYLINE)

    def test_encode_overview_path(self):
        """Test that a route's decoded overview path encodes back to its polyline."""
        route = Route(overview_polyline=CANONICAL_POLYLINE)
        self.assertEqual(polyline_codec.encode(route.overview_path), CANONICAL_POLYLINE)
