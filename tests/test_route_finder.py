"""
Tests for the route_finder command-line tool.
"""

import argparse
import io
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase
from unittest.mock import patch

import route_finder
from route_adapters import RoutesConfig
from route_errors import TransportError
from route_structures import DirectionsResult, GeoCoord, Leg, Route, Step, TravelMode


SAMPLE_RESULT = DirectionsResult(routes=(
    Route(summary='Third Mainland Bridge', legs=(
        Leg(steps=(
            Step(start_location=GeoCoord(6.5244, 3.3792), instruction='Head north'),
            Step(start_location=None, instruction=None),
        )),
    )),
))


class ParseCoordinatesTests(TestCase):

    def test_valid(self):
        self.assertEqual(route_finder.parse_coordinates('6.5244,3.3792'), GeoCoord(6.5244, 3.3792))

    def test_invalid(self):
        for text in ('6.5244', 'north,east', '1,2,3'):
            with self.assertRaises(argparse.ArgumentTypeError):
                route_finder.parse_coordinates(text)


class DisplayResultsTests(TestCase):

    def test_display_steps(self):
        """Test that every step is listed with its start and instruction."""
        output = io.StringIO()
        with redirect_stdout(output):
            route_finder.display_results(SAMPLE_RESULT)

        text = output.getvalue()
        self.assertIn('Route 1 via Third Mainland Bridge', text)
        self.assertIn('6.52440,3.37920', text)
        self.assertIn('Head north', text)
        self.assertIn('Leg 1: 2 step(s)', text)

    def test_display_no_routes(self):
        output = io.StringIO()
        with redirect_stdout(output):
            route_finder.display_results(DirectionsResult())

        self.assertIn('No routes', output.getvalue())


@patch('route_finder.load_dotenv')
@patch('route_finder.RoutesConfig.from_env')
class MainTests(TestCase):
    """Tests for route_finder.main."""

    def test_main_success(self, mock_from_env, mock_load_dotenv):
        mock_from_env.return_value = RoutesConfig(api_key='test-key')

        with patch('route_finder.GoogleRoutesAdapter.get_route', return_value=SAMPLE_RESULT) as mock_get_route:
            with redirect_stdout(io.StringIO()):
                exit_code = route_finder.main(
                    ['--origin', '6.5244,3.3792', '--destination', '7.3775,3.9470', '--mode', 'WALK', '--avoid-tolls'])

        self.assertEqual(exit_code, 0)
        request = mock_get_route.call_args[0][0]
        self.assertEqual(request.travel_mode, TravelMode.WALK)
        self.assertTrue(request.avoid_tolls)
        self.assertFalse(request.avoid_highways)
        self.assertEqual(request.destination, GeoCoord(7.3775, 3.947))

    def test_main_without_key(self, mock_from_env, mock_load_dotenv):
        """Test that a missing API key exits with an error instead of calling the API."""
        mock_from_env.return_value = RoutesConfig(api_key=None)
        output = io.StringIO()

        with patch('route_adapters.requests.post') as mock_post:
            with redirect_stdout(output):
                exit_code = route_finder.main(['-o', '6.5244,3.3792', '-d', '7.3775,3.9470'])

        self.assertEqual(exit_code, 1)
        self.assertIn('FATAL ERROR', output.getvalue())
        mock_post.assert_not_called()

    def test_main_transport_error(self, mock_from_env, mock_load_dotenv):
        mock_from_env.return_value = RoutesConfig(api_key='test-key')

        with patch('route_finder.GoogleRoutesAdapter.get_route',
                   side_effect=TransportError('503 (Service Unavailable)', status_code=503)):
            with redirect_stdout(io.StringIO()) as output:
                exit_code = route_finder.main(['-o', '6.5244,3.3792', '-d', '7.3775,3.9470'])

        self.assertEqual(exit_code, 1)
        self.assertIn('503', output.getvalue())

    def test_main_southern_hemisphere(self, mock_from_env, mock_load_dotenv):
        """Test that coordinates with a negative latitude are accepted."""
        mock_from_env.return_value = RoutesConfig(api_key='test-key')

        with patch('route_finder.GoogleRoutesAdapter.get_route', return_value=SAMPLE_RESULT) as mock_get_route:
            with redirect_stdout(io.StringIO()):
                exit_code = route_finder.main(
                    ['--origin=-33.8688,151.2093', '--destination=-37.8136,144.9631'])

        self.assertEqual(exit_code, 0)
        request = mock_get_route.call_args[0][0]
        self.assertEqual(request.origin, GeoCoord(-33.8688, 151.2093))
        self.assertEqual(request.destination, GeoCoord(-37.8136, 144.9631))

    def test_main_requires_both_points(self, mock_from_env, mock_load_dotenv):
        """Test that a missing destination is a usage error."""
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                route_finder.main(['--origin', '6.5244,3.3792'])

        self.assertEqual(context.exception.code, 2)
        mock_from_env.assert_not_called()
