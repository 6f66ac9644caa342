# Command-line tool that asks the Routes API for directions and prints each step.

import argparse
import logging
import sys

from dotenv import load_dotenv

from route_adapters import DirectionsRequest, GoogleRoutesAdapter, RoutesAdapter, RoutesConfig
from route_errors import RoutesError
from route_structures import DirectionsResult, GeoCoord, TravelMode


def parse_coordinates(text: str) -> GeoCoord:
    """Parses a 'lat,lng' argument into a GeoCoord."""
    try:
        lat_text, lng_text = text.split(',')
        return GeoCoord(float(lat_text), float(lng_text))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"'{text}' is not a coordinate. Use the form LAT,LNG (e.g. 38.5,-120.2).")


def format_coordinates(coord: GeoCoord | None) -> str:
    if coord is None:
        return "-"
    return f"{coord.latitude:.5f},{coord.longitude:.5f}"


# --- Core Logic ---

def find_route(adapter: RoutesAdapter, request: DirectionsRequest) -> DirectionsResult:
    print(f"   > [Google] Requesting {request.travel_mode} directions "
          f"from {format_coordinates(request.origin)} to {format_coordinates(request.destination)}...")
    return adapter.get_route(request)


def display_results(result: DirectionsResult):
    """Formats and prints the steps of every route in the result."""
    if not result.routes:
        print("\nNo routes were returned for this request.")
        return

    for route_number, route in enumerate(result.routes, 1):
        title = f"Route {route_number}"
        if route.summary:
            title += f" via {route.summary}"
        print(f"\n{title}")

        for leg_number, leg in enumerate(route.legs, 1):
            print(f"  Leg {leg_number}: {len(leg.steps)} step(s)")

            header = "| #   | Start                  | Instruction"
            divider = "-" * 72
            print(header)
            print(divider)
            for step_number, step in enumerate(leg.steps, 1):
                print(f"| {step_number:<3} | "
                      f"{format_coordinates(step.start_location):<22} | "
                      f"{step.instruction or ''}")
            print(divider)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Route Finder: print the turn-by-turn steps between two coordinates.")
    # Options rather than positionals: argparse reads '-33.8,151.2' as a flag.
    parser.add_argument('-o', '--origin', required=True, type=parse_coordinates,
                        help="Origin as LAT,LNG. Use --origin=-33.87,151.21 for a negative latitude.")
    parser.add_argument('-d', '--destination', required=True, type=parse_coordinates,
                        help="Destination as LAT,LNG. Use --destination=-37.81,144.96 for a negative latitude.")
    parser.add_argument('-m', '--mode', default=TravelMode.DRIVE.value,
                        choices=[mode.value for mode in TravelMode],
                        help="Travel mode (default: DRIVE).")
    parser.add_argument('--alternatives', action='store_true',
                        help="Ask for alternative routes as well.")
    parser.add_argument('--avoid-tolls', action='store_true', help="Avoid toll roads.")
    parser.add_argument('--avoid-highways', action='store_true', help="Avoid highways.")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose mode to see the exact API calls being made.")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")

    request = DirectionsRequest(
        origin=args.origin,
        destination=args.destination,
        travel_mode=TravelMode(args.mode),
        compute_alternative_routes=args.alternatives,
        avoid_tolls=args.avoid_tolls,
        avoid_highways=args.avoid_highways,
    )

    try:
        adapter = GoogleRoutesAdapter(RoutesConfig.from_env())
        result = find_route(adapter, request)
    except RoutesError as e:
        print(f"FATAL ERROR: {e}")
        return 1

    display_results(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
