# Contains the adapter classes for communicating with the Google Routes API.

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable

import requests
from dotenv import load_dotenv

from route_errors import ConfigurationError, ShapeError, TransportError
from route_mapper import map_directions_result
from route_structures import (
    DirectionsResult, DirectionsStatus, GeoCoord, TravelMode, UnknownEnumValue, parse_enum,
)

logger = logging.getLogger(__name__)

# --- API Configuration ---
ROUTES_API_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"

# Restricts the response to the two step fields the mapper actually reads.
DEFAULT_FIELD_MASK = "routes.legs.steps.startLocation,routes.legs.steps.navigationInstruction"


@dataclass(frozen=True)
class RoutesConfig:
    """Settings for one adapter instance."""
    api_key: str | None
    timeout: float | None = None
    field_mask: str = DEFAULT_FIELD_MASK
    url: str = ROUTES_API_URL

    @classmethod
    def from_env(cls) -> "RoutesConfig":
        """Reads GOOGLE_API_KEY, ROUTES_TIMEOUT and ROUTES_FIELD_MASK from the environment (and a .env file)."""
        load_dotenv()
        timeout = os.getenv("ROUTES_TIMEOUT")
        try:
            timeout_sec = float(timeout) if timeout else None
        except ValueError:
            raise ConfigurationError(
                f"ROUTES_TIMEOUT must be a number of seconds, got {timeout!r}.") from None
        return cls(
            api_key=os.getenv("GOOGLE_API_KEY"),
            timeout=timeout_sec,
            field_mask=os.getenv("ROUTES_FIELD_MASK") or DEFAULT_FIELD_MASK,
        )


@dataclass(frozen=True)
class DirectionsRequest:
    """A request for routes between two points."""
    origin: GeoCoord
    destination: GeoCoord
    travel_mode: TravelMode = TravelMode.DRIVE
    compute_alternative_routes: bool = False
    avoid_tolls: bool = False
    avoid_highways: bool = False
    language_code: str = "en-US"
    units: str = "METRIC"


def _waypoint(coord: GeoCoord) -> dict:
    return {
        'location': {
            'latLng': {
                'latitude': coord.latitude,
                'longitude': coord.longitude
            }
        }
    }


def build_request_body(request: DirectionsRequest) -> dict:
    """Builds the JSON body the computeRoutes endpoint expects."""
    return {
        'origin': _waypoint(request.origin),
        'destination': _waypoint(request.destination),
        'travelMode': request.travel_mode.value,
        'computeAlternativeRoutes': request.compute_alternative_routes,
        'routeModifiers': {
            'avoidTolls': request.avoid_tolls,
            'avoidHighways': request.avoid_highways
        },
        'languageCode': request.language_code,
        'units': request.units
    }


def build_request_headers(api_key: str, field_mask: str = DEFAULT_FIELD_MASK) -> dict:
    return {
        'Content-Type': 'application/json',
        'X-Goog-Api-Key': api_key,
        'X-Goog-FieldMask': field_mask
    }


class RoutesAdapter(ABC):
    """
    Abstract Base Class (blueprint) for all routes clients.
    It ensures every adapter we create has the same public methods.
    """
    @abstractmethod
    def get_route(self, request: DirectionsRequest) -> DirectionsResult:
        """Calculates routes and returns our standard DirectionsResult object."""
        pass

    def route(self, request: DirectionsRequest,
              callback: Callable[[DirectionsResult, DirectionsStatus | UnknownEnumValue | None], None]) -> None:
        """
        Calculates routes and hands the result to callback.

        Any failure is raised before the callback runs; the callback never
        sees a partial result.
        """
        result = self.get_route(request)
        callback(result, result.status)


class GoogleRoutesAdapter(RoutesAdapter):
    """The adapter for the Google Routes API."""

    def __init__(self, config: RoutesConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session

    def _post(self, **kwargs) -> requests.Response:
        if self.session is not None:
            return self.session.post(self.config.url, **kwargs)
        return requests.post(self.config.url, **kwargs)

    def get_route(self, request: DirectionsRequest) -> DirectionsResult:
        if not self.config.api_key:
            raise ConfigurationError(
                "The Google API key is not configured. Set GOOGLE_API_KEY or pass it in RoutesConfig.")

        body = build_request_body(request)
        headers = build_request_headers(self.config.api_key, self.config.field_mask)
        logger.debug(f"[Google] Requesting routes: {body}")

        try:
            response = self._post(json=body, headers=headers, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"[Google] A network error occurred for route calculation: {e}")
            raise TransportError(f"Error connecting to Google Routes API: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"[Google] Routes request failed with {response.status_code} ({response.reason})")
            raise TransportError(
                f"{response.status_code} ({response.reason}), uri = {self.config.url}",
                status_code=response.status_code,
                reason=response.reason,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ShapeError(f"Routes response is not valid JSON: {e}") from e

        result = map_directions_result(data)
        if result.status is None:
            # The Routes API has no status field; the reason phrase stands in for it.
            result = replace(result, status=parse_enum(DirectionsStatus, response.reason))
        return result
