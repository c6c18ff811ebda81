from typing import Optional


class RouteXploreError(Exception):
    """Base class for link resolution and routing errors."""
    pass


class InvalidCoordinateError(RouteXploreError, ValueError):
    """Malformed or out-of-range latitude/longitude input."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class UnrecognizedLinkFormatError(RouteXploreError):
    """No decoder in the chain matched the canonical link."""

    def __init__(self, final_url: str, input_link: Optional[str] = None):
        super().__init__(f"Unrecognized map link format: {final_url}")
        self.final_url = final_url
        self.input_link = input_link


class MissingCoordinatesError(RouteXploreError):
    """A route was requested but an endpoint has no coordinates."""
    pass


class GeocodingUnavailableError(RouteXploreError):
    """Geocoding provider could not answer. Absorbed by the geocoding service."""
    pass


class RoutingFailedError(RouteXploreError):
    """Routing provider could not produce a path.

    ``reason`` is one of ``provider_status``, ``no_route``, ``unreachable`` or
    ``malformed_response``; all of them are reported to callers the same way.
    """

    def __init__(self, message: str, reason: str = "provider_status"):
        super().__init__(message)
        self.reason = reason


class PlacesUnavailableError(RouteXploreError):
    """Error querying the tourist places provider."""
    pass


class PlaceDetailsNotFoundError(RouteXploreError):
    """No summary could be found for the requested place."""
    pass
