from typing import List, Optional, Sequence
import math
import logging

from pydantic import ValidationError

from routexplore.core.exceptions import RoutingFailedError
from routexplore.models.base import Coordinate
from routexplore.models.route import GeometryEncoding, RouteResult
from routexplore.repositories.maps.osrm import OSRMRepository

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "driving"


def map_travel_mode_to_osrm_profile(mode: Optional[str]) -> str:
    """Map a travel mode to an OSRM profile.

    OSRM has no transit profile, so transit (like any unknown mode) is routed
    as driving.
    """
    m = str(mode or DEFAULT_PROFILE).strip().lower()
    if m == "walking":
        return "walking"
    if m in ("bicycling", "cycling"):
        return "cycling"
    return DEFAULT_PROFILE


def _linestring_coordinates(geometry) -> List[Coordinate]:
    if not isinstance(geometry, dict) or not isinstance(geometry.get("coordinates"), list):
        raise RoutingFailedError("Route geometry is not a GeoJSON LineString", reason="malformed_response")
    try:
        return [Coordinate(lat=point[1], lng=point[0]) for point in geometry["coordinates"]]
    except (IndexError, TypeError, ValidationError) as e:
        raise RoutingFailedError(f"Route geometry has invalid points: {e}", reason="malformed_response") from e


def round_half_up(value) -> int:
    """Round OSRM metrics to whole units, halves going up (1234.5 -> 1235)."""
    return int(math.floor(float(value or 0) + 0.5))


class RouteService:
    def __init__(self, repository: OSRMRepository):
        self.repository = repository

    async def synthesize_route(
        self,
        coordinates: Sequence[Coordinate],
        profile: str = DEFAULT_PROFILE,
        encoding: GeometryEncoding = GeometryEncoding.GEOJSON,
        travel_mode: Optional[str] = None,
    ) -> RouteResult:
        """Route through ``coordinates`` in the given order and normalize the first candidate."""
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")
        encoding = GeometryEncoding.from_value(encoding)

        route, request_url = await self.repository.route(coordinates, profile, encoding.value)
        geometry = route.get("geometry")
        if geometry is None:
            raise RoutingFailedError("Route has no geometry", reason="malformed_response")

        path: Optional[List[Coordinate]] = None
        if encoding is GeometryEncoding.GEOJSON:
            path = _linestring_coordinates(geometry)
        elif not isinstance(geometry, str):
            raise RoutingFailedError("Encoded polyline geometry expected", reason="malformed_response")

        result = RouteResult(
            profile=profile,
            travel_mode=travel_mode,
            distance_meters=round_half_up(route.get("distance")),
            duration_seconds=round_half_up(route.get("duration")),
            geometry_encoding=encoding,
            geometry=geometry,
            coordinates=path,
            osrm_url=request_url,
        )
        try:
            points = result.decode_path()
        except (IndexError, TypeError, ValueError) as e:
            raise RoutingFailedError(
                f"Route geometry is not a valid {encoding.value} string: {e}", reason="malformed_response"
            ) from e
        logger.info(
            f"Route synthesized ({profile}, {encoding.value}): {len(points)} points, "
            f"distance={result.distance_meters / 1000:.1f}km, duration={result.duration_seconds / 60:.0f}min"
        )
        return result

    async def synthesize_route_via(
        self,
        start: Coordinate,
        end: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        profile: str = DEFAULT_PROFILE,
        encoding: GeometryEncoding = GeometryEncoding.GEOJSON,
        travel_mode: Optional[str] = None,
    ) -> RouteResult:
        """Same as synthesize_route with explicit intermediate stops, kept in order."""
        return await self.synthesize_route(
            [start, *waypoints, end], profile=profile, encoding=encoding, travel_mode=travel_mode
        )
