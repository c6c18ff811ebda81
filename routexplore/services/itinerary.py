"""Entry points that sequence link decoding, geocoding and routing per request."""
from typing import Any, List, Optional, Sequence, Tuple, Union
import asyncio
import logging

from routexplore.core.exceptions import (
    InvalidCoordinateError,
    MissingCoordinatesError,
    UnrecognizedLinkFormatError,
)
from routexplore.models.base import Coordinate, Endpoint, Waypoint
from routexplore.models.itinerary import Itinerary
from routexplore.models.link import LinkMeta
from routexplore.models.route import GeometryEncoding, RouteResult
from routexplore.services.coordinates import (
    format_coordinate,
    is_valid_coordinate,
    parse_coordinate_pair,
)
from routexplore.services.decoders import DecoderChain
from routexplore.services.geocoding import GeocodingService, normalize_place_text
from routexplore.services.links import (
    LinkCanonicalizer,
    embedded_fallback,
    extract_embedded_coordinates,
)
from routexplore.services.routing import RouteService, map_travel_mode_to_osrm_profile

logger = logging.getLogger(__name__)

WaypointInput = Union[str, Waypoint]


class ItineraryService:
    def __init__(
        self,
        canonicalizer: LinkCanonicalizer,
        geocoding_service: GeocodingService,
        route_service: RouteService,
        decoder_chain: Optional[DecoderChain] = None,
    ):
        self.canonicalizer = canonicalizer
        self.geocoding_service = geocoding_service
        self.route_service = route_service
        self.decoder_chain = decoder_chain or DecoderChain()

    async def resolve_link(
        self,
        link: str,
        include_route: bool = True,
        travel_mode: Optional[str] = None,
        geometry: Optional[str] = None,
        route_via_waypoints: bool = False,
    ) -> Itinerary:
        """Decode a map link into endpoints, waypoints and optionally a route.

        The route is left out when an endpoint could not be located.
        """
        return await self._from_link(
            link,
            include_route=include_route,
            travel_mode=travel_mode,
            geometry=geometry,
            route_via_waypoints=route_via_waypoints,
            require_route=False,
        )

    async def generate_route(
        self,
        start_coordinates: Any = None,
        end_coordinates: Any = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        start_name: Optional[str] = None,
        end_name: Optional[str] = None,
        link: Optional[str] = None,
        waypoints: Sequence[WaypointInput] = (),
        travel_mode: Optional[str] = None,
        geometry: Optional[str] = None,
        route_via_waypoints: bool = False,
    ) -> Itinerary:
        """Route between explicit coordinates, or between the endpoints of a link.

        Explicit coordinates always win over the link. Structured coordinates
        win over ``"lat,lng"`` strings.
        """
        start_coord, start_error = self._explicit_coordinate(start_coordinates, start)
        end_coord, end_error = self._explicit_coordinate(end_coordinates, end)

        if start_coord is not None and end_coord is not None:
            return await self._from_coordinates(
                Endpoint(name=start_name, coordinates=start_coord),
                Endpoint(name=end_name, coordinates=end_coord),
                [Waypoint.model_validate(w) for w in waypoints],
                travel_mode=travel_mode,
                geometry=geometry,
            )

        if link:
            return await self._from_link(
                link,
                include_route=True,
                travel_mode=travel_mode,
                geometry=geometry,
                route_via_waypoints=route_via_waypoints,
                require_route=True,
            )

        error = start_error or end_error
        if error is not None:
            raise error
        raise MissingCoordinatesError(
            "Provide start and end coordinates (object {lat,lng} or string 'lat,lng') or a map link"
        )

    @staticmethod
    def _explicit_coordinate(
        structured: Any, text: Optional[str]
    ) -> Tuple[Optional[Coordinate], Optional[InvalidCoordinateError]]:
        if is_valid_coordinate(structured):
            return parse_coordinate_pair(structured), None
        error = None
        for candidate in (structured, text):
            if candidate is None:
                continue
            try:
                return parse_coordinate_pair(candidate), None
            except InvalidCoordinateError as e:
                error = error or e
        return None, error

    async def _from_coordinates(
        self,
        start: Endpoint,
        end: Endpoint,
        waypoints: List[Waypoint],
        travel_mode: Optional[str],
        geometry: Optional[str],
    ) -> Itinerary:
        logger.info(f"Routing explicit coordinates {start.coordinates} -> {end.coordinates}")
        waypoints = await self._resolve_waypoints(waypoints, strict=True)
        route = await self._synthesize(start, end, waypoints, travel_mode, geometry)
        start_label, end_label = await asyncio.gather(self._label(start), self._label(end))
        return Itinerary(
            start=Endpoint(name=start_label, coordinates=start.coordinates),
            end=Endpoint(name=end_label, coordinates=end.coordinates),
            waypoints=waypoints,
            route=route,
        )

    async def _from_link(
        self,
        link: str,
        include_route: bool,
        travel_mode: Optional[str],
        geometry: Optional[str],
        route_via_waypoints: bool,
        require_route: bool,
    ) -> Itinerary:
        final_url = await self.canonicalizer.canonicalize(link)
        try:
            parsed = self.decoder_chain.decode(final_url)
        except UnrecognizedLinkFormatError as e:
            raise UnrecognizedLinkFormatError(final_url=e.final_url, input_link=link) from e

        embedded = extract_embedded_coordinates(final_url)
        start, end = await asyncio.gather(
            self._resolve_endpoint(parsed.start, embedded, "start"),
            self._resolve_endpoint(parsed.end, embedded, "end"),
        )
        waypoints = [Waypoint(value=w) for w in parsed.waypoints]
        meta = LinkMeta(input_link=link, final_url=final_url, parsed_from=parsed.source)

        route = None
        if include_route:
            missing = [role for role, ep in (("start", start), ("end", end)) if not ep.is_resolved]
            if missing:
                message = f"Could not locate {' and '.join(missing)} of link '{link}'"
                if require_route:
                    raise MissingCoordinatesError(message)
                logger.warning(f"{message}; returning endpoints without a route")
            else:
                if route_via_waypoints:
                    waypoints = await self._resolve_waypoints(waypoints, strict=require_route)
                route = await self._synthesize(start, end, waypoints, travel_mode, geometry)

        return Itinerary(start=start, end=end, waypoints=waypoints, route=route, meta=meta)

    async def _resolve_endpoint(self, text: str, embedded: List[Coordinate], role: str) -> Endpoint:
        coordinate = await self.geocoding_service.resolve_coordinates(text)
        if coordinate is None:
            coordinate = embedded_fallback(embedded, role)
            if coordinate is not None:
                logger.info(f"Using coordinates embedded in the link for {role} '{text}': {coordinate}")
        return Endpoint(name=normalize_place_text(text) or None, coordinates=coordinate)

    async def _resolve_waypoints(self, waypoints: List[Waypoint], strict: bool) -> List[Waypoint]:
        resolved = []
        for waypoint in waypoints:
            coordinate = waypoint.coordinates
            if coordinate is None:
                coordinate = await self.geocoding_service.resolve_coordinates(waypoint.value)
            if coordinate is None:
                if strict:
                    raise MissingCoordinatesError(f"Could not locate waypoint '{waypoint.value}'")
                logger.warning(f"Skipping waypoint '{waypoint.value}' from routing: not found")
            resolved.append(waypoint.model_copy(update={"coordinates": coordinate}))
        return resolved

    async def _synthesize(
        self,
        start: Endpoint,
        end: Endpoint,
        waypoints: List[Waypoint],
        travel_mode: Optional[str],
        geometry: Optional[str],
    ) -> RouteResult:
        via = [w.coordinates for w in waypoints if w.coordinates is not None]
        return await self.route_service.synthesize_route_via(
            start.coordinates,
            end.coordinates,
            via,
            profile=map_travel_mode_to_osrm_profile(travel_mode),
            encoding=GeometryEncoding.from_value(geometry),
            travel_mode=travel_mode,
        )

    async def _label(self, endpoint: Endpoint) -> str:
        if endpoint.name:
            return endpoint.name
        label = await self.geocoding_service.resolve_label(endpoint.coordinates)
        return label or format_coordinate(endpoint.coordinates)
