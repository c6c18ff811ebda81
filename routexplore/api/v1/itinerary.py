import logging
from fastapi import APIRouter, Depends, HTTPException

from routexplore.api.dependencies import get_itinerary_service
from routexplore.api.v1.models import ErrorResponse, GenerateRouteRequest, ParseLinkRequest
from routexplore.core.exceptions import (
    InvalidCoordinateError,
    MissingCoordinatesError,
    RoutingFailedError,
    UnrecognizedLinkFormatError,
)
from routexplore.models.itinerary import Itinerary
from routexplore.services.itinerary import ItineraryService

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


def _unrecognized(e: UnrecognizedLinkFormatError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "error": "Unrecognized Google Maps link format",
            "meta": {"inputLink": e.input_link, "finalUrl": e.final_url},
        },
    )


def _routing_failed(e: RoutingFailedError) -> HTTPException:
    return HTTPException(status_code=502, detail={"error": "Routing failed", "reason": e.reason})


@router.post("/parse-link", response_model=Itinerary, responses=ERROR_RESPONSES)
async def parse_link(
    request: ParseLinkRequest,
    itinerary_service: ItineraryService = Depends(get_itinerary_service),
):
    """Parse a map link into start, end and waypoints, optionally with a route."""
    if not request.link or not request.link.strip():
        raise HTTPException(status_code=400, detail="No link provided")
    link = request.link.strip()
    try:
        logger.info(f"Received parse-link request: link='{link}', include_route={request.include_route}")
        return await itinerary_service.resolve_link(
            link,
            include_route=request.include_route,
            travel_mode=request.travel_mode,
            geometry=request.geometry,
            route_via_waypoints=request.route_via_waypoints,
        )
    except UnrecognizedLinkFormatError as e:
        logger.warning(f"Unrecognized link '{link}' (final url '{e.final_url}')")
        raise _unrecognized(e)
    except RoutingFailedError as e:
        logger.error(f"Routing failed for link '{link}': {e} (reason={e.reason})")
        raise _routing_failed(e)


@router.post("/generate-route", response_model=Itinerary, responses=ERROR_RESPONSES)
async def generate_route(
    request: GenerateRouteRequest,
    itinerary_service: ItineraryService = Depends(get_itinerary_service),
):
    """Route between explicit coordinates, or between the endpoints of a map link."""
    try:
        return await itinerary_service.generate_route(
            start_coordinates=request.start_coordinates,
            end_coordinates=request.end_coordinates,
            start=request.start,
            end=request.end,
            start_name=request.start_name,
            end_name=request.end_name,
            link=request.link.strip() if request.link else None,
            waypoints=request.waypoints,
            travel_mode=request.travel_mode,
            geometry=request.geometry,
            route_via_waypoints=request.route_via_waypoints,
        )
    except (InvalidCoordinateError, MissingCoordinatesError) as e:
        logger.warning(f"Rejected generate-route request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except UnrecognizedLinkFormatError as e:
        logger.warning(f"Unrecognized link '{e.input_link}' (final url '{e.final_url}')")
        raise _unrecognized(e)
    except RoutingFailedError as e:
        logger.error(f"Routing failed: {e} (reason={e.reason})")
        raise _routing_failed(e)
