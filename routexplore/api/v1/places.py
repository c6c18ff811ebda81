from typing import Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from routexplore.api.dependencies import get_details_service, get_places_service
from routexplore.api.v1.models import ErrorResponse
from routexplore.core.exceptions import (
    MissingCoordinatesError,
    PlaceDetailsNotFoundError,
    PlacesUnavailableError,
)
from routexplore.models.places import PlaceSummary, PlacesResult
from routexplore.services.details import PlaceDetailsService
from routexplore.services.places import TouristPlacesService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/places",
    response_model=PlacesResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def search_tourist_places(
    start: Optional[str] = Query(None, description="'lat,lng' or place name"),
    end: Optional[str] = Query(None, description="'lat,lng' or place name"),
    padding: Optional[float] = Query(None, gt=0, description="Bounding box padding in degrees"),
    types: Optional[str] = Query(None, description="Comma separated tourism types"),
    format: str = Query("raw", description="raw or simple"),
    limit: Optional[int] = Query(None, description="Maximum number of places (capped at 200)"),
    min_name: bool = Query(True, alias="minName", description="Drop places without a name"),
    include_accommodation: bool = Query(False, alias="includeAccommodation"),
    places_service: TouristPlacesService = Depends(get_places_service),
):
    """Tourist places between two locations."""
    try:
        logger.info(f"Received places request: start='{start}', end='{end}', types='{types}', limit={limit}")
        return await places_service.find_places(
            start=start,
            end=end,
            padding=padding,
            types=types,
            format=format,
            limit=limit,
            min_name=min_name,
            include_accommodation=include_accommodation,
        )
    except MissingCoordinatesError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlacesUnavailableError as e:
        logger.error(f"Tourist places lookup failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch tourist places")


@router.get(
    "/place-details",
    response_model=PlaceSummary,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_place_details(
    wikipedia: Optional[str] = Query(None, description="'lang:Title', e.g. 'en:Eiffel Tower'"),
    title: Optional[str] = Query(None),
    lang: Optional[str] = Query(None),
    wikidata: Optional[str] = Query(None, description="Wikidata ID, e.g. Q243"),
    details_service: PlaceDetailsService = Depends(get_details_service),
):
    """Wikipedia summary for a place."""
    try:
        return await details_service.get_details(wikipedia=wikipedia, title=title, lang=lang, wikidata=wikidata)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlaceDetailsNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
