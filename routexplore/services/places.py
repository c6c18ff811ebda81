from typing import Any, Dict, List, Optional
import asyncio
import logging

from routexplore.core.exceptions import MissingCoordinatesError
from routexplore.core.settings import PlacesConfig
from routexplore.models.base import Coordinate
from routexplore.models.places import (
    BoundingBox,
    PlacesMeta,
    PlacesResult,
    SimplePlace,
    TouristPlace,
)
from routexplore.repositories.maps.overpass import OverpassRepository
from routexplore.services.geocoding import GeocodingService

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 0.1  # ~11km of latitude


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def bounding_box(start: Coordinate, end: Coordinate, padding: float) -> BoundingBox:
    return BoundingBox(
        south=clamp(min(start.lat, end.lat) - padding, -90, 90),
        west=clamp(min(start.lng, end.lng) - padding, -180, 180),
        north=clamp(max(start.lat, end.lat) + padding, -90, 90),
        east=clamp(max(start.lng, end.lng) + padding, -180, 180),
    )


def _element_to_place(element: Dict[str, Any], require_name: bool) -> Optional[TouristPlace]:
    tags = element.get("tags") or {}
    tourism = tags.get("tourism")
    name = tags.get("name") or tags.get("name:en")
    center = element.get("center") or {}
    lat = element.get("lat", center.get("lat"))
    lon = element.get("lon", center.get("lon"))
    if not tourism or lat is None or lon is None:
        return None
    if require_name and not name:
        return None
    return TouristPlace(
        id=element["id"], type=element.get("type", ""), tourism=tourism,
        name=name, lat=lat, lon=lon, tags=tags,
    )


class TouristPlacesService:
    def __init__(
        self,
        repository: OverpassRepository,
        geocoding_service: GeocodingService,
        config: Optional[PlacesConfig] = None,
    ):
        self.repository = repository
        self.geocoding_service = geocoding_service
        self.config = config or PlacesConfig()

    def allowed_types(self, types: Optional[str], include_accommodation: bool) -> List[str]:
        explicit = [t.strip() for t in (types or "").split(",") if t.strip()]
        if explicit:
            return explicit
        allowed = list(self.config.default_types)
        if include_accommodation:
            allowed.extend(self.config.accommodation_types)
        return allowed

    async def find_places(
        self,
        start: Optional[str],
        end: Optional[str],
        padding: Optional[float] = None,
        types: Optional[str] = None,
        format: str = "raw",
        limit: Optional[int] = None,
        min_name: bool = True,
        include_accommodation: bool = False,
    ) -> PlacesResult:
        """Tourist places inside the padded box spanned by ``start`` and ``end``."""
        start_coord, end_coord = await asyncio.gather(
            self.geocoding_service.resolve_coordinates(start),
            self.geocoding_service.resolve_coordinates(end),
        )
        if start_coord is None or end_coord is None:
            raise MissingCoordinatesError(
                "Invalid or missing start/end. Provide 'lat,lng' or a place name for both."
            )

        bbox = bounding_box(start_coord, end_coord, padding or DEFAULT_PADDING)
        allowed = self.allowed_types(types, include_accommodation)
        data = await self.repository.query(bbox, allowed)

        elements = data.get("elements") if isinstance(data.get("elements"), list) else []
        places = [p for p in (_element_to_place(el, min_name) for el in elements) if p is not None]

        mid_lat = (start_coord.lat + end_coord.lat) / 2
        mid_lng = (start_coord.lng + end_coord.lng) / 2
        places.sort(key=lambda p: (p.lat - mid_lat) ** 2 + (p.lon - mid_lng) ** 2)

        lim = min(limit, self.config.max_limit) if limit and limit > 0 else None
        if lim:
            places = places[:lim]
        logger.info(f"Found {len(places)} tourist places between {start_coord} and {end_coord}")

        meta = PlacesMeta(allowed_types=allowed, limit=lim if lim else "all")
        if str(format).lower() == "simple":
            return PlacesResult(
                bbox=bbox,
                start=start_coord,
                end=end_coord,
                places=[
                    SimplePlace(
                        id=p.id, name=p.name, tourism=p.tourism,
                        coordinates=Coordinate(lat=p.lat, lng=p.lon), tags=p.tags,
                    )
                    for p in places
                ],
                meta=meta,
            )
        return PlacesResult(bbox=bbox, start=start_coord, end=end_coord, data=data, filtered=places, meta=meta)
