from typing import Any, Dict, List, Optional, Union
from pydantic import Field

from routexplore.models.base import ApiModel, Coordinate


class BoundingBox(ApiModel):
    south: float
    west: float
    north: float
    east: float


class TouristPlace(ApiModel):
    id: int
    type: str
    tourism: str
    name: Optional[str] = None
    lat: float
    lon: float
    tags: Dict[str, Any] = Field(default_factory=dict)


class SimplePlace(ApiModel):
    id: int
    name: Optional[str] = None
    tourism: str
    coordinates: Coordinate
    tags: Dict[str, Any] = Field(default_factory=dict)


class PlacesMeta(ApiModel):
    allowed_types: List[str]
    limit: Union[int, str]


class PlacesResult(ApiModel):
    bbox: BoundingBox
    start: Coordinate
    end: Coordinate
    places: Optional[List[SimplePlace]] = None
    data: Optional[Dict[str, Any]] = None
    filtered: Optional[List[TouristPlace]] = None
    meta: PlacesMeta


class PlaceSummary(ApiModel):
    wikipedia: str
    title: str
    extract: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    content_urls: Optional[Dict[str, Any]] = None
    lang: str
    page_url: str
    wikidata: Optional[str] = None
