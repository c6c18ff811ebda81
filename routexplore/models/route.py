from enum import Enum
from typing import Any, Dict, List, Optional, Union
import polyline
from pydantic import Field, model_serializer

from routexplore.models.base import ApiModel, Coordinate


class GeometryEncoding(str, Enum):
    GEOJSON = "geojson"
    POLYLINE = "polyline"
    POLYLINE6 = "polyline6"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "GeometryEncoding":
        """Unknown or missing encodings fall back to GeoJSON."""
        if isinstance(value, GeometryEncoding):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.GEOJSON

    @property
    def precision(self) -> int:
        return 6 if self is GeometryEncoding.POLYLINE6 else 5


class RouteResult(ApiModel):
    provider: str = "osrm"
    profile: str
    travel_mode: Optional[str] = Field(None, description="Travel mode as requested by the caller")
    distance_meters: int = Field(..., ge=0)
    duration_seconds: int = Field(..., ge=0)
    geometry_encoding: GeometryEncoding = GeometryEncoding.GEOJSON
    geometry: Union[Dict[str, Any], str]
    coordinates: Optional[List[Coordinate]] = Field(None, description="Flattened path, GeoJSON geometry only")
    osrm_url: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_missing_path(self, handler):
        data = handler(self)
        if self.coordinates is None:
            data.pop("coordinates", None)
        return data

    def decode_path(self) -> List[Coordinate]:
        """Return the route path regardless of the geometry encoding."""
        if self.geometry_encoding is GeometryEncoding.GEOJSON:
            return list(self.coordinates or [])
        points = polyline.decode(self.geometry, self.geometry_encoding.precision)
        return [Coordinate(lat=lat, lng=lng) for lat, lng in points]
