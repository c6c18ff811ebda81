from typing import Any, Dict, List, Optional, Union
from pydantic import Field

from routexplore.models.base import ApiModel, Waypoint


# Request Models
class ParseLinkRequest(ApiModel):
    link: Optional[str] = Field(None, description="Map sharing link, short or expanded")
    include_route: bool = Field(True, description="Also synthesize a route between the endpoints")
    travel_mode: Optional[str] = Field(None, description="driving, walking, bicycling/cycling; others drive")
    geometry: Optional[str] = Field(None, description="geojson (default), polyline or polyline6")
    route_via_waypoints: bool = Field(False, description="Route through the link's waypoints")


class GenerateRouteRequest(ApiModel):
    start_coordinates: Optional[Dict[str, Any]] = Field(None, description="Structured {lat, lng}")
    end_coordinates: Optional[Dict[str, Any]] = Field(None, description="Structured {lat, lng}")
    start: Optional[str] = Field(None, description="Start as 'lat,lng'")
    end: Optional[str] = Field(None, description="End as 'lat,lng'")
    start_name: Optional[str] = None
    end_name: Optional[str] = None
    link: Optional[str] = Field(None, description="Map link used when no explicit coordinates are given")
    waypoints: List[Union[str, Waypoint]] = Field(default_factory=list)
    travel_mode: Optional[str] = None
    geometry: Optional[str] = None
    route_via_waypoints: bool = False


# Response Models
class ErrorResponse(ApiModel):
    detail: Union[str, Dict[str, Any]]


class HealthResponse(ApiModel):
    status: str = "ok"
