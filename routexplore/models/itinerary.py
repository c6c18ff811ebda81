from typing import List, Optional
from pydantic import Field

from routexplore.models.base import ApiModel, Endpoint, Waypoint
from routexplore.models.link import LinkMeta
from routexplore.models.route import RouteResult


class Itinerary(ApiModel):
    start: Endpoint
    end: Endpoint
    waypoints: List[Waypoint] = Field(default_factory=list)
    route: Optional[RouteResult] = None
    meta: Optional[LinkMeta] = None
