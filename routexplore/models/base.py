from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model exchanged with API clients (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    def __str__(self) -> str:
        return f"{self.lat},{self.lng}"


class Endpoint(ApiModel):
    """Start or end of an itinerary.

    A name without coordinates is still waiting for geocoding, coordinates
    without a name are waiting for a label. Neither means unresolved.
    """

    name: Optional[str] = None
    coordinates: Optional[Coordinate] = None

    @property
    def is_resolved(self) -> bool:
        return self.coordinates is not None


class Waypoint(ApiModel):
    value: str
    via: bool = Field(False, description="Non-stop shaping point")
    coordinates: Optional[Coordinate] = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data
