"""Validation and parsing of latitude/longitude pairs."""
import math
import re
from numbers import Real
from typing import Any, Mapping, Optional, Sequence

from pydantic import ValidationError

from routexplore.core.exceptions import InvalidCoordinateError
from routexplore.models.base import Coordinate

_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _in_range(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


def is_valid_coordinate(obj: Any) -> bool:
    """True for an already structured, in-range ``{lat, lng}`` pair."""
    if isinstance(obj, Coordinate):
        return True
    if not isinstance(obj, Mapping):
        return False
    lat, lng = obj.get("lat"), obj.get("lng")
    return _is_number(lat) and _is_number(lng) and _in_range(lat, lng)


def _parse_component(raw: str, original: Any) -> float:
    text = raw.strip()
    if not _DECIMAL.match(text):
        raise InvalidCoordinateError(f"Not a number: '{raw}'", value=original)
    value = float(text)
    if not math.isfinite(value):
        raise InvalidCoordinateError(f"Not a finite number: '{raw}'", value=original)
    return value


def _build(lat: float, lng: float, original: Any) -> Coordinate:
    if not _in_range(lat, lng):
        raise InvalidCoordinateError(f"Coordinate out of range: {lat},{lng}", value=original)
    try:
        return Coordinate(lat=lat, lng=lng)
    except ValidationError as e:
        raise InvalidCoordinateError(f"Invalid coordinate {lat},{lng}: {e}", value=original) from e


def parse_coordinate_pair(value: Any) -> Coordinate:
    """Parse a structured pair or a ``"lat,lng"`` string into a Coordinate.

    Raises InvalidCoordinateError when the input does not have exactly two
    components, a component is not a finite number, or it is out of range.
    """
    if isinstance(value, Coordinate):
        return value
    if isinstance(value, str):
        parts = value.split(",")
        if len(parts) != 2:
            raise InvalidCoordinateError(
                f"Expected 'lat,lng' but got {len(parts)} component(s): '{value}'", value=value
            )
        return _build(_parse_component(parts[0], value), _parse_component(parts[1], value), value)
    if isinstance(value, Mapping):
        if not ("lat" in value and "lng" in value):
            raise InvalidCoordinateError("Coordinate object requires 'lat' and 'lng'", value=value)
        lat, lng = value["lat"], value["lng"]
    elif isinstance(value, Sequence) and len(value) == 2:
        lat, lng = value
    else:
        raise InvalidCoordinateError(f"Unsupported coordinate input: {value!r}", value=value)
    if not (_is_number(lat) and _is_number(lng)):
        raise InvalidCoordinateError(f"Coordinate components must be finite numbers: {value!r}", value=value)
    return _build(float(lat), float(lng), value)


def try_parse_coordinate_pair(value: Any) -> Optional[Coordinate]:
    if value is None:
        return None
    try:
        return parse_coordinate_pair(value)
    except InvalidCoordinateError:
        return None


def format_coordinate(coordinate: Coordinate) -> str:
    return f"{coordinate.lat},{coordinate.lng}"
