from typing import Any, Dict, Optional
import logging

from routexplore.core.exceptions import GeocodingUnavailableError
from routexplore.models.base import Coordinate
from routexplore.repositories.maps.nominatim import NominatimRepository
from routexplore.services.coordinates import try_parse_coordinate_pair

logger = logging.getLogger(__name__)

POI_TAGS = ("attraction", "tourism", "building", "amenity")


def normalize_place_text(text: str) -> str:
    return text.replace("+", " ").strip()


def _join(*parts: Optional[str]) -> Optional[str]:
    values = [p for p in parts if p]
    if len(values) != len(parts):
        return None
    return ", ".join(values)


def derive_label(payload: Dict[str, Any]) -> Optional[str]:
    """Pick a concise human label from a reverse-geocoding payload.

    Priority: point-of-interest name, POI tag, road + city, suburb/village +
    region, city + region, then the full display name.
    """
    address = payload.get("address") or {}
    city = address.get("city") or address.get("town") or address.get("municipality")
    region = address.get("state") or address.get("county") or address.get("region")
    locality = address.get("suburb") or address.get("village")

    candidates = (
        payload.get("name"),
        next((address.get(tag) for tag in POI_TAGS if address.get(tag)), None),
        _join(address.get("road"), city),
        _join(locality, region),
        _join(city, region),
        payload.get("display_name"),
    )
    for candidate in candidates:
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return None


class GeocodingService:
    """Place name <-> coordinate resolution that never raises for provider trouble."""

    def __init__(self, repository: NominatimRepository):
        self.repository = repository

    async def resolve_coordinates(self, value: Optional[str]) -> Optional[Coordinate]:
        if value is None:
            return None
        # Already a coordinate pair, nothing to look up
        coordinate = try_parse_coordinate_pair(value)
        if coordinate is not None:
            return coordinate
        query = normalize_place_text(value)
        if not query:
            return None
        try:
            return await self.repository.search(query)
        except GeocodingUnavailableError as e:
            logger.warning(f"Geocoding unavailable for '{query}': {e}")
            return None

    async def resolve_label(self, coordinate: Coordinate) -> Optional[str]:
        try:
            payload = await self.repository.reverse(coordinate)
        except GeocodingUnavailableError as e:
            logger.warning(f"Reverse geocoding unavailable for {coordinate}: {e}")
            return None
        if not payload:
            return None
        label = derive_label(payload)
        logger.info(f"Labelled {coordinate} as '{label}'")
        return label
