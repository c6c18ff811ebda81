from typing import Any, Dict, Optional
import asyncio
import logging
import aiohttp
from pydantic import ValidationError

from routexplore.core.exceptions import GeocodingUnavailableError
from routexplore.models.base import Coordinate
from routexplore.repositories.base import BaseHttpRepository

logger = logging.getLogger(__name__)


class NominatimRepository(BaseHttpRepository):
    """Forward and reverse geocoding against an OSM Nominatim instance."""

    def __init__(self, base_url: str, config, session_factory=None):
        super().__init__(config, session_factory)
        self.base_url = base_url.rstrip("/")

    async def search(self, text: str) -> Optional[Coordinate]:
        """Return the best match for ``text``, or None when nothing matches."""
        logger.info(f"Attempting to geocode: '{text}'")
        try:
            status, data = await self._get_json(
                f"{self.base_url}/search",
                params={"q": text, "format": "json", "limit": "1"},
                timeout=self.config.geocode_timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GeocodingUnavailableError(f"Geocoding request failed for '{text}': {e!r}") from e

        if status >= 400:
            raise GeocodingUnavailableError(f"Geocoding provider answered {status} for '{text}'")

        first = data[0] if isinstance(data, list) and data and isinstance(data[0], dict) else None
        if not first or first.get("lat") is None or first.get("lon") is None:
            logger.warning(f"No geocoding results found for: '{text}'")
            return None
        try:
            coordinate = Coordinate(lat=float(first["lat"]), lng=float(first["lon"]))
        except (TypeError, ValueError, ValidationError):
            logger.warning(f"Geocoding provider returned an invalid coordinate for '{text}': {first!r}")
            return None
        logger.info(f"Successfully geocoded '{text}' to: {coordinate}")
        return coordinate

    async def reverse(self, coordinate: Coordinate) -> Optional[Dict[str, Any]]:
        """Return the structured reverse-geocoding payload for ``coordinate``."""
        logger.info(f"Attempting to reverse geocode: {coordinate}")
        try:
            status, data = await self._get_json(
                f"{self.base_url}/reverse",
                params={
                    "lat": str(coordinate.lat),
                    "lon": str(coordinate.lng),
                    "format": "jsonv2",
                    "addressdetails": "1",
                },
                timeout=self.config.reverse_geocode_timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GeocodingUnavailableError(f"Reverse geocoding request failed for {coordinate}: {e!r}") from e

        if status >= 400:
            raise GeocodingUnavailableError(f"Reverse geocoding provider answered {status} for {coordinate}")
        if not isinstance(data, dict) or "error" in data:
            logger.warning(f"No reverse geocoding result for {coordinate}")
            return None
        return data
