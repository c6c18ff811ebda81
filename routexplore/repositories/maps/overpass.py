from typing import Any, Dict, Sequence
import asyncio
import logging
import re
import aiohttp

from routexplore.core.exceptions import PlacesUnavailableError
from routexplore.models.places import BoundingBox
from routexplore.repositories.base import BaseHttpRepository

logger = logging.getLogger(__name__)


def build_tourism_query(bbox: BoundingBox, types: Sequence[str], timeout: int = 25) -> str:
    type_regex = "|".join(re.escape(t) for t in types)
    area = f"({bbox.south},{bbox.west},{bbox.north},{bbox.east})"
    selectors = "\n".join(
        f'  {kind}["tourism"~"^({type_regex})$"]{area};' for kind in ("node", "way", "relation")
    )
    return f"[out:json][timeout:{timeout}];\n(\n{selectors}\n);\nout center;\n"


class OverpassRepository(BaseHttpRepository):
    """Spatial tourism queries against the Overpass API."""

    def __init__(self, base_url: str, config, session_factory=None):
        super().__init__(config, session_factory)
        self.base_url = base_url

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.config.user_agent, "Content-Type": "text/plain"}

    async def query(self, bbox: BoundingBox, types: Sequence[str]) -> Dict[str, Any]:
        query = build_tourism_query(bbox, types, timeout=int(self.config.places_timeout))
        logger.info(f"Querying Overpass for {len(types)} tourism types in {bbox}")
        try:
            async with self._session(self.config.places_timeout) as session:
                async with session.post(self.base_url, data=query) as response:
                    if response.status >= 400:
                        raise PlacesUnavailableError(f"Overpass answered {response.status}")
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Overpass request failed: {e!r}", exc_info=True)
            raise PlacesUnavailableError(f"Overpass request failed: {e!r}") from e
        if not isinstance(data, dict):
            raise PlacesUnavailableError("Overpass returned an unexpected payload")
        return data
