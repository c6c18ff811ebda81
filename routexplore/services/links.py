"""Short-link expansion and coordinates embedded in map URLs."""
import asyncio
import logging
import re
from typing import List, Optional, Sequence
from urllib.parse import unquote

import aiohttp

from routexplore.models.base import Coordinate
from routexplore.repositories.maps.redirects import RedirectRepository
from routexplore.services.coordinates import try_parse_coordinate_pair

logger = logging.getLogger(__name__)

SHORTENER_MARKERS = ("maps.app.goo.gl", "goo.gl/maps", "shorturl.at", "bit.ly")
DIRECTIONS_MARKER = "/maps/dir/"
API_MARKER = "api=1"

# data=!...!1d<lng>!2d<lat>
_EMBEDDED_PAIR = re.compile(r"!1d(-?\d+(?:\.\d+)?)!2d(-?\d+(?:\.\d+)?)")


def needs_resolution(link: str) -> bool:
    """Known shorteners, and anything we cannot recognise, get expanded."""
    lower = link.lower()
    if any(marker in lower for marker in SHORTENER_MARKERS):
        return True
    return DIRECTIONS_MARKER not in lower and API_MARKER not in lower


class LinkCanonicalizer:
    def __init__(self, redirect_repository: RedirectRepository):
        self.redirect_repository = redirect_repository

    async def canonicalize(self, link: str) -> str:
        """Return the final URL for ``link``; the link itself if expansion fails."""
        if not needs_resolution(link):
            logger.debug(f"Link does not need resolution: '{link}'")
            return link
        try:
            final_url, _status = await self.redirect_repository.fetch(link)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Could not resolve link '{link}', using it unchanged: {e!r}")
            return link
        return final_url or link


def extract_embedded_coordinates(url: str) -> List[Coordinate]:
    """Coordinates encoded as ``!1d<lng>!2d<lat>`` in the order they appear."""
    text = unquote(url)
    found = []
    for lng, lat in _EMBEDDED_PAIR.findall(text):
        coordinate = try_parse_coordinate_pair(f"{lat},{lng}")
        if coordinate is not None:
            found.append(coordinate)
    return found


def embedded_fallback(coordinates: Sequence[Coordinate], role: str) -> Optional[Coordinate]:
    """Pick the embedded coordinate for ``role`` (``start`` or ``end``).

    The start takes the first pair. The end takes the second pair, or the
    first one if it is the only pair.
    """
    if not coordinates:
        return None
    if role == "start":
        return coordinates[0]
    return coordinates[1] if len(coordinates) > 1 else coordinates[0]
