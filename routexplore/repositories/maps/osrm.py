from typing import Any, Dict, Sequence, Tuple
import asyncio
import logging
import aiohttp

from routexplore.core.exceptions import RoutingFailedError
from routexplore.models.base import Coordinate
from routexplore.repositories.base import BaseHttpRepository

logger = logging.getLogger(__name__)


def format_coordinates(coordinates: Sequence[Coordinate]) -> str:
    """OSRM expects ``lng,lat`` pairs joined by ``;``."""
    return ";".join(f"{c.lng},{c.lat}" for c in coordinates)


class OSRMRepository(BaseHttpRepository):
    """Client for the OSRM ``/route`` service."""

    def __init__(self, base_url: str, config, session_factory=None):
        super().__init__(config, session_factory)
        self.base_url = base_url.rstrip("/")

    def route_url(self, coordinates: Sequence[Coordinate], profile: str) -> str:
        return f"{self.base_url}/route/v1/{profile}/{format_coordinates(coordinates)}"

    async def route(
        self, coordinates: Sequence[Coordinate], profile: str, geometries: str
    ) -> Tuple[Dict[str, Any], str]:
        """Return the first route candidate and the request URL.

        Raises RoutingFailedError for HTTP errors, empty results and
        transport failures alike.
        """
        url = self.route_url(coordinates, profile)
        params = {"overview": "full", "geometries": geometries}
        request_url = f"{url}?overview=full&geometries={geometries}"
        logger.info(f"Requesting {profile} route through {len(coordinates)} points: {request_url}")
        try:
            status, data = await self._get_json(url, params=params, timeout=self.config.routing_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"OSRM request failed for {request_url}: {e!r}")
            raise RoutingFailedError(f"Routing provider unreachable: {e!r}", reason="unreachable") from e

        if status >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error(f"OSRM answered {status} for {request_url}: {message}")
            raise RoutingFailedError(f"Routing provider answered {status}: {message}", reason="provider_status")

        routes = data.get("routes") if isinstance(data, dict) else None
        if not isinstance(routes, list) or not routes:
            logger.warning(f"OSRM returned no routes for {request_url}")
            raise RoutingFailedError("No route found between the given points", reason="no_route")
        return routes[0], request_url
