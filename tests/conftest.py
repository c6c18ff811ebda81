from typing import Any, Dict, List, Optional
import polyline
import pytest

from routexplore.core.exceptions import GeocodingUnavailableError, RoutingFailedError
from routexplore.core.settings import ClientConfig
from routexplore.models.base import Coordinate
from routexplore.services.geocoding import GeocodingService
from routexplore.services.itinerary import ItineraryService
from routexplore.services.links import LinkCanonicalizer
from routexplore.services.routing import RouteService


class FakeResponse:
    def __init__(self, status=200, payload=None, url="", history=(), headers=None, json_error=None):
        self.status = status
        self.payload = payload
        self.url = url
        self.history = tuple(history)
        self.headers = headers or {}
        self.json_error = json_error

    async def json(self, content_type="application/json"):
        if self.json_error is not None:
            raise self.json_error
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, factory, kwargs):
        self.factory = factory
        self.kwargs = kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def _respond(self, method, url, kwargs):
        self.factory.calls.append({"method": method, "url": url, **kwargs})
        if self.factory.error is not None:
            raise self.factory.error
        return self.factory.responses.pop(0)

    def get(self, url, **kwargs):
        return self._respond("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._respond("POST", url, kwargs)


class FakeSessionFactory:
    """Stands in for aiohttp.ClientSession; replays canned responses."""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.sessions: List[Dict[str, Any]] = []

    def __call__(self, **kwargs):
        self.sessions.append(kwargs)
        return FakeSession(self, kwargs)


class FakeRedirects:
    def __init__(self, final_url: Optional[str] = None, error: Optional[Exception] = None):
        self.final_url = final_url
        self.error = error
        self.calls: List[str] = []

    async def fetch(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.final_url or url, 200


class FakeNominatim:
    def __init__(self, places: Optional[Dict[str, Coordinate]] = None, reverse_payload=None, unavailable=False):
        self.places = places or {}
        self.reverse_payload = reverse_payload
        self.unavailable = unavailable
        self.searches: List[str] = []
        self.reverses: List[Coordinate] = []

    async def search(self, text):
        self.searches.append(text)
        if self.unavailable:
            raise GeocodingUnavailableError("provider down")
        return self.places.get(text)

    async def reverse(self, coordinate):
        self.reverses.append(coordinate)
        if self.unavailable:
            raise GeocodingUnavailableError("provider down")
        return self.reverse_payload


def linestring_route(points, distance=1234.6, duration=98.4):
    return {
        "distance": distance,
        "duration": duration,
        "geometry": {"type": "LineString", "coordinates": [[p.lng, p.lat] for p in points]},
    }


class FakeOSRM:
    def __init__(self, route=None, error: Optional[RoutingFailedError] = None):
        self.route_payload = route
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def route(self, coordinates, profile, geometries):
        self.calls.append({"coordinates": list(coordinates), "profile": profile, "geometries": geometries})
        if self.error is not None:
            raise self.error
        payload = self.route_payload
        if payload is None and geometries == "geojson":
            payload = linestring_route(coordinates)
        elif payload is None:
            precision = 6 if geometries == "polyline6" else 5
            encoded = polyline.encode([(c.lat, c.lng) for c in coordinates], precision)
            payload = {"distance": 1000.0, "duration": 60.0, "geometry": encoded}
        return payload, f"https://osrm.test/route/v1/{profile}?overview=full&geometries={geometries}"


@pytest.fixture
def client_config():
    return ClientConfig(user_agent="RouteXplore-Test/1.0")


@pytest.fixture
def kochi():
    return Coordinate(lat=9.9312, lng=76.2673)


@pytest.fixture
def thrissur():
    return Coordinate(lat=10.5276, lng=76.2144)


def build_itinerary_service(redirects=None, nominatim=None, osrm=None):
    redirects = redirects or FakeRedirects()
    nominatim = nominatim or FakeNominatim()
    osrm = osrm or FakeOSRM()
    service = ItineraryService(
        canonicalizer=LinkCanonicalizer(redirects),
        geocoding_service=GeocodingService(nominatim),
        route_service=RouteService(osrm),
    )
    return service, redirects, nominatim, osrm
