import asyncio

import aiohttp
import pytest

from conftest import FakeNominatim, FakeResponse, FakeSessionFactory
from routexplore.core.exceptions import GeocodingUnavailableError
from routexplore.models.base import Coordinate
from routexplore.repositories.maps.nominatim import NominatimRepository
from routexplore.services.geocoding import GeocodingService, derive_label, normalize_place_text


def test_coordinate_strings_skip_the_provider():
    nominatim = FakeNominatim()
    coordinate = asyncio.run(GeocodingService(nominatim).resolve_coordinates("10.5,76.2"))
    assert coordinate == Coordinate(lat=10.5, lng=76.2)
    assert nominatim.searches == []


def test_place_names_are_normalized_before_search(kochi):
    nominatim = FakeNominatim(places={"Fort Kochi": kochi})
    assert asyncio.run(GeocodingService(nominatim).resolve_coordinates("  Fort+Kochi ")) == kochi
    assert nominatim.searches == ["Fort Kochi"]


def test_unknown_place_or_provider_failure_is_none():
    assert asyncio.run(GeocodingService(FakeNominatim()).resolve_coordinates("Atlantis")) is None
    assert asyncio.run(GeocodingService(FakeNominatim(unavailable=True)).resolve_coordinates("Kochi")) is None
    assert asyncio.run(GeocodingService(FakeNominatim()).resolve_coordinates("   ")) is None


def test_resolve_label_uses_reverse_payload(kochi):
    nominatim = FakeNominatim(reverse_payload={"name": "Marine Drive", "display_name": "Marine Drive, Kochi"})
    assert asyncio.run(GeocodingService(nominatim).resolve_label(kochi)) == "Marine Drive"


def test_resolve_label_failure_is_none(kochi):
    assert asyncio.run(GeocodingService(FakeNominatim(unavailable=True)).resolve_label(kochi)) is None
    assert asyncio.run(GeocodingService(FakeNominatim(reverse_payload=None)).resolve_label(kochi)) is None


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"name": "Eiffel Tower", "address": {"tourism": "attraction"}}, "Eiffel Tower"),
        ({"name": "", "address": {"tourism": "Hill Palace", "road": "MG Road", "city": "Kochi"}}, "Hill Palace"),
        ({"address": {"amenity": "Town Hall", "road": "MG Road"}}, "Town Hall"),
        ({"address": {"road": "MG Road", "city": "Kochi", "state": "Kerala"}}, "MG Road, Kochi"),
        ({"address": {"road": "NH 544", "town": "Aluva"}}, "NH 544, Aluva"),
        ({"address": {"village": "Kalady", "state": "Kerala"}}, "Kalady, Kerala"),
        ({"address": {"suburb": "Edappally", "county": "Ernakulam", "city": "Kochi"}}, "Edappally, Ernakulam"),
        ({"address": {"city": "Kochi", "state": "Kerala"}}, "Kochi, Kerala"),
        ({"address": {"road": "Unnamed"}, "display_name": "Somewhere, India"}, "Somewhere, India"),
        ({"address": {}}, None),
    ],
)
def test_derive_label_priority(payload, expected):
    assert derive_label(payload) == expected


def test_normalize_place_text():
    assert normalize_place_text(" New+York ") == "New York"


def test_nominatim_search_parses_first_result(client_config):
    factory = FakeSessionFactory(FakeResponse(payload=[{"lat": "9.93", "lon": "76.26"}]))
    repository = NominatimRepository("https://nominatim.test/", client_config, session_factory=factory)
    assert asyncio.run(repository.search("Kochi")) == Coordinate(lat=9.93, lng=76.26)
    call = factory.calls[0]
    assert call["url"] == "https://nominatim.test/search"
    assert call["params"] == {"q": "Kochi", "format": "json", "limit": "1"}
    assert factory.sessions[0]["headers"]["User-Agent"] == "RouteXplore-Test/1.0"


def test_nominatim_search_without_results(client_config):
    factory = FakeSessionFactory(FakeResponse(payload=[]))
    repository = NominatimRepository("https://nominatim.test", client_config, session_factory=factory)
    assert asyncio.run(repository.search("Atlantis")) is None


def test_nominatim_errors_raise_unavailable(client_config):
    down = NominatimRepository(
        "https://nominatim.test", client_config,
        session_factory=FakeSessionFactory(error=aiohttp.ClientConnectionError("refused")),
    )
    with pytest.raises(GeocodingUnavailableError):
        asyncio.run(down.search("Kochi"))

    throttled = NominatimRepository(
        "https://nominatim.test", client_config,
        session_factory=FakeSessionFactory(FakeResponse(status=429, payload=None)),
    )
    with pytest.raises(GeocodingUnavailableError):
        asyncio.run(throttled.reverse(Coordinate(lat=1, lng=2)))


def test_nominatim_reverse_error_payload_is_none(client_config):
    factory = FakeSessionFactory(FakeResponse(payload={"error": "Unable to geocode"}))
    repository = NominatimRepository("https://nominatim.test", client_config, session_factory=factory)
    assert asyncio.run(repository.reverse(Coordinate(lat=0, lng=0))) is None
    assert factory.calls[0]["params"]["format"] == "jsonv2"
    assert factory.sessions[0]["timeout"].total == 8.0
