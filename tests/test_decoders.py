import pytest

from routexplore.core.exceptions import UnrecognizedLinkFormatError
from routexplore.models.link import LinkSource
from routexplore.services.decoders import (
    ApiQueryDecoder,
    DecoderChain,
    DirectionsPathDecoder,
    SaddrDaddrDecoder,
    split_waypoints,
)


def test_directions_path_with_two_places():
    parsed = DecoderChain().decode("https://www.google.com/maps/dir/Thrissur/Kochi")
    assert parsed.start == "Thrissur"
    assert parsed.end == "Kochi"
    assert parsed.waypoints == []
    assert parsed.source is LinkSource.DIR_PATH


def test_directions_path_keeps_interior_order_and_stops_at_viewport():
    url = (
        "https://www.google.com/maps/dir/Thrissur/Chalakudy/Angamaly/Kochi/"
        "@10.2,76.3,10z/data=!4m2!4m1!3e0"
    )
    parsed = DirectionsPathDecoder().attempt(url)
    assert parsed.start == "Thrissur"
    assert parsed.end == "Kochi"
    assert parsed.waypoints == ["Chalakudy", "Angamaly"]


def test_directions_path_decodes_segments():
    parsed = DirectionsPathDecoder().attempt("https://www.google.com/maps/dir/Caf%C3%A9+de+Flore/Gare%20du%20Nord")
    assert parsed.start == "Café+de+Flore"
    assert parsed.end == "Gare du Nord"


def test_directions_path_stops_at_semicolon():
    parsed = DirectionsPathDecoder().attempt("https://maps.example/dir/A/B;extra/C")
    assert (parsed.start, parsed.end) == ("A", "B")


def test_directions_path_needs_two_segments():
    assert DirectionsPathDecoder().attempt("https://www.google.com/maps/dir/Thrissur/") is None
    assert DirectionsPathDecoder().attempt("https://www.google.com/maps/place/Thrissur") is None


def test_api_decoder_reads_waypoints_in_order():
    url = "https://www.google.com/maps/dir/?api=1&origin=Paris&destination=Lyon&waypoints=Orleans|Bourges"
    parsed = ApiQueryDecoder().attempt(url)
    assert parsed.start == "Paris"
    assert parsed.end == "Lyon"
    assert parsed.waypoints == ["Orleans", "Bourges"]
    assert parsed.source is LinkSource.API


def test_api_decoder_requires_origin_and_destination():
    assert ApiQueryDecoder().attempt("https://www.google.com/maps/dir/?api=1&origin=Paris") is None
    assert ApiQueryDecoder().attempt("https://www.google.com/maps/dir/?api=1&destination=Lyon") is None
    assert ApiQueryDecoder().attempt("https://www.google.com/maps/dir/?origin=Paris&destination=Lyon") is None


def test_api_decoder_wins_over_directions_path():
    url = "https://www.google.com/maps/dir/Berlin/Hamburg?api=1&origin=Paris&destination=Lyon"
    parsed = DecoderChain().decode(url)
    assert parsed.source is LinkSource.API
    assert (parsed.start, parsed.end) == ("Paris", "Lyon")


def test_saddr_daddr_decoder():
    url = "https://maps.google.com/maps?saddr=Thrissur&daddr=Kochi&waypoints=Aluva%7C%7CAngamaly"
    parsed = DecoderChain().decode(url)
    assert parsed.source is LinkSource.SADDR_DADDR
    assert (parsed.start, parsed.end) == ("Thrissur", "Kochi")
    assert parsed.waypoints == ["Aluva", "Angamaly"]


def test_saddr_daddr_requires_both():
    assert SaddrDaddrDecoder().attempt("https://maps.google.com/maps?saddr=Thrissur") is None


def test_unrecognized_link_carries_url():
    url = "https://www.google.com/maps/place/Kochi"
    with pytest.raises(UnrecognizedLinkFormatError) as excinfo:
        DecoderChain().decode(url)
    assert excinfo.value.final_url == url


def test_decoding_is_idempotent():
    url = "https://www.google.com/maps/dir/Thrissur/Aluva/Kochi"
    chain = DecoderChain()
    assert chain.decode(url) == chain.decode(url)


def test_custom_decoder_order_is_respected():
    url = "https://www.google.com/maps/dir/Berlin/Hamburg?api=1&origin=Paris&destination=Lyon"
    parsed = DecoderChain([DirectionsPathDecoder(), ApiQueryDecoder()]).decode(url)
    assert parsed.source is LinkSource.DIR_PATH


def test_split_waypoints_drops_empty_segments():
    assert split_waypoints("A||B|") == ["A", "B"]
    assert split_waypoints("") == []
    assert split_waypoints(None) == []
    assert split_waypoints("New%20York|10.5%2C76.2") == ["New York", "10.5,76.2"]
