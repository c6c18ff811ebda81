"""Decoders for the map link conventions we understand.

Each decoder is a pure function of the canonical URL. The chain tries them in
a fixed priority order and keeps the first match; partial results from
different decoders are never combined.
"""
from abc import ABC, abstractmethod
import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import parse_qs, unquote, urlsplit

from routexplore.core.exceptions import UnrecognizedLinkFormatError
from routexplore.models.link import LinkSource, ParsedLink

logger = logging.getLogger(__name__)


def _query_params(url: str) -> Dict[str, List[str]]:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


def _first(params: Dict[str, List[str]], name: str) -> Optional[str]:
    values = params.get(name)
    if not values:
        return None
    return values[0] or None


def split_waypoints(raw: Optional[str]) -> List[str]:
    """Split a pipe-delimited waypoint parameter, dropping empty segments."""
    if not raw:
        return []
    segments = (unquote(segment).strip() for segment in raw.split("|"))
    return [segment for segment in segments if segment]


class LinkDecoder(ABC):
    source: LinkSource

    @abstractmethod
    def attempt(self, url: str) -> Optional[ParsedLink]:
        """Return the decoded link, or None if this convention does not apply."""
        pass


class ApiQueryDecoder(LinkDecoder):
    """``?api=1&origin=..&destination=..&waypoints=a|b``"""

    source = LinkSource.API

    def attempt(self, url: str) -> Optional[ParsedLink]:
        params = _query_params(url)
        if _first(params, "api") != "1":
            return None
        origin = _first(params, "origin")
        destination = _first(params, "destination")
        if not origin or not destination:
            return None
        return ParsedLink(
            start=unquote(origin),
            end=unquote(destination),
            waypoints=split_waypoints(_first(params, "waypoints")),
            source=self.source,
        )


class DirectionsPathDecoder(LinkDecoder):
    """``/maps/dir/Start/Via/End/@lat,lng,zoom``"""

    source = LinkSource.DIR_PATH
    marker = "/dir/"
    stop_chars = ("@", ";")

    def attempt(self, url: str) -> Optional[ParsedLink]:
        path = urlsplit(url).path
        index = path.find(self.marker)
        if index == -1:
            return None
        remainder = path[index + len(self.marker):]
        for ch in self.stop_chars:
            cut = remainder.find(ch)
            if cut != -1:
                remainder = remainder[:cut]
        segments = [unquote(s) for s in remainder.split("/") if s]
        if len(segments) < 2:
            return None
        return ParsedLink(
            start=segments[0],
            end=segments[-1],
            waypoints=segments[1:-1],
            source=self.source,
        )


class SaddrDaddrDecoder(LinkDecoder):
    """Legacy ``?saddr=..&daddr=..`` links."""

    source = LinkSource.SADDR_DADDR

    def attempt(self, url: str) -> Optional[ParsedLink]:
        params = _query_params(url)
        saddr = _first(params, "saddr")
        daddr = _first(params, "daddr")
        if not saddr or not daddr:
            return None
        return ParsedLink(
            start=unquote(saddr),
            end=unquote(daddr),
            waypoints=split_waypoints(_first(params, "waypoints")),
            source=self.source,
        )


DEFAULT_DECODERS: Sequence[LinkDecoder] = (
    ApiQueryDecoder(),
    DirectionsPathDecoder(),
    SaddrDaddrDecoder(),
)


class DecoderChain:
    def __init__(self, decoders: Sequence[LinkDecoder] = DEFAULT_DECODERS):
        self.decoders = tuple(decoders)

    def decode(self, url: str) -> ParsedLink:
        for decoder in self.decoders:
            try:
                parsed = decoder.attempt(url)
            except ValueError as e:
                # urlsplit rejects malformed netlocs such as unbalanced brackets
                logger.debug(f"Decoder '{decoder.source.value}' could not parse {url}: {e}")
                parsed = None
            if parsed is not None:
                logger.info(f"Decoded link with '{decoder.source.value}' decoder: {url}")
                return parsed
            logger.debug(f"Decoder '{decoder.source.value}' did not match: {url}")
        logger.warning(f"No decoder matched link: {url}")
        raise UnrecognizedLinkFormatError(final_url=url)
