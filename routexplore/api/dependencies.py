from functools import lru_cache
from fastapi import Depends

from routexplore.core.settings import ClientConfig, PlacesConfig, get_settings
from routexplore.repositories.maps.nominatim import NominatimRepository
from routexplore.repositories.maps.osrm import OSRMRepository
from routexplore.repositories.maps.overpass import OverpassRepository
from routexplore.repositories.maps.redirects import RedirectRepository
from routexplore.repositories.wiki.wikipedia import WikipediaRepository
from routexplore.services.decoders import DecoderChain
from routexplore.services.details import PlaceDetailsService
from routexplore.services.geocoding import GeocodingService
from routexplore.services.itinerary import ItineraryService
from routexplore.services.links import LinkCanonicalizer
from routexplore.services.places import TouristPlacesService
from routexplore.services.routing import RouteService


@lru_cache()
def get_client_config() -> ClientConfig:
    """Immutable outbound client configuration."""
    return get_settings().client_config()


@lru_cache()
def get_places_config() -> PlacesConfig:
    return PlacesConfig()


def get_geocoding_service(config: ClientConfig = Depends(get_client_config)) -> GeocodingService:
    return GeocodingService(NominatimRepository(get_settings().NOMINATIM_URL, config))


def get_route_service(config: ClientConfig = Depends(get_client_config)) -> RouteService:
    return RouteService(OSRMRepository(get_settings().OSRM_URL, config))


def get_link_canonicalizer(config: ClientConfig = Depends(get_client_config)) -> LinkCanonicalizer:
    return LinkCanonicalizer(RedirectRepository(config))


def get_itinerary_service(
    canonicalizer: LinkCanonicalizer = Depends(get_link_canonicalizer),
    geocoding_service: GeocodingService = Depends(get_geocoding_service),
    route_service: RouteService = Depends(get_route_service),
) -> ItineraryService:
    """Get ItineraryService instance."""
    return ItineraryService(
        canonicalizer=canonicalizer,
        geocoding_service=geocoding_service,
        route_service=route_service,
        decoder_chain=DecoderChain(),
    )


def get_places_service(
    config: ClientConfig = Depends(get_client_config),
    places_config: PlacesConfig = Depends(get_places_config),
    geocoding_service: GeocodingService = Depends(get_geocoding_service),
) -> TouristPlacesService:
    return TouristPlacesService(
        OverpassRepository(get_settings().OVERPASS_URL, config),
        geocoding_service,
        places_config,
    )


def get_details_service(config: ClientConfig = Depends(get_client_config)) -> PlaceDetailsService:
    return PlaceDetailsService(WikipediaRepository(get_settings().WIKIDATA_URL, config))
