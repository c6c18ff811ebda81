from functools import lru_cache
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseModel):
    """Outbound client configuration shared by every request."""

    model_config = ConfigDict(frozen=True)

    user_agent: str
    link_resolve_timeout: float = 10.0
    link_max_redirects: int = 10
    geocode_timeout: float = 10.0
    reverse_geocode_timeout: float = 8.0
    routing_timeout: float = 15.0
    places_timeout: float = 25.0
    details_timeout: float = 10.0


class PlacesConfig(BaseModel):
    """Tourism tags used when the caller does not pass explicit types."""

    model_config = ConfigDict(frozen=True)

    default_types: Tuple[str, ...] = (
        "attraction",
        "viewpoint",
        "museum",
        "gallery",
        "aquarium",
        "zoo",
        "theme_park",
        "artwork",
        "monument",
        "archaeological_site",
        "information",
        "picnic_site",
        "camp_site",
    )
    accommodation_types: Tuple[str, ...] = (
        "hotel",
        "hostel",
        "guest_house",
        "motel",
        "apartment",
        "resort",
        "chalet",
        "alpine_hut",
        "caravan_site",
    )
    max_limit: int = 200


class Settings(BaseSettings):
    # API Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5050
    ALLOWED_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Outbound identity
    USER_AGENT: str = "RouteXplore/1.0 (contact: example@routexplore.app)"

    # Provider endpoints
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    OSRM_URL: str = "https://router.project-osrm.org"
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    WIKIDATA_URL: str = "https://www.wikidata.org/wiki/Special:EntityData"

    # Timeouts in seconds
    LINK_RESOLVE_TIMEOUT: float = 10.0
    LINK_MAX_REDIRECTS: int = 10
    GEOCODE_TIMEOUT: float = 10.0
    REVERSE_GEOCODE_TIMEOUT: float = 8.0
    ROUTING_TIMEOUT: float = 15.0
    PLACES_TIMEOUT: float = 25.0
    DETAILS_TIMEOUT: float = 10.0

    # Environment name
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            user_agent=self.USER_AGENT,
            link_resolve_timeout=self.LINK_RESOLVE_TIMEOUT,
            link_max_redirects=self.LINK_MAX_REDIRECTS,
            geocode_timeout=self.GEOCODE_TIMEOUT,
            reverse_geocode_timeout=self.REVERSE_GEOCODE_TIMEOUT,
            routing_timeout=self.ROUTING_TIMEOUT,
            places_timeout=self.PLACES_TIMEOUT,
            details_timeout=self.DETAILS_TIMEOUT,
        )


@lru_cache()  # Cache the settings object for performance
def get_settings() -> Settings:
    return Settings()
