from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from routexplore.models.base import ApiModel


class LinkSource(str, Enum):
    API = "api=1"
    DIR_PATH = "dir-path"
    SADDR_DADDR = "saddr-daddr"


class ParsedLink(BaseModel):
    """Raw textual endpoints extracted by exactly one decoder."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    waypoints: List[str] = Field(default_factory=list)
    source: LinkSource


class LinkMeta(ApiModel):
    input_link: str
    final_url: str
    parsed_from: Optional[LinkSource] = None
