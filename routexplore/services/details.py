from typing import Optional, Tuple
import logging

from routexplore.core.exceptions import PlaceDetailsNotFoundError
from routexplore.models.places import PlaceSummary
from routexplore.repositories.wiki.wikipedia import WikipediaRepository

logger = logging.getLogger(__name__)


def parse_wikipedia_param(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split ``"lang:Title"``; a bare title defaults to English."""
    if not value or not value.strip():
        return None
    lang, sep, title = value.strip().partition(":")
    if not sep:
        return "en", value.strip()
    title = title.strip()
    if not title:
        return None
    return lang.strip() or "en", title


class PlaceDetailsService:
    def __init__(self, repository: WikipediaRepository):
        self.repository = repository

    async def get_details(
        self,
        wikipedia: Optional[str] = None,
        title: Optional[str] = None,
        lang: Optional[str] = None,
        wikidata: Optional[str] = None,
    ) -> PlaceSummary:
        """Summary for a place given as ``lang:Title``, a title, or a Wikidata ID.

        Raises ValueError when no identifier is given and
        PlaceDetailsNotFoundError when nothing can be found.
        """
        wikidata = wikidata.strip() if wikidata and wikidata.strip() else None
        if wikipedia and wikipedia.strip():
            resolved = parse_wikipedia_param(wikipedia)
        elif title and title.strip():
            resolved = ((lang or "en").strip() or "en", title.strip())
        elif wikidata:
            resolved = await self.repository.wikidata_sitelink(wikidata)
            if not resolved:
                raise PlaceDetailsNotFoundError("Could not resolve Wikidata ID to a Wikipedia title")
        else:
            raise ValueError("Provide one of: wikipedia, or title (+optional lang), or wikidata")
        if not resolved:
            raise ValueError(f"Invalid wikipedia parameter: '{wikipedia}'")

        page_lang, page_title = resolved
        data = await self.repository.summary(page_lang, page_title)
        if data is None:
            raise PlaceDetailsNotFoundError(f"No Wikipedia summary found for {page_lang}:{page_title}")

        content_urls = data.get("content_urls")
        thumbnail = (data.get("thumbnail") or {}).get("source") or (data.get("originalimage") or {}).get("source")
        page_url = ((content_urls or {}).get("desktop") or {}).get("page") or self.repository.page_url(
            page_lang, page_title
        )
        return PlaceSummary(
            wikipedia=f"{page_lang}:{page_title}",
            title=data.get("title") or page_title,
            extract=data.get("extract"),
            description=data.get("description"),
            thumbnail=thumbnail,
            content_urls=content_urls,
            lang=page_lang,
            page_url=page_url,
            wikidata=wikidata,
        )
