from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote
import asyncio
import logging
import aiohttp

from routexplore.repositories.base import BaseHttpRepository

logger = logging.getLogger(__name__)


class WikipediaRepository(BaseHttpRepository):
    """Wikipedia REST summaries and Wikidata sitelinks."""

    def __init__(self, wikidata_url: str, config, session_factory=None):
        super().__init__(config, session_factory)
        self.wikidata_url = wikidata_url.rstrip("/")

    @staticmethod
    def page_url(lang: str, title: str) -> str:
        return f"https://{lang}.wikipedia.org/wiki/{quote(title, safe='')}"

    async def wikidata_sitelink(self, wikidata_id: str) -> Optional[Tuple[str, str]]:
        """Return ``(lang, title)`` of the preferred Wikipedia article for an entity."""
        url = f"{self.wikidata_url}/{quote(wikidata_id, safe='')}.json"
        try:
            status, data = await self._get_json(url, timeout=self.config.details_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Wikidata lookup failed for '{wikidata_id}': {e!r}")
            return None
        if status >= 400 or not isinstance(data, dict):
            logger.warning(f"Wikidata answered {status} for '{wikidata_id}'")
            return None

        entity = (data.get("entities") or {}).get(wikidata_id) or {}
        sitelinks = entity.get("sitelinks") or {}
        preferred = sitelinks.get("enwiki") or next(
            (s for s in sitelinks.values() if str(s.get("site", "")).endswith("wiki")), None
        )
        if not preferred or not preferred.get("title"):
            return None
        return preferred["site"].replace("wiki", ""), preferred["title"]

    async def summary(self, lang: str, title: str) -> Optional[Dict[str, Any]]:
        url = f"https://{lang}.wikipedia.org/api/rest_v1/page/summary/{quote(title, safe='')}"
        logger.info(f"Fetching Wikipedia summary: {url}")
        try:
            status, data = await self._get_json(url, timeout=self.config.details_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Wikipedia summary failed for {lang}:{title}: {e!r}")
            return None
        if status >= 400:
            logger.info(f"No Wikipedia summary for {lang}:{title} (status={status})")
            return None
        return data if isinstance(data, dict) else {}
