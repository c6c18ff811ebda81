from typing import Tuple
import logging

from routexplore.repositories.base import BaseHttpRepository

logger = logging.getLogger(__name__)


class RedirectRepository(BaseHttpRepository):
    """Redirect-following GET used to expand shortened map links."""

    def _headers(self):
        return {"User-Agent": self.config.user_agent}

    async def fetch(self, url: str) -> Tuple[str, int]:
        """Follow redirects for ``url`` and return ``(final_url, status)``.

        Any status code is accepted. Transport errors (timeouts, DNS,
        refused connections, too many redirects) propagate to the caller.
        """
        logger.info(f"Resolving link: '{url}'")
        async with self._session(self.config.link_resolve_timeout) as session:
            async with session.get(
                url,
                allow_redirects=True,
                max_redirects=self.config.link_max_redirects,
            ) as response:
                final_url = str(response.url) if response.history else None
                location = response.headers.get("Location")
                resolved = final_url or location or url
                logger.info(
                    f"Resolved '{url}' to '{resolved}' (status={response.status}, redirects={len(response.history)})"
                )
                return resolved, response.status
