from typing import Any, Callable, Dict, Optional, Tuple
import aiohttp

from routexplore.core.settings import ClientConfig

SessionFactory = Callable[..., aiohttp.ClientSession]


class BaseHttpRepository:
    """Base class for repositories talking to a JSON HTTP provider.

    A new session is opened per call so that concurrent requests only share
    the immutable client configuration.
    """

    def __init__(self, config: ClientConfig, session_factory: Optional[SessionFactory] = None):
        self.config = config
        self._session_factory = session_factory or aiohttp.ClientSession

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.config.user_agent, "Accept": "application/json"}

    def _session(self, timeout: float) -> aiohttp.ClientSession:
        return self._session_factory(
            headers=self._headers(),
            timeout=aiohttp.ClientTimeout(total=timeout),
        )

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None, timeout: float = 10.0
    ) -> Tuple[int, Any]:
        """GET ``url`` and return the status code with the decoded body (None if not JSON)."""
        async with self._session(timeout) as session:
            async with session.get(url, params=params) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                return response.status, data
