"""Data Dragon client for the champion roster.

Data Dragon is Riot's static CDN: it carries names, titles and ids but no
performance statistics.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class DataDragonClient:
    """Fetches the game version list and champion roster."""

    def __init__(
        self,
        base_url: str = "https://ddragon.leagueoflegends.com",
        locale: str = "en_US",
        timeout: float = 10.0,
        fallback_version: str = "13.24.1",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the Data Dragon client.

        Args:
            base_url: CDN root
            locale: Locale for champion names/titles
            timeout: Request timeout in seconds
            fallback_version: Version used when the version list is unreachable
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.locale = locale
        self.timeout = timeout
        self.fallback_version = fallback_version
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.timeout, transport=self._transport)
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def latest_version(self) -> str:
        """Latest game version, or the fallback version if the list is unavailable."""
        try:
            response = self._get_client().get(f"{self.base_url}/api/versions.json")
            response.raise_for_status()
            versions = response.json()
            if isinstance(versions, list) and versions and isinstance(versions[0], str):
                return versions[0]
            logger.warning(f"Unexpected versions.json shape, using {self.fallback_version}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not fetch game versions, using {self.fallback_version}: {e}")
        return self.fallback_version

    def get_champions(self, version: Optional[str] = None) -> list[dict]:
        """Fetch the champion roster.

        Returns:
            List of dicts with int ``id``, Data Dragon ``key``, ``name`` and ``title``

        Raises:
            httpx.HTTPError: On transport failure or non-2xx response
            ValueError: If the body is not a Data Dragon champion document
        """
        version = version or self.latest_version()
        response = self._get_client().get(
            f"{self.base_url}/cdn/{version}/data/{self.locale}/champion.json"
        )
        response.raise_for_status()
        payload = response.json()
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected champion.json shape from Data Dragon {version}")

        champions = []
        for entry in data.values():
            if not isinstance(entry, dict):
                logger.debug(f"Skipping malformed Data Dragon entry: {entry!r}")
                continue
            try:
                champions.append({
                    "id": int(entry["key"]),
                    "key": entry.get("id", ""),
                    "name": entry.get("name", ""),
                    "title": entry.get("title", ""),
                })
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed Data Dragon entry: {entry!r}")
        logger.info(f"Fetched {len(champions)} champions from Data Dragon {version}")
        return champions
