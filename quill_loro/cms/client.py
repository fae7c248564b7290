# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Async REST client for the CMS backend

The client talks to one backend consistently. Its configuration (base URL and
credential provider) is injected explicitly; no credential is kept at module
level.

Usage:

    config = ClientConfig("https://cms.example.com/api", token_provider=lambda: token)
    async with CmsClient(config) as client:
        categories = await client.categories.list()
        await client.posts.update(document_id, {"data": {...}})
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


@dataclass
class ClientConfig:
    """
    Connection settings for the CMS backend

    Args:
        base_url: API root, e.g. "https://cms.example.com/api"
        token_provider: Returns the bearer token for each request (None for
            anonymous requests)
        timeout: Total request timeout in seconds
    """
    base_url: str
    token_provider: Optional[TokenProvider] = None
    timeout: float = 30.0

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers


class Resource:
    """CRUD calls for one collection of the CMS"""

    def __init__(self, client: "CmsClient", path: str, params: Optional[Dict[str, str]] = None):
        self._client = client
        self.path = path.strip("/")
        self._params = params or {}

    async def list(self) -> Any:
        return await self._client.request("GET", self.path, params=self._params)

    async def get(self, item_id: Any) -> Any:
        return await self._client.request("GET", f"{self.path}/{item_id}", params=self._params)

    async def create(self, payload: Dict[str, Any]) -> Any:
        return await self._client.request("POST", self.path, json=payload)

    async def update(self, item_id: Any, payload: Dict[str, Any]) -> Any:
        return await self._client.request("PUT", f"{self.path}/{item_id}", json=payload)

    async def delete(self, item_id: Any) -> Any:
        return await self._client.request("DELETE", f"{self.path}/{item_id}")


class CmsClient:
    """
    Async client holding one aiohttp session

    Use as an async context manager, or call close() when done.
    """

    def __init__(self, config: ClientConfig, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self._session = session
        self._owns_session = session is None

        self.categories = Resource(self, "categories")
        self.domains = Resource(self, "domains")
        self.tags = Resource(self, "tags", params={"populate": "*"})
        self.posts = Resource(self, "blogposts")

    async def __aenter__(self) -> "CmsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body

        Returns:
            Parsed JSON, or None for empty/non-JSON responses

        Raises:
            aiohttp.ClientResponseError: If the backend answers with an error status
        """
        url = self.config.url_for(path)
        session = self._get_session()
        logger.info(f"{method} {url}")
        try:
            async with session.request(method, url, headers=self.config.headers(), **kwargs) as response:
                response.raise_for_status()
                if response.content_type != "application/json":
                    return None
                return await response.json()
        except aiohttp.ClientResponseError as e:
            logger.error(f"{method} {url} failed with status {e.status}: {e.message}")
            raise
