import logging
from typing import Optional

import httpx

from config import settings
from client.token_store import TokenStore

logger = logging.getLogger(__name__)


class BookStoreHttpClient:
    """Async HTTP client that sends the stored bearer token with every request"""

    def __init__(
        self,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_store = token_store or TokenStore()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.CLIENT_TIMEOUT),
            follow_redirects=True,
            transport=transport,
        )

    def _auth_headers(self) -> dict:
        token = self.token_store.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        response = await self._client.request(method, url, headers=headers, **kwargs)
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
