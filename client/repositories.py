import logging
from typing import Generic, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from client.endpoints import Endpoints
from client.http_client import BookStoreHttpClient
from client.models import Author, Book

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """CRUD calls against one API resource; failures come back as None/False"""

    model: Type[T]
    # Read-only fields the API ignores on writes
    write_exclude: set = set()

    def __init__(self, http_client: BookStoreHttpClient, endpoints: Optional[Endpoints] = None):
        self.http_client = http_client
        self.endpoints = endpoints or Endpoints()

    def _payload(self, obj: T) -> dict:
        return obj.model_dump(mode="json", exclude=self.write_exclude)

    async def get(self, url: str, id: int) -> Optional[T]:
        try:
            response = await self.http_client.get(f"{url}/{id}")
        except httpx.HTTPError as e:
            logger.error(f"GET {url}/{id} failed: {e}")
            return None

        if response.status_code != 200:
            return None
        return self.model.model_validate(response.json())

    async def get_all(self, url: str) -> List[T]:
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"GET {url} failed: {e}")
            return []

        if response.status_code != 200:
            return []
        return [self.model.model_validate(item) for item in response.json()]

    async def create(self, url: str, obj: T) -> bool:
        try:
            response = await self.http_client.post(url, json=self._payload(obj))
        except httpx.HTTPError as e:
            logger.error(f"POST {url} failed: {e}")
            return False
        return response.status_code == 201

    async def update(self, url: str, obj: T, id: int) -> bool:
        try:
            response = await self.http_client.put(f"{url}/{id}", json=self._payload(obj))
        except httpx.HTTPError as e:
            logger.error(f"PUT {url}/{id} failed: {e}")
            return False
        return response.status_code == 204

    async def delete(self, url: str, id: int) -> bool:
        try:
            response = await self.http_client.delete(f"{url}/{id}")
        except httpx.HTTPError as e:
            logger.error(f"DELETE {url}/{id} failed: {e}")
            return False
        return response.status_code == 204


class AuthorRepository(BaseRepository[Author]):
    model = Author
    write_exclude = {"books"}


class BookRepository(BaseRepository[Book]):
    model = Book
    write_exclude = {"author"}
