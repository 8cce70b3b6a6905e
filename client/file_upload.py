import base64
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional, Tuple

import httpx

from client.endpoints import Endpoints
from client.http_client import BookStoreHttpClient

logger = logging.getLogger(__name__)


class FileUpload:
    """Sends book cover images to the API"""

    def __init__(self, http_client: BookStoreHttpClient, endpoints: Optional[Endpoints] = None):
        self.http_client = http_client
        self.endpoints = endpoints or Endpoints()

    @staticmethod
    def generate_pic_name(path: Path) -> str:
        return f"{uuid.uuid4().hex}{path.suffix.lower()}"

    def encode_file(self, path: str) -> Tuple[str, str]:
        """Return (pic_name, base64 content) for a create or update body"""
        file_path = Path(path)
        content = file_path.read_bytes()
        return self.generate_pic_name(file_path), base64.b64encode(content).decode("ascii")

    async def upload_file(self, book_id: int, path: str, pic_name: Optional[str] = None) -> bool:
        file_path = Path(path)
        name = pic_name or self.generate_pic_name(file_path)
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        files = {"file": (name, file_path.read_bytes(), content_type)}
        try:
            response = await self.http_client.put(self.endpoints.book_image(book_id), files=files)
        except httpx.HTTPError as e:
            logger.error(f"Image upload for book {book_id} failed: {e}")
            return False
        return response.status_code == 204

    async def remove_file(self, book_id: int) -> bool:
        try:
            response = await self.http_client.delete(self.endpoints.book_image(book_id))
        except httpx.HTTPError as e:
            logger.error(f"Image removal for book {book_id} failed: {e}")
            return False
        return response.status_code == 204
