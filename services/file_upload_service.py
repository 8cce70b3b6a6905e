import base64
import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from config import settings
from utils.file_utils import (
    InvalidImageError,
    decode_base64_file,
    normalize_image,
    read_file,
    safe_image_name,
    write_file,
)

logger = logging.getLogger(__name__)


class FileUploadService:
    """Stores book cover images inside UPLOADS_DIR"""

    @staticmethod
    def image_path(image_name: str) -> Path:
        return Path(settings.UPLOADS_DIR) / safe_image_name(image_name)

    @staticmethod
    async def save_image(image_name: str, content: bytes) -> str:
        """Validate, resize and store image bytes. Returns the stored name."""
        max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
        if len(content) > max_bytes:
            raise InvalidImageError(f"Image exceeds {settings.MAX_UPLOAD_SIZE_MB}MB")

        name = safe_image_name(image_name)
        data = normalize_image(content, max_width=settings.MAX_IMAGE_WIDTH)
        await write_file(Path(settings.UPLOADS_DIR) / name, data)
        return name

    @staticmethod
    async def save_base64_image(image_name: str, content: str) -> str:
        return await FileUploadService.save_image(image_name, decode_base64_file(content))

    @staticmethod
    async def save_upload_file(upload_file: UploadFile, image_name: Optional[str] = None) -> str:
        """Store a multipart upload, named after the upload unless a name is given"""
        name = image_name or upload_file.filename or ""
        content = await upload_file.read()
        return await FileUploadService.save_image(name, content)

    @staticmethod
    async def read_base64(image_name: Optional[str]) -> Optional[str]:
        """Return stored image as base64, or None if there is no file"""
        if not image_name:
            return None
        try:
            path = FileUploadService.image_path(image_name)
        except InvalidImageError:
            return None
        if not path.is_file():
            return None
        return base64.b64encode(await read_file(path)).decode('ascii')

    @staticmethod
    def remove_file(image_name: Optional[str]) -> bool:
        """Delete a stored image. Returns True if a file was removed."""
        if not image_name:
            return False
        try:
            path = FileUploadService.image_path(image_name)
        except InvalidImageError:
            return False
        if not path.is_file():
            return False
        path.unlink()
        logger.info(f"Removed image: {path}")
        return True
