# File utilities
import base64
import binascii
import io
import logging
from pathlib import Path

import aiofiles
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class InvalidImageError(ValueError):
    """Uploaded content is not a usable image"""


def safe_image_name(name: str) -> str:
    """
    Reduce a client supplied file name to its base name.
    Rejects empty names and dot entries.
    """
    cleaned = Path(name.replace("\\", "/")).name.strip()
    if not cleaned or cleaned in (".", ".."):
        raise InvalidImageError("Image name is empty")
    return cleaned


def decode_base64_file(content: str) -> bytes:
    """Decode base64 content, tolerating a data URL prefix"""
    if content.startswith("data:") and "," in content:
        content = content.split(",", 1)[1]
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError("File content is not valid base64") from e


def normalize_image(image_data: bytes, max_width: int = 1000, quality: int = 90) -> bytes:
    """
    Validate image bytes and downscale to max_width keeping aspect ratio.
    Images already within bounds are returned untouched.
    """
    try:
        img = Image.open(io.BytesIO(image_data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise InvalidImageError("File content is not a supported image") from e

    if img.width <= max_width:
        return image_data

    image_format = img.format or "JPEG"
    ratio = max_width / img.width
    new_height = max(1, int(img.height * ratio))
    img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    if image_format == "JPEG" and img.mode in ('RGBA', 'P'):
        img = img.convert('RGB')

    buffer = io.BytesIO()
    if image_format == "JPEG":
        img.save(buffer, format=image_format, quality=quality, optimize=True)
    else:
        img.save(buffer, format=image_format)
    logger.info(f"Resized image to {max_width}x{new_height}")
    return buffer.getvalue()


async def write_file(filepath: Path, content: bytes) -> None:
    filepath.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(filepath, 'wb') as f:
        await f.write(content)
    logger.info(f"File saved: {filepath}")


async def read_file(filepath: Path) -> bytes:
    async with aiofiles.open(filepath, 'rb') as f:
        return await f.read()
