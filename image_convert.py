from __future__ import annotations

import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from core.errors import ParseFailed, UnsupportedFileType
from models import ImageMaterial

log = logging.getLogger(__name__)


SUPPORTED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/webp"}

# Camera JPEGs with multi-picture data decode as MPO; the bytes are still JPEG.
FORMAT_ALIASES = {"MPO": "JPEG"}


def _detect_mime_type(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            fmt = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        log.warning("Image data could not be decoded: %s", exc)
        raise ParseFailed(f"Invalid image data: {exc}") from exc
    fmt = FORMAT_ALIASES.get(fmt, fmt)
    mime_type = Image.MIME.get(fmt or "")
    if not mime_type:
        raise ParseFailed(f"Unknown image format: {fmt}")
    return mime_type


def encode_image(data: bytes, declared_type: str | None = None) -> ImageMaterial:
    """
    Verify the bytes decode as an image and wrap them as base64 study material.
    The decoded format wins over the declared content type when they disagree.
    """
    mime_type = _detect_mime_type(data)
    if declared_type and declared_type != mime_type:
        log.info("Declared image type %s differs from decoded %s", declared_type, mime_type)
    if mime_type not in SUPPORTED_IMAGE_TYPES:
        raise UnsupportedFileType(f"Unsupported image type: {mime_type}")

    encoded = base64.b64encode(data).decode("ascii")
    log.info("Encoded %s image (%d bytes)", mime_type, len(data))
    return ImageMaterial(data=encoded, mime_type=mime_type)
