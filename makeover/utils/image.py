"""Helpers for base64 room photos sent by the client"""
import base64
import binascii
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..exceptions import PayloadTooLargeError, ValidationError

DEFAULT_MIME_TYPE = "image/jpeg"


def decode_image(base64_image: str, max_size_mb: int) -> bytes:
    """Decode a base64 payload (plain or ``data:`` URL) and enforce the size limit."""
    if not base64_image:
        raise ValidationError("base64Image is empty")

    data = base64_image
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("base64Image is not valid base64 data")

    max_size = max_size_mb * 1024 * 1024
    if len(raw) > max_size:
        raise PayloadTooLargeError(
            f"Image is too large ({len(raw)} bytes). The maximum is {max_size_mb}MB."
        )
    return raw


def detect_mime_type(raw: bytes) -> str:
    """Identify the image format with Pillow and return its MIME type."""
    try:
        with Image.open(BytesIO(raw)) as img:
            mime_type = img.get_format_mimetype()
    except (UnidentifiedImageError, OSError):
        raise ValidationError("base64Image is not a supported image")
    return mime_type or DEFAULT_MIME_TYPE


def encode_image(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")
