"""Helpers for turning uploaded bytes into :class:`UserImage` values."""

import base64
import binascii
import io
import logging
import re

from PIL import Image, UnidentifiedImageError

from .models import UserImage

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(?P<mime>[\w/.+-]+)?(;[\w=-]+)*;base64,(?P<data>.*)$", re.DOTALL)


class ImageDecodeError(ValueError):
    """Uploaded data is not an image Pillow can read.

    The message is intended to be displayed directly to the user.
    """

    pass


def decode_base64_payload(payload: str) -> bytes:
    """Decode a bare base64 string or a ``data:`` URL into raw bytes.

    Raises:
        ImageDecodeError: If the payload is empty or not valid base64
    """
    payload = payload.strip()
    match = _DATA_URL.match(payload)
    if match:
        payload = match.group("data")

    if not payload:
        raise ImageDecodeError("No image data provided")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError("Image data is not valid base64") from e


def load_user_image(data: bytes, name: str | None = None) -> UserImage:
    """Verify ``data`` is a readable image and wrap it as a UserImage.

    The MIME type comes from the format Pillow detects, not from the client.

    Args:
        data: Raw image bytes
        name: Original file name, if known

    Returns:
        UserImage carrying the base64 data and detected MIME type

    Raises:
        ImageDecodeError: If Pillow cannot identify or verify the image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        logger.warning(f"Rejected upload {name or '(unnamed)'}: {e}")
        raise ImageDecodeError("The uploaded file is not a supported image") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ImageDecodeError(f"Unsupported image format: {image_format}")

    logger.debug(f"Accepted {image_format} upload {name or '(unnamed)'} ({len(data)} bytes)")
    return UserImage(
        base64=base64.b64encode(data).decode("ascii"),
        mime_type=mime_type,
        name=name,
    )


def user_image_from_base64(payload: str, name: str | None = None) -> UserImage:
    """Decode a base64 payload (or data URL) and verify it as an image."""
    return load_user_image(decode_base64_payload(payload), name=name)
