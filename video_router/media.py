"""
Conditioning image loading and encoding.

Images are read fully into memory and base64 encoded together with their
MIME type. Images larger than the payload limit are recompressed as JPEG
with Pillow so that providers do not reject the request as too large.
"""

import base64
import mimetypes
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image as pil_image

from .exceptions import InvalidRequestError
from .logger import get_library_logger
from .models import ConditioningImage

IMAGE_MIME_PREFIX = "image/"
DEFAULT_MAX_SIZE_KB = 800
JPEG_QUALITY_STEPS = (85, 75, 65, 55, 45)
MAX_DIMENSIONS = (1920, 1080)

ImageSource = Union[str, Path, bytes, BinaryIO]


def guess_mime_type(name: str) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type


def load_conditioning_image(
    source: ImageSource,
    mime_type: Optional[str] = None,
    max_size_kb: int = DEFAULT_MAX_SIZE_KB
) -> ConditioningImage:
    """
    Read a conditioning image and encode it for a provider request.

    Args:
        source: File path, raw bytes, or a binary file object
        mime_type: Declared MIME type. Guessed from the file name when omitted.
        max_size_kb: Size above which the image is recompressed

    Returns:
        ConditioningImage with base64 payload and MIME type

    Raises:
        InvalidRequestError: If the file is missing, empty, or not an image
    """
    logger = get_library_logger()
    data, name = _read_source(source)

    if mime_type is None and name:
        mime_type = guess_mime_type(name)
    if not mime_type:
        raise InvalidRequestError("Could not determine MIME type for conditioning image")
    if not mime_type.startswith(IMAGE_MIME_PREFIX):
        raise InvalidRequestError(f"Conditioning image must be an image, got '{mime_type}'")
    if not data:
        raise InvalidRequestError("Conditioning image is empty")

    size_kb = len(data) / 1024
    if size_kb > max_size_kb:
        logger.debug(f"Compressing conditioning image ({size_kb:.0f}KB) to under {max_size_kb}KB")
        data = compress_image(data, max_size_kb)
        mime_type = "image/jpeg"

    encoded = base64.b64encode(data).decode("utf-8")
    return ConditioningImage(mime_type=mime_type, image_bytes=encoded)


def _read_source(source: ImageSource):
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), None

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise InvalidRequestError(f"Conditioning image not found: {path}")
        with path.open("rb") as f:
            return f.read(), path.name

    data = source.read()
    return data, getattr(source, "name", None)


def compress_image(data: bytes, max_size_kb: int = DEFAULT_MAX_SIZE_KB) -> bytes:
    """
    Recompress an image as JPEG until it fits under ``max_size_kb``.

    Quality is reduced step by step; if that is not enough the image is
    resized to fit within 1920x1080 as a last resort.

    Raises:
        InvalidRequestError: If the data cannot be decoded as an image
    """
    logger = get_library_logger()
    try:
        img = pil_image.open(BytesIO(data))
        img.load()
    except (OSError, ValueError) as e:
        raise InvalidRequestError(f"Conditioning image could not be decoded: {e}")

    img = _convert_to_rgb(img)

    for quality in JPEG_QUALITY_STEPS:
        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
        compressed_size_kb = len(buffer.getvalue()) / 1024
        if compressed_size_kb <= max_size_kb:
            logger.info(
                f"Compressed conditioning image: {len(data) / 1024:.0f}KB -> "
                f"{compressed_size_kb:.0f}KB (quality={quality})"
            )
            return buffer.getvalue()

    logger.warning("Resizing conditioning image to reduce size further")
    img.thumbnail(MAX_DIMENSIONS)
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=JPEG_QUALITY_STEPS[0], optimize=True)
    return buffer.getvalue()


def _convert_to_rgb(img):
    """JPEG has no alpha channel; flatten transparent images onto white."""
    if img.mode in ("RGBA", "LA", "P"):
        if img.mode == "P":
            img = img.convert("RGBA")
        background = pil_image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img
