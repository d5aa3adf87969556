"""
Module: images

Purpose:
    PNG encoding and decoding for question images.

Key Functions:
    - encode_png(): Pillow image -> PNG bytes
    - to_png_bytes(): Accept raw bytes or a Pillow image
    - decode_image(): Bytes -> Pillow image, or None if not an image

Dependencies:
    - PIL.Image: Image encoding/decoding

Used By:
    - manager.QuestionSetManager: save_image_for / open_image
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, bytearray, Image.Image]

# Modes Pillow writes to PNG without conversion
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


def encode_png(image: Image.Image) -> bytes:
    """
    Encode a Pillow image as PNG.

    Args:
        image: Any Pillow image. Modes PNG cannot store are converted to RGBA.

    Returns:
        PNG file bytes
    """
    if image.mode not in _PNG_MODES:
        image = image.convert("RGBA")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def to_png_bytes(image: ImageInput) -> bytes:
    """
    Normalize an image argument to bytes.

    Raw bytes are passed through untouched. Pillow images are encoded to PNG.

    Raises:
        TypeError: If image is neither bytes nor a Pillow image
    """
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    if isinstance(image, Image.Image):
        return encode_png(image)
    raise TypeError(f"Expected bytes or PIL.Image.Image, got {type(image).__name__}")


def decode_image(data: bytes) -> Optional[Image.Image]:
    """
    Decode image bytes.

    Returns:
        Fully loaded Pillow image, or None if data is not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.warning(f"Could not decode image ({len(data)} bytes): {e}")
        return None
