"""
Inline image payloads: conversion between raw bytes, PIL images and data URIs.
"""

import base64
import io
import mimetypes
from typing import Optional, Tuple

from PIL import Image


def bytes_to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw file bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def file_to_data_uri(data: bytes, filename: Optional[str] = None, mime_type: Optional[str] = None) -> str:
    """
    Encode an uploaded file as a data URI.

    Args:
        data: File contents
        filename: Original file name, used to guess the MIME type
        mime_type: Explicit MIME type (takes precedence over ``filename``)

    Returns:
        data URI string
    """
    if mime_type is None and filename:
        mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        mime_type = _sniff_mime_type(data)
    return bytes_to_data_uri(data, mime_type)


def _sniff_mime_type(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format, "application/octet-stream")
    except (OSError, ValueError):
        return "application/octet-stream"


def image_to_data_uri(image: Image.Image, image_format: str = "JPEG", quality: int = 90) -> str:
    """Encode a PIL image as a data URI in ``image_format``."""
    buffer = io.BytesIO()
    if image_format.upper() == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")
    image.save(buffer, format=image_format, quality=quality)
    return bytes_to_data_uri(buffer.getvalue(), Image.MIME[image_format.upper()])


def split_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URI into its MIME type and decoded bytes.

    Raises:
        ValueError: If ``uri`` is not a base64 data URI
    """
    if not uri.startswith("data:") or ";base64," not in uri:
        raise ValueError("Not a base64 data URI")
    header, payload = uri[len("data:"):].split(";base64,", 1)
    return header, base64.b64decode(payload)


def data_uri_to_image(uri: str) -> Image.Image:
    """Decode a data URI into a PIL image."""
    _, data = split_data_uri(uri)
    image = Image.open(io.BytesIO(data))
    image.load()
    return image
