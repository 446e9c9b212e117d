"""
Utility functions for Lumina AI Studio.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import os
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

# MIME types the image models take as inline data without re-encoding.
SUPPORTED_IMAGE_MIMES = ("image/png", "image/jpeg", "image/webp", "image/heic", "image/heif")


def get_logger(name: str) -> logging.Logger:
    """
    Return a namespaced logger with a single stream handler.

    Args:
        name: Short component name, e.g. "dispatcher"

    Returns:
        logging.Logger named ``lumina.<name>``
    """
    root = logging.getLogger("lumina")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
        root.setLevel(os.getenv("LUMINA_LOG_LEVEL", "INFO").upper())
    return root.getChild(name)


logger = get_logger("utils")


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str) -> Tuple[bytes, str]:
    """
    Split a base64 data URI into its bytes and MIME type.

    Raises:
        ValueError: if the string is not a base64 data URI
    """
    if not uri or not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")
    header, payload = uri.split(",", 1)
    meta = header[len("data:"):]
    if not meta.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    mime_type = meta[: -len(";base64")] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as exc:
        raise ValueError(f"Malformed base64 payload: {exc}") from exc


def load_media_bytes(file) -> Tuple[bytes, str]:
    """
    Read an uploaded file into memory.

    Videos are kept as-is. Images in a format the image models accept are
    kept as-is too; anything else Pillow can open is converted to PNG.

    Args:
        file: Streamlit UploadedFile (or any binary file object with ``type``)

    Returns:
        Tuple of (media_bytes, mime_type)
    """
    data = file.getvalue() if hasattr(file, "getvalue") else file.read()
    mime = (getattr(file, "type", None) or "").lower()

    if mime.startswith("video/"):
        return data, mime
    if mime in SUPPORTED_IMAGE_MIMES:
        return data, mime

    try:
        image = Image.open(io.BytesIO(data))
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    except UnidentifiedImageError as exc:
        raise ValueError(f"Unsupported media type: {mime or 'unknown'}") from exc
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    logger.info(f"Converted {mime or 'unknown'} upload to PNG")
    return buf.getvalue(), "image/png"


def first_inline_image(response) -> Optional[str]:
    """
    Return the first inline-data part of a generate_content response as a data URI.

    Returns:
        Data URI string, or None if the response carries no inline data
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return to_data_uri(inline.data, inline.mime_type or "image/png")
    return None
