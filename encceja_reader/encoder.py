"""
Base64 encoding of report card files for inline model payloads.
"""

import asyncio
import base64
from pathlib import Path

from .config import MIME_TYPES


async def encode_file(file_path: Path) -> str:
    """
    Read a file and return its content as base64.

    The read runs in a worker thread so the event loop is not blocked.

    Args:
        file_path: Path to the image or PDF.

    Returns:
        Base64 string without any data-URI prefix.

    Raises:
        OSError: If the file cannot be read.
    """
    data = await asyncio.to_thread(Path(file_path).read_bytes)
    return encode_bytes(data)


def encode_bytes(data: bytes) -> str:
    """Encode raw bytes as an ASCII base64 string."""
    return base64.b64encode(data).decode("ascii")


def strip_data_uri(value: str) -> str:
    """
    Remove a ``data:<mime>;base64,`` prefix if present.

    Args:
        value: Base64 payload, optionally wrapped as a data URI.

    Returns:
        The bare base64 payload.
    """
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def guess_mime_type(file_path: Path) -> str:
    """
    Map a file suffix to the MIME type sent alongside the payload.

    Raises:
        ValueError: If the suffix is not a supported image or PDF type.
    """
    suffix = Path(file_path).suffix.lower()
    if suffix not in MIME_TYPES:
        raise ValueError(f"Unsupported file type '{suffix}' for {file_path}")
    return MIME_TYPES[suffix]
