"""
File helpers for uploads: MIME type detection and async reads of local files.
"""

import mimetypes
from pathlib import Path

import aiofiles

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_content_type(filename: str | Path) -> str:
    """
    Get MIME content type for a file name.

    Args:
        filename: File name or path

    Returns:
        MIME content type string
    """
    content_type, _ = mimetypes.guess_type(str(filename))
    return content_type or DEFAULT_CONTENT_TYPE


async def read_file_bytes(file_path: str | Path) -> bytes:
    """Read a local file into memory without blocking the event loop."""
    async with aiofiles.open(file_path, "rb") as f:
        return await f.read()
