"""
Multipart upload builder.

An upload target is given as one slash-delimited path (``"docs/report.pdf"``
or ``"report.pdf"``). The builder splits it at the last ``/`` into the
directory and the object name (runs of ``/`` collapse to one), resolves the
upload content once, and renders the multipart body the upload endpoint
expects:

- a ``file`` part carrying the content, the object name and a content type;
- a ``path`` part carrying the directory, sent only when the directory is
  non-empty. An empty ``path`` field makes the service create nested folders
  named after the file (``docs/file.txt/file.txt``), so root uploads omit it.
"""

import os
import re
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

import httpx

from .base import InvalidArgumentError
from .utils.file_utils import DEFAULT_CONTENT_TYPE, get_content_type

# httpx.Request needs a URL to encode a body; nothing is sent to it
_ENCODER_URL = "http://multipart.invalid/"


@dataclass(frozen=True)
class BytesContent:
    """In-memory upload content."""

    data: bytes
    filename: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class FileContent:
    """Upload content read from a file-like handle."""

    handle: BinaryIO
    filename: str | None = None
    content_type: str | None = None


UploadContent = Union[BytesContent, FileContent]


def split_path(path: str) -> tuple[str, str]:
    """
    Split a combined upload path into ``(directory, filename)``.

    >>> split_path("documents/file.txt")
    ('documents', 'file.txt')
    >>> split_path("file.txt")
    ('', 'file.txt')
    >>> split_path("docs//a.txt")
    ('docs', 'a.txt')
    """
    if not isinstance(path, str):
        raise InvalidArgumentError("Upload path must be a string", field_name="path", field_value=repr(path))
    directory, _, filename = re.sub(r"/{2,}", "/", path).lstrip("/").rpartition("/")
    return directory, filename


def resolve_content(content: Any) -> UploadContent:
    """
    Resolve caller input to one of the upload content variants.

    Byte buffers become ``BytesContent``; objects with a ``read`` method become
    ``FileContent`` named after the handle's file. Anything else is rejected
    before a request is built.
    """
    if isinstance(content, (BytesContent, FileContent)):
        return content
    if isinstance(content, (bytes, bytearray, memoryview)):
        return BytesContent(bytes(content))
    if callable(getattr(content, "read", None)):
        name = getattr(content, "name", None)
        filename = os.path.basename(name) if isinstance(name, str) and name else None
        return FileContent(content, filename=filename)
    raise InvalidArgumentError(
        "Upload content must be bytes or a readable file-like object",
        field_name="content",
        field_value=type(content).__name__,
    )


@dataclass(frozen=True)
class UploadForm:
    """Multipart form for one upload request."""

    directory: str
    filename: str
    data: bytes
    content_type: str

    @property
    def fields(self) -> dict[str, str]:
        if not self.directory:
            return {}
        return {"path": self.directory}

    @property
    def files(self) -> dict[str, tuple[str, bytes, str]]:
        return {"file": (self.filename, self.data, self.content_type)}

    def encode(self) -> tuple[bytes, dict[str, str]]:
        """
        Render the multipart body.

        Returns:
            The body bytes and the body-specific headers, i.e. the
            ``Content-Type`` with its boundary.
        """
        request = httpx.Request("POST", _ENCODER_URL, data=self.fields, files=self.files)
        body = request.read()
        return body, {"Content-Type": request.headers["Content-Type"]}


def _read_handle(handle: Any) -> bytes:
    data = handle.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise InvalidArgumentError(
        "File handle returned neither bytes nor text",
        field_name="content",
        field_value=type(data).__name__,
    )


def build_upload_form(content: Any, path: str) -> UploadForm:
    """
    Build the multipart form for uploading ``content`` to ``path``.

    Args:
        content: Bytes, a readable file handle, or an ``UploadContent``
        path: Target path inside the bucket, directories included

    Returns:
        UploadForm ready to be encoded and dispatched

    Raises:
        InvalidArgumentError: If the content type is unsupported or no object
            name can be determined
    """
    resolved = resolve_content(content)
    directory, filename = split_path(path)
    filename = filename or resolved.filename or ""
    if not filename:
        raise InvalidArgumentError(
            "Upload path must end with an object name",
            field_name="path",
            field_value=path,
        )

    if isinstance(resolved, BytesContent):
        data = resolved.data
        content_type = resolved.content_type or DEFAULT_CONTENT_TYPE
    else:
        data = _read_handle(resolved.handle)
        content_type = resolved.content_type or get_content_type(resolved.filename or filename)

    return UploadForm(
        directory=directory,
        filename=filename,
        data=data,
        content_type=content_type,
    )
