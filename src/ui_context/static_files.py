"""Content typing, freshness checks and byte copying for UI assets."""

from __future__ import annotations

import contextlib
import mimetypes
import os
from datetime import timezone
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Mapping, Optional

NO_CONDITIONAL = -1
DEFAULT_CHUNK_SIZE = 1024

_FALLBACK_CONTENT_TYPES = {
    ".css": "text/css",
    ".js": "application/javascript",
    ".png": "image/png",
    ".html": "text/html",
}

_TEXT_APPLICATION_TYPES = {
    "application/javascript",
    "application/json",
    "application/xml",
}


def guess_content_type(
    name: str,
    overrides: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Resolve a MIME type for ``name``, or None when nothing matches."""
    extension = PurePosixPath(name).suffix.lower()
    if overrides and extension in overrides:
        return overrides[extension]

    mime_type, _ = mimetypes.guess_type(name)
    if mime_type:
        return mime_type

    return _FALLBACK_CONTENT_TYPES.get(extension)


def content_type_header(mime_type: str) -> str:
    """Append UTF-8 charset for text payloads."""
    if mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def last_modified(path: Path) -> float:
    """Return the modification time of ``path`` in seconds, 0 if unknown."""
    timestamp = 0.0
    try:
        with open(path, "rb") as handle:
            timestamp = os.fstat(handle.fileno()).st_mtime
    except OSError:
        timestamp = 0.0

    if not timestamp:
        try:
            timestamp = path.stat().st_mtime
        except OSError:
            timestamp = 0.0

    return timestamp


def parse_http_date(value: Optional[str]) -> int:
    if not value:
        return NO_CONDITIONAL
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return NO_CONDITIONAL
    if parsed is None:
        return NO_CONDITIONAL
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def format_http_date(timestamp: float) -> str:
    return formatdate(timestamp, usegmt=True)


def resource_modified(resource_timestamp: float, modified_since: int) -> bool:
    """Decide whether a resource must be resent to the client.

    Both values are compared in whole seconds. A zero resource timestamp means
    unknown and is always treated as modified.
    """
    if modified_since == NO_CONDITIONAL:
        return True

    resource_seconds = int(resource_timestamp)
    return resource_seconds == 0 or resource_seconds > int(modified_since)


def copy_resource(
    path: Path,
    output: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Copy ``path`` into ``output`` and return the number of bytes written.

    Both streams are closed when the copy ends, whether or not it failed.
    """
    written = 0
    with contextlib.closing(output), open(path, "rb") as source:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            output.write(chunk)
            written += len(chunk)
    return written
