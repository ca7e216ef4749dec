"""Discover image files on disk and describe them for submission."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Iterator

# Formats mimetypes does not know on every platform.
_EXTRA_MIME_TYPES = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
}


def guess_mime_type(path: Path) -> str:
    """Return the MIME type implied by the file extension."""
    suffix = path.suffix.lower()
    if suffix in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def is_image_file(path: Path) -> bool:
    """Return True if the path's MIME type is an ``image/*`` type."""
    return guess_mime_type(path).startswith("image/")


def resolve_image_paths(
    start: Path,
    *,
    recursive: bool = True,
    include_hidden: bool = False,
) -> list[Path]:
    """Collect image paths starting from ``start``.

    A file is returned as-is when it is an image; directories are walked
    (recursively by default) and the matches are returned sorted.
    """
    start = start.expanduser()
    if not start.exists():
        raise FileNotFoundError(start)

    if start.is_file():
        return [start] if is_image_file(start) else []

    walker: Iterator[Path] = start.rglob("*") if recursive else start.iterdir()
    collected = [
        path
        for path in walker
        if path.is_file()
        and is_image_file(path)
        and (include_hidden or not _is_hidden(path.relative_to(start)))
    ]
    collected.sort()
    return collected


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)
