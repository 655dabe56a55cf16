"""Tag extraction from documentation text.

Two independent passes run over a document:

* file tags: tokens such as ``foo.cpp`` anywhere in the text. A token is a
  run of characters without ``/`` or whitespace, ending in one of the
  configured source extensions, with a word boundary on both sides. A path
  like ``src/foo.cpp`` therefore yields ``foo.cpp``.
* directory tags: whitespace-free tokens ending in ``/``, recognised only in
  the text after the first (case-insensitive) "Related Files and Folders"
  marker.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from .models import TagSet

RELATED_MARKER = "Related Files and Folders"

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]+$")
_MARKER_RE = re.compile(re.escape(RELATED_MARKER), re.IGNORECASE)
_DIRECTORY_TAG_RE = re.compile(r"(?<!\S)\S+/(?=\s|$)")


def file_tag_pattern(extensions: Sequence[str]) -> re.Pattern[str]:
    """Compile the file-tag pattern for the configured source extensions."""
    if not extensions:
        raise ValueError("At least one source file extension is required")
    for extension in extensions:
        if not _EXTENSION_RE.match(extension):
            raise ValueError(f"Invalid file extension '{extension}'")
    # Longest first so ``.cpp`` is preferred over ``.c`` at the same position.
    ordered = sorted({ext[1:] for ext in extensions}, key=lambda ext: (-len(ext), ext))
    alternation = "|".join(re.escape(ext) for ext in ordered)
    return re.compile(rf"\b[^/\s]+\.(?:{alternation})\b")


def extract_file_tags(text: str, extensions: Sequence[str]) -> List[str]:
    pattern = file_tag_pattern(extensions)
    return _unique(match.group(0) for match in pattern.finditer(text))


def extract_directory_tags(text: str) -> List[str]:
    parts = _MARKER_RE.split(text, maxsplit=1)
    if len(parts) < 2:
        return []
    return _unique(match.group(0) for match in _DIRECTORY_TAG_RE.finditer(parts[1]))


def extract_tags(text: str, extensions: Sequence[str]) -> TagSet:
    """Return the deduplicated file and directory tags declared in ``text``."""
    return TagSet(
        files=tuple(extract_file_tags(text, extensions)),
        directories=tuple(extract_directory_tags(text)),
    )


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


__all__ = [
    "RELATED_MARKER",
    "extract_directory_tags",
    "extract_file_tags",
    "extract_tags",
    "file_tag_pattern",
]
