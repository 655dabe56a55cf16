"""Name-based lookup of tags inside the repository tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Set

from .logging import get_logger

_LOGGER = get_logger("resolver")


class ResolutionError(RuntimeError):
    """Raised when the search root itself cannot be traversed."""


def tag_name(tag: str) -> str:
    """Return the name a tag is matched by (``fake/path/`` -> ``path``)."""
    return os.path.basename(tag.rstrip("/\\"))


def find_by_name(
    root: Path | str, tag: str, *, directories_only: bool = False
) -> Optional[Path]:
    """Depth-first search of ``root`` for the first entry named like ``tag``.

    Entries are visited in directory-listing order and each entry is compared
    before descending into it, so a shallow match wins over a deeper one only
    when it is listed first. Symlinks are followed; a directory reached twice
    through links is only searched once. Returns ``None`` when nothing matches.

    Raises ``ResolutionError`` when ``root`` is missing, is not a directory or
    cannot be listed.
    """
    root_path = Path(root)
    try:
        entries = list(os.scandir(root_path))
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise ResolutionError(f"Search root '{root_path}' does not exist or is not a directory") from exc
    except PermissionError as exc:
        raise ResolutionError(f"Search root '{root_path}' cannot be read") from exc

    name = tag_name(tag)
    if not name:
        return None
    return _search(entries, name, directories_only, {os.path.realpath(root_path)})


def _search(
    entries: list[os.DirEntry[str]],
    name: str,
    directories_only: bool,
    seen: Set[str],
) -> Optional[Path]:
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        if entry.name == name and (is_dir or not directories_only):
            return Path(entry.path)
        if not is_dir:
            continue
        real = os.path.realpath(entry.path)
        if real in seen:
            continue
        seen.add(real)
        try:
            children = list(os.scandir(entry.path))
        except OSError as exc:
            _LOGGER.warning("Skipping unreadable directory %s: %s", entry.path, exc)
            continue
        found = _search(children, name, directories_only, seen)
        if found is not None:
            return found
    return None


__all__ = ["ResolutionError", "find_by_name", "tag_name"]
