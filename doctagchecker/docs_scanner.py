"""Enumeration of documentation files in the configured directories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
}


class DocsScanner:
    """Lists documentation files as repository-relative POSIX paths."""

    def __init__(self) -> None:
        self.logger = get_logger("docs_scanner")

    def scan(
        self,
        root: Path,
        directories: Sequence[Path],
        extensions: Sequence[str],
        *,
        recurse: bool = False,
    ) -> List[str]:
        root = root.resolve()
        found: List[str] = []
        for directory in directories:
            for path in self._walk(directory.resolve(), recurse):
                if path.suffix not in extensions:
                    continue
                relative = _relative(root, path)
                if relative not in found:
                    found.append(relative)
        self.logger.debug("Discovered %d documentation file(s)", len(found))
        return found

    def _walk(self, directory: Path, recurse: bool) -> Iterator[Path]:
        for entry in sorted(directory.iterdir(), key=lambda item: item.name):
            if entry.is_file():
                yield entry
            elif recurse and entry.is_dir() and not entry.is_symlink():
                if entry.name in _EXCLUDED_DIRS:
                    continue
                yield from self._walk(entry, recurse)


def _relative(root: Path, path: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["DocsScanner"]
