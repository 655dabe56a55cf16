"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping


class RepoBuilder:
    """Utility for writing files and folders into a throwaway repository."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def mkdirs(self, directories: Iterable[str]) -> None:
        for relative in directories:
            (self.root / relative).mkdir(parents=True, exist_ok=True)

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder"]
