"""Cross-referencing of documentation tags with the files changed in a pull request."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .logging import get_logger
from .models import AnalysisResult
from .resolver import find_by_name
from .tags import extract_tags

_LOGGER = get_logger("analysis")


class DocumentationError(RuntimeError):
    """Raised when a documentation file cannot be decoded as UTF-8."""


@dataclass
class _FileFindings:
    unknown: List[str] = field(default_factory=list)
    stale: List[str] = field(default_factory=list)


class _Resolver:
    """Memoised lookups against a repository tree that does not change mid-run."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._cache: Dict[tuple[str, bool], Optional[Path]] = {}

    def find(self, tag: str, *, directories_only: bool = False) -> Optional[Path]:
        key = (tag, directories_only)
        if key not in self._cache:
            self._cache[key] = find_by_name(self.root, tag, directories_only=directories_only)
        return self._cache[key]

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


def changed_names(changed_files: Iterable[str]) -> Set[str]:
    """Reduce changed paths to the base names tags are compared against."""
    return {os.path.basename(path) for path in changed_files if path}


def check_documentation(
    doc_files: Sequence[str],
    changed_files: Iterable[str],
    *,
    root: Path,
    source_extensions: Sequence[str],
    doc_extensions: Sequence[str],
) -> AnalysisResult:
    """Validate the tags of every documentation file and detect stale docs.

    ``doc_files`` are paths relative to ``root``. Each file is read and
    analysed on its own; a file that cannot be read aborts the whole check.
    """
    resolver = _Resolver(Path(root))
    changed = changed_names(changed_files)
    unknown_tags: Dict[str, List[str]] = {}
    stale_docs: Dict[str, List[str]] = {}
    resolved_paths: Dict[str, str] = {}

    for doc_file in doc_files:
        text = _read_doc(resolver.root / doc_file, doc_file)
        findings = _analyze_file(
            doc_file,
            text,
            changed,
            resolver,
            resolved_paths,
            source_extensions=source_extensions,
            doc_extensions=doc_extensions,
        )
        if findings.unknown:
            unknown_tags[doc_file] = findings.unknown
        if findings.stale:
            stale_docs[doc_file] = findings.stale

    _LOGGER.info(
        "Checked %d documentation file(s): %d with unknown tags, %d stale",
        len(doc_files),
        len(unknown_tags),
        len(stale_docs),
    )
    return AnalysisResult(
        unknown_tags=unknown_tags,
        stale_docs=stale_docs,
        resolved_paths=resolved_paths,
    )


def _analyze_file(
    doc_file: str,
    text: str,
    changed: Set[str],
    resolver: _Resolver,
    resolved_paths: Dict[str, str],
    *,
    source_extensions: Sequence[str],
    doc_extensions: Sequence[str],
) -> _FileFindings:
    findings = _FileFindings()
    tags = extract_tags(text, source_extensions)
    file_tags = list(tags.files)
    _LOGGER.debug(
        "%s: %d file tag(s), %d directory tag(s)",
        doc_file,
        len(tags.files),
        len(tags.directories),
    )

    expanded: Set[Path] = set()
    for directory_tag in tags.directories:
        directory = resolver.find(directory_tag, directories_only=True)
        if directory is None:
            findings.unknown.append(directory_tag)
            continue
        real = directory.resolve()
        if real in expanded:
            continue
        expanded.add(real)
        # Only direct children; nested folders are not expanded.
        file_tags.extend(_direct_children(directory, doc_extensions))

    resolved: List[str] = []
    for tag in dict.fromkeys(file_tags):
        match = resolver.find(tag)
        if match is None:
            findings.unknown.append(tag)
            continue
        resolved.append(tag)
        resolved_paths.setdefault(tag, resolver.relative(match))

    if os.path.basename(doc_file) in changed:
        return findings

    for tag in resolved:
        if tag in changed:
            findings.stale.append(tag)
    return findings


def _read_doc(path: Path, doc_file: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentationError(
            f"Documentation file '{doc_file}' is not valid UTF-8: {exc.reason} at byte {exc.start}"
        ) from exc


def _direct_children(directory: Path, extensions: Sequence[str]) -> List[str]:
    return [
        child.name
        for child in sorted(directory.iterdir(), key=lambda item: item.name)
        if child.is_file() and child.suffix in extensions
    ]


__all__ = ["DocumentationError", "changed_names", "check_documentation"]
