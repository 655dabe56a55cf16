"""Core data models shared across doctagchecker components."""

from dataclasses import dataclass, field
from typing import List, Mapping, Tuple


@dataclass(frozen=True)
class TagSet:
    """Tags declared by a single documentation file."""

    files: Tuple[str, ...] = ()
    directories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of cross-referencing documentation tags with a pull request."""

    unknown_tags: Mapping[str, List[str]] = field(default_factory=dict)
    stale_docs: Mapping[str, List[str]] = field(default_factory=dict)
    resolved_paths: Mapping[str, str] = field(default_factory=dict)

    @property
    def has_warnings(self) -> bool:
        return bool(self.unknown_tags) or bool(self.stale_docs)


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by the pull request, as reported by the platform."""

    filename: str


@dataclass(frozen=True)
class Comment:
    """A comment on the pull request's issue thread."""

    id: int
    author: str
    body: str
