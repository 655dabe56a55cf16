"""Markdown report rendering for pull request comments."""

from __future__ import annotations

import re
from typing import Callable, List, Mapping, Optional, Sequence

from .models import AnalysisResult

REPORT_MARKER = "<!-- doctagchecker:report -->"
REPORT_HEADER = f"{REPORT_MARKER}\n# DocTagChecker"
ALL_CLEAR_TEXT = "No warnings. All documentation tags resolve and no tagged file changed without its documentation."
ALL_CLEAR_MESSAGE = f"{REPORT_HEADER}\n\n{ALL_CLEAR_TEXT}\n"

UNKNOWN_TAGS_TITLE = "Unknown Tags"
UNCHANGED_DOCS_TITLE = "Unchanged Documentation"

UrlBuilder = Callable[[str], str]


def build_report(
    unknown_tags: Mapping[str, Sequence[str]],
    stale_docs: Mapping[str, Sequence[str]],
    header: str,
    *,
    file_url: Optional[UrlBuilder] = None,
    change_url: Optional[UrlBuilder] = None,
    resolved_paths: Optional[Mapping[str, str]] = None,
) -> str:
    """Render the findings, or ``""`` when there is nothing to report.

    ``file_url`` links a documentation file, ``change_url`` links the pull
    request diff of a tag's resolved path. Stale tags are looked up in
    ``resolved_paths`` and fall back to the tag itself.
    """
    if not unknown_tags and not stale_docs:
        return ""

    file_url = file_url or _identity
    change_url = change_url or _identity
    resolved_paths = resolved_paths or {}

    lines: List[str] = [header.rstrip("\n")]
    if unknown_tags:
        lines.extend(
            [
                "",
                f"## {UNKNOWN_TAGS_TITLE}",
                "",
                "The following tags could not be found in the repository:",
                "",
                "| Documentation file | Unknown tags |",
                "| --- | --- |",
            ]
        )
        for doc_file, tags in unknown_tags.items():
            rendered = " ".join(_table_cell(_code(tag)) for tag in tags)
            link = _table_cell(_link(doc_file, file_url(doc_file)))
            lines.append(f"| {link} | {rendered} |")

    if stale_docs:
        lines.extend(
            [
                "",
                f"## {UNCHANGED_DOCS_TITLE}",
                "",
                "These files were changed in this pull request, but the documentation tagging them was not:",
                "",
            ]
        )
        for doc_file, tags in stale_docs.items():
            targets = ", ".join(
                _link(tag, change_url(resolved_paths.get(tag, tag))) for tag in tags
            )
            lines.append(f"- [ ] {_link(doc_file, file_url(doc_file))}: {targets}")

    return "\n".join(lines) + "\n"


def report_or_all_clear(
    result: AnalysisResult,
    *,
    header: str = REPORT_HEADER,
    file_url: Optional[UrlBuilder] = None,
    change_url: Optional[UrlBuilder] = None,
) -> str:
    """Return the report for ``result`` or the all-clear message."""
    report = build_report(
        result.unknown_tags,
        result.stale_docs,
        header,
        file_url=file_url,
        change_url=change_url,
        resolved_paths=result.resolved_paths,
    )
    return report or f"{header.rstrip()}\n\n{ALL_CLEAR_TEXT}\n"


def _link(text: str, url: str) -> str:
    return f"[{text}]({url})"


def _code(text: str) -> str:
    """Wrap ``text`` in a code span whose fence is longer than any backtick run in it."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * (longest + 1)
    if text.startswith("`") or text.endswith("`"):
        text = f" {text} "
    return f"{fence}{text}{fence}"


def _table_cell(text: str) -> str:
    # GFM splits cells on every unescaped pipe, code spans included.
    return text.replace("|", "\\|")


def _identity(value: str) -> str:
    return value


__all__ = [
    "ALL_CLEAR_MESSAGE",
    "REPORT_HEADER",
    "REPORT_MARKER",
    "build_report",
    "report_or_all_clear",
]
