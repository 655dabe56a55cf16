"""Tests for the staleness analysis."""

from __future__ import annotations

from pathlib import Path

import pytest

from doctagchecker import analysis
from doctagchecker.analysis import DocumentationError, changed_names, check_documentation
from doctagchecker.resolver import ResolutionError

SRC = [".ts", ".cpp"]
DOCS = [".md"]


def _check(root: Path, doc_files, changed):
    return check_documentation(
        doc_files,
        changed,
        root=root,
        source_extensions=SRC,
        doc_extensions=DOCS,
    )


def test_changed_names_reduces_paths_to_base_names() -> None:
    assert changed_names(["src/utils.ts", "docs/a.md", ""]) == {"utils.ts", "a.md"}


def test_tagged_file_changed_without_doc_is_stale(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/guide.md": "The helpers live in utils.ts.\n",
            "src/utils.ts": "export const x = 1\n",
        }
    )

    result = _check(repo_builder.path(), ["docs/guide.md"], ["src/utils.ts"])

    assert dict(result.stale_docs) == {"docs/guide.md": ["utils.ts"]}
    assert dict(result.unknown_tags) == {}
    assert result.resolved_paths["utils.ts"] == "src/utils.ts"
    assert result.has_warnings


def test_changing_the_doc_clears_staleness(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/guide.md": "The helpers live in utils.ts.\n",
            "src/utils.ts": "export const x = 1\n",
        }
    )

    result = _check(
        repo_builder.path(), ["docs/guide.md"], ["src/utils.ts", "docs/guide.md"]
    )

    assert "docs/guide.md" not in result.stale_docs
    assert not result.has_warnings


def test_unknown_directory_tag_is_reported(repo_builder) -> None:
    repo_builder.write(
        {"docs/guide.md": "# Guide\n\n## Related Files and Folders\n\nfake/path/\n"}
    )

    result = _check(repo_builder.path(), ["docs/guide.md"], [])

    assert result.unknown_tags["docs/guide.md"] == ["fake/path/"]
    assert result.stale_docs == {}


def test_unknown_file_tag_is_reported(repo_builder) -> None:
    repo_builder.write({"docs/guide.md": "See removed.cpp for details.\n"})

    result = _check(repo_builder.path(), ["docs/guide.md"], ["src/removed.cpp"])

    assert result.unknown_tags == {"docs/guide.md": ["removed.cpp"]}
    # Unresolved tags never count as stale.
    assert result.stale_docs == {}


def test_directory_tag_expands_to_direct_documentation_children(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/guide.md": "## Related Files and Folders\nnotes/\n",
            "notes/design.md": "design\n",
            "notes/impl.cpp": "int x;\n",
            "notes/deep/nested.md": "nested\n",
        }
    )

    result = _check(
        repo_builder.path(),
        ["docs/guide.md"],
        ["notes/design.md", "notes/impl.cpp", "notes/deep/nested.md"],
    )

    assert result.stale_docs == {"docs/guide.md": ["design.md"]}


def test_files_without_findings_are_omitted(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/clean.md": "Nothing tagged here.\n",
            "docs/stale.md": "main.cpp\n",
            "src/main.cpp": "int main() {}\n",
        }
    )

    result = _check(
        repo_builder.path(), ["docs/clean.md", "docs/stale.md"], ["src/main.cpp"]
    )

    assert list(result.stale_docs) == ["docs/stale.md"]
    assert "docs/clean.md" not in result.unknown_tags
    assert all(result.stale_docs.values())


def test_results_keep_documentation_file_order(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/b.md": "gone.ts\n",
            "docs/a.md": "gone.ts missing.cpp\n",
        }
    )

    result = _check(repo_builder.path(), ["docs/b.md", "docs/a.md"], [])

    assert list(result.unknown_tags) == ["docs/b.md", "docs/a.md"]
    assert result.unknown_tags["docs/a.md"] == ["gone.ts", "missing.cpp"]


def test_unreadable_documentation_file_fails_the_run(repo_builder) -> None:
    with pytest.raises(OSError):
        _check(repo_builder.path(), ["docs/missing.md"], [])


def test_missing_root_fails_the_run(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("main.cpp\n", encoding="utf-8")

    with pytest.raises(ResolutionError):
        check_documentation(
            [str(docs / "a.md")],
            [],
            root=tmp_path / "missing",
            source_extensions=SRC,
            doc_extensions=DOCS,
        )


def test_directory_reached_by_two_tags_is_listed_once(repo_builder, monkeypatch) -> None:
    repo_builder.write(
        {
            "docs/guide.md": "## Related Files and Folders\nsrc/ lib/src/\n",
            "src/notes.md": "notes\n",
        }
    )
    listed = []
    original = analysis._direct_children

    def recording_children(directory, extensions):
        listed.append(directory)
        return original(directory, extensions)

    monkeypatch.setattr(analysis, "_direct_children", recording_children)

    result = _check(repo_builder.path(), ["docs/guide.md"], ["src/notes.md"])

    assert listed == [repo_builder.path() / "src"]
    assert result.stale_docs == {"docs/guide.md": ["notes.md"]}


def test_undecodable_documentation_file_names_the_file(repo_builder) -> None:
    repo_builder.mkdirs(["docs"])
    (repo_builder.path() / "docs" / "bad.md").write_bytes(b"caf\xe9 main.cpp\n")

    with pytest.raises(DocumentationError, match="docs/bad.md"):
        _check(repo_builder.path(), ["docs/bad.md"], [])


def test_each_unknown_tag_is_reported_once_per_file(repo_builder) -> None:
    repo_builder.write(
        {
            "docs/guide.md": "gone.cpp and gone.cpp again\n\nRelated Files and Folders\ngone/ gone/\n",
        }
    )

    result = _check(repo_builder.path(), ["docs/guide.md"], [])

    assert result.unknown_tags == {"docs/guide.md": ["gone/", "gone.cpp"]}
