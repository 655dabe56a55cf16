"""Tests for the GitHub REST client."""

from __future__ import annotations

import pytest

from doctagchecker.github.client import PER_PAGE, ApiRequest, GitHubClient, PlatformError
from doctagchecker.models import ChangedFile, Comment


class RecordingTransport:
    """Returns queued payloads and records every request."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: list[ApiRequest] = []

    def __call__(self, request: ApiRequest):
        self.requests.append(request)
        return self.responses.pop(0) if self.responses else None


def _client(transport: RecordingTransport) -> GitHubClient:
    return GitHubClient(
        "octo",
        "repo",
        "secret",
        api_url="https://api.example.test/",
        transport=transport,
    )


def test_list_changed_files_reads_filenames() -> None:
    transport = RecordingTransport([{"filename": "src/utils.ts"}, {"filename": "README.md"}])

    files = _client(transport).list_changed_files(12)

    assert files == [ChangedFile("src/utils.ts"), ChangedFile("README.md")]
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url == (
        "https://api.example.test/repos/octo/repo/pulls/12/files?per_page=100&page=1"
    )
    assert request.token == "secret"


def test_list_changed_files_follows_full_pages() -> None:
    first_page = [{"filename": f"f{index}.cpp"} for index in range(PER_PAGE)]
    transport = RecordingTransport(first_page, [{"filename": "last.cpp"}])

    files = _client(transport).list_changed_files(3)

    assert len(files) == PER_PAGE + 1
    assert transport.requests[1].url.endswith("page=2")


def test_list_comments_parses_author_and_body() -> None:
    transport = RecordingTransport(
        [
            {"id": 1, "user": {"login": "alice"}, "body": "hi"},
            {"id": 2, "user": None, "body": None},
        ]
    )

    comments = _client(transport).list_comments(5)

    assert comments == [Comment(1, "alice", "hi"), Comment(2, "", "")]
    assert "/issues/5/comments?per_page=100" in transport.requests[0].url


def test_create_comment_posts_body() -> None:
    transport = RecordingTransport({"id": 9, "user": {"login": "bot"}, "body": "report"})

    comment = _client(transport).create_comment(5, "report")

    assert comment == Comment(9, "bot", "report")
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url.endswith("/repos/octo/repo/issues/5/comments")
    assert request.payload == {"body": "report"}


def test_delete_comment_targets_comment_endpoint() -> None:
    transport = RecordingTransport()

    _client(transport).delete_comment(5, 42)

    request = transport.requests[0]
    assert request.method == "DELETE"
    assert request.url == "https://api.example.test/repos/octo/repo/issues/comments/42"


def test_unexpected_list_payload_raises() -> None:
    transport = RecordingTransport({"message": "Not Found"})

    with pytest.raises(PlatformError):
        _client(transport).list_comments(5)


def test_transport_errors_propagate() -> None:
    def failing(request: ApiRequest):
        raise PlatformError("boom")

    client = GitHubClient("octo", "repo", "secret", transport=failing)

    with pytest.raises(PlatformError, match="boom"):
        client.list_changed_files(1)
