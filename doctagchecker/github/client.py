"""Minimal GitHub REST client for the pull request endpoints the checker uses."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..logging import get_logger
from ..models import ChangedFile, Comment
from .context import DEFAULT_API_URL

PER_PAGE = 100


class PlatformError(RuntimeError):
    """Raised when a call to the hosting platform fails."""


class PlatformClient(Protocol):
    """Capabilities the checker needs from the hosting platform."""

    def list_changed_files(self, pull_number: int) -> List[ChangedFile]:
        ...

    def list_comments(self, issue_number: int) -> List[Comment]:
        ...

    def create_comment(self, issue_number: int, body: str) -> Comment:
        ...

    def delete_comment(self, issue_number: int, comment_id: int) -> None:
        ...


@dataclass
class ApiRequest:
    """A single REST call against the GitHub API."""

    method: str
    url: str
    token: str
    payload: Optional[Dict[str, Any]] = None
    timeout: float = 30.0


Transport = Callable[[ApiRequest], Any]


class GitHubClient:
    """Talks to ``api.github.com`` (or a GHES API URL) on behalf of one repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        request_timeout: float = 30.0,
        transport: Transport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._token = token
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout
        self._transport = transport or self._http_transport
        self.logger = get_logger("github")

    def list_changed_files(self, pull_number: int) -> List[ChangedFile]:
        """Return every file touched by the pull request, across all pages."""
        files: List[ChangedFile] = []
        page = 1
        while True:
            batch = self._get_list(
                f"/pulls/{pull_number}/files", {"per_page": PER_PAGE, "page": page}
            )
            files.extend(
                ChangedFile(filename=str(item["filename"]))
                for item in batch
                if isinstance(item, dict) and item.get("filename")
            )
            if len(batch) < PER_PAGE:
                break
            page += 1
        self.logger.debug("Pull request #%d changes %d file(s)", pull_number, len(files))
        return files

    def list_comments(self, issue_number: int) -> List[Comment]:
        """Return the first page of comments on the issue thread, oldest first."""
        batch = self._get_list(f"/issues/{issue_number}/comments", {"per_page": PER_PAGE})
        return [_parse_comment(item) for item in batch if isinstance(item, dict)]

    def create_comment(self, issue_number: int, body: str) -> Comment:
        payload = self._call("POST", f"/issues/{issue_number}/comments", payload={"body": body})
        if not isinstance(payload, dict):
            raise PlatformError("GitHub returned an unexpected response when creating a comment")
        return _parse_comment(payload)

    def delete_comment(self, issue_number: int, comment_id: int) -> None:
        # Comment ids are repository-wide; the issue number only scopes the log line.
        self.logger.debug("Deleting comment %d on #%d", comment_id, issue_number)
        self._call("DELETE", f"/issues/comments/{comment_id}")

    # ------------------------------------------------------------------
    # Helpers

    def _get_list(self, path: str, query: Dict[str, Any]) -> Sequence[Any]:
        payload = self._call("GET", f"{path}?{urlencode(query)}")
        if not isinstance(payload, list):
            raise PlatformError(f"GitHub returned an unexpected response for {path}")
        return payload

    def _call(
        self, method: str, path: str, *, payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        request = ApiRequest(
            method=method,
            url=f"{self.api_url}/repos/{self.owner}/{self.repo}{path}",
            token=self._token,
            payload=payload,
            timeout=self.request_timeout,
        )
        return self._transport(request)

    @staticmethod
    def _http_transport(request: ApiRequest) -> Any:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {request.token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "doctagchecker",
        }
        data = None
        if request.payload is not None:
            data = json.dumps(request.payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        http_request = Request(request.url, data=data, headers=headers, method=request.method)
        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise PlatformError(
                f"GitHub {request.method} {request.url} failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:
            raise PlatformError(f"GitHub {request.method} {request.url} failed: {exc.reason}") from exc

        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise PlatformError("GitHub returned invalid JSON") from exc


def _parse_comment(item: Dict[str, Any]) -> Comment:
    user = item.get("user")
    login = user.get("login") if isinstance(user, dict) else None
    return Comment(
        id=int(item["id"]),
        author=str(login or ""),
        body=str(item.get("body") or ""),
    )


__all__ = ["ApiRequest", "GitHubClient", "PlatformClient", "PlatformError", "PER_PAGE"]
