"""Pull request context derived from the GitHub Actions environment."""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from ..config import ConfigError

DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class PullRequestContext:
    """Repository coordinates of the pull request under review."""

    owner: str
    repo: str
    sha: str
    pull_number: Optional[int] = None
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PullRequestContext":
        env = os.environ if environ is None else environ
        repository = env.get("GITHUB_REPOSITORY", "")
        owner, _, repo = repository.partition("/")
        if not owner or not repo:
            raise ConfigError("GITHUB_REPOSITORY must be set to '<owner>/<repo>'")
        return cls(
            owner=owner,
            repo=repo,
            sha=env.get("GITHUB_SHA", ""),
            pull_number=_pull_number_from_event(env.get("GITHUB_EVENT_PATH")),
            server_url=(env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
            api_url=(env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
        )

    def with_pull_number(self, pull_number: Optional[int]) -> "PullRequestContext":
        if pull_number is None:
            return self
        return replace(self, pull_number=pull_number)

    def require_pull_number(self) -> int:
        if self.pull_number is None:
            raise ConfigError("No pull request number available; run on a pull_request event")
        return self.pull_number

    def url_to_file(self, path: str) -> str:
        """Link to ``path`` at the commit under review."""
        return f"{self.server_url}/{self.owner}/{self.repo}/blob/{self.sha}/{path}"

    def url_to_changes(self, path: str) -> str:
        """Link to the diff of ``path`` in the pull request's files view."""
        number = self.require_pull_number()
        digest = hashlib.sha256(path.encode("utf-8")).hexdigest()
        return f"{self.server_url}/{self.owner}/{self.repo}/pull/{number}/files#diff-{digest}"


def _pull_number_from_event(event_path: Optional[str]) -> Optional[int]:
    if not event_path:
        return None
    path = Path(event_path)
    if not path.is_file():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Event payload at {event_path} is not valid JSON") from exc
    if not isinstance(payload, dict):
        return None
    pull_request: Any = payload.get("pull_request")
    number = pull_request.get("number") if isinstance(pull_request, dict) else None
    if number is None:
        number = payload.get("number")
    if isinstance(number, int) and not isinstance(number, bool):
        return number
    return None


__all__ = ["DEFAULT_API_URL", "DEFAULT_SERVER_URL", "PullRequestContext"]
