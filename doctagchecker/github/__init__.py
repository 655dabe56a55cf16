"""GitHub platform adapters: REST client, pull request context and comments."""

from .client import GitHubClient, PlatformClient, PlatformError
from .comments import CommentSynchronizer
from .context import PullRequestContext

__all__ = [
    "CommentSynchronizer",
    "GitHubClient",
    "PlatformClient",
    "PlatformError",
    "PullRequestContext",
]
