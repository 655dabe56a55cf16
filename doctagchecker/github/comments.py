"""Keeps a single report comment per pull request."""

from __future__ import annotations

from typing import Optional

from ..config import DEFAULT_BOT_LOGIN
from ..logging import get_logger
from ..report import REPORT_HEADER
from .client import PlatformClient


class CommentSynchronizer:
    """Replaces the previous report comment with a freshly posted one.

    The previous report is the newest comment written by ``bot_login`` whose
    body contains ``header``. Only the comments returned by a single
    ``list_comments`` call are considered.
    """

    def __init__(
        self,
        platform: PlatformClient,
        issue_number: int,
        *,
        header: str = REPORT_HEADER,
        bot_login: str = DEFAULT_BOT_LOGIN,
    ) -> None:
        self.platform = platform
        self.issue_number = issue_number
        self.header = header
        self.bot_login = bot_login
        self.logger = get_logger("comments")

    def find_previous(self) -> Optional[int]:
        comments = self.platform.list_comments(self.issue_number)
        for comment in reversed(comments):
            if comment.author == self.bot_login and self.header in comment.body:
                return comment.id
        return None

    def sync(self, body: str) -> Optional[int]:
        """Delete the previous report (if any) and post ``body``.

        Returns the id of the deleted comment, or ``None``.
        """
        previous = self.find_previous()
        if previous is not None:
            self.logger.info("Deleting previous report comment %d", previous)
            self.platform.delete_comment(self.issue_number, previous)
        self.platform.create_comment(self.issue_number, body)
        self.logger.info("Posted report comment on #%d", self.issue_number)
        return previous


__all__ = ["CommentSynchronizer"]
