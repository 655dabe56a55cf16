"""Pipeline orchestration for a documentation tag check run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .analysis import check_documentation
from .config import CheckerConfig
from .docs_scanner import DocsScanner
from .github.client import PlatformClient
from .github.comments import CommentSynchronizer
from .github.context import PullRequestContext
from .logging import get_logger
from .models import AnalysisResult
from .report import REPORT_HEADER, report_or_all_clear

NO_WARNINGS = "NO WARNINGS"
WARNINGS_FOUND = "WARNINGS FOUND"


@dataclass
class CheckOutcome:
    """Result of a check run."""

    status: str
    report: str
    result: AnalysisResult
    doc_files: List[str] = field(default_factory=list)
    deleted_comment: Optional[int] = None
    dry_run: bool = False


class Checker:
    """Coordinates scanning, analysis, reporting and comment synchronisation."""

    def __init__(
        self,
        platform: PlatformClient,
        context: PullRequestContext,
        *,
        scanner: DocsScanner | None = None,
        header: str = REPORT_HEADER,
    ) -> None:
        self.platform = platform
        self.context = context
        self.scanner = scanner or DocsScanner()
        self.header = header
        self.logger = get_logger("orchestrator")

    def run(self, config: CheckerConfig, *, dry_run: bool = False) -> CheckOutcome:
        pull_number = self.context.require_pull_number()
        self.logger.info(
            "Starting documentation check for %s/%s#%d",
            self.context.owner,
            self.context.repo,
            pull_number,
        )

        doc_files = self.scanner.scan(
            config.root,
            config.docs_dirs,
            config.doc_extensions,
            recurse=config.recurse,
        )
        self.logger.info("Found %d documentation file(s)", len(doc_files))

        changed = [item.filename for item in self.platform.list_changed_files(pull_number)]
        self.logger.debug("Changed files: %s", ", ".join(changed) or "(none)")

        result = check_documentation(
            doc_files,
            changed,
            root=config.root,
            source_extensions=config.src_extensions,
            doc_extensions=config.doc_extensions,
        )
        report = report_or_all_clear(
            result,
            header=self.header,
            file_url=self.context.url_to_file,
            change_url=self.context.url_to_changes,
        )
        status = WARNINGS_FOUND if result.has_warnings else NO_WARNINGS

        deleted: Optional[int] = None
        if dry_run:
            self.logger.info("Dry-run completed; pull request comment not updated")
        else:
            synchronizer = CommentSynchronizer(
                self.platform,
                pull_number,
                header=self.header,
                bot_login=config.bot_login,
            )
            deleted = synchronizer.sync(report)

        self.logger.info("Documentation check finished: %s", status)
        return CheckOutcome(
            status=status,
            report=report,
            result=result,
            doc_files=doc_files,
            deleted_comment=deleted,
            dry_run=dry_run,
        )


__all__ = ["CheckOutcome", "Checker", "NO_WARNINGS", "WARNINGS_FOUND"]
