"""CLI entrypoints for doctagchecker commands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional

from .analysis import DocumentationError
from .config import (
    DEFAULT_SOURCE_EXTENSIONS,
    INPUT_NAMES,
    TOKEN_INPUT,
    ConfigError,
    load_config,
    normalize_extensions,
    split_list,
)
from .github.actions import read_inputs, set_failed, set_output
from .github.client import GitHubClient, PlatformError
from .github.context import PullRequestContext
from .logging import configure_logging, get_logger
from .orchestrator import Checker
from .resolver import ResolutionError
from .tags import extract_tags

OUTPUT_NAME = "warnings"


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctagchecker",
        description="Check that documentation tags stay in sync with the files they reference.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Check the documentation of a pull request and update its report comment.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "--root",
        default=None,
        help="Repository root (defaults to $GITHUB_WORKSPACE or the current directory).",
    )
    check_parser.add_argument(
        "--docs-dirs",
        default=None,
        help="Documentation directories, separated by whitespace, commas or semicolons.",
    )
    check_parser.add_argument(
        "--recurse",
        action="store_true",
        default=None,
        help="Descend into subdirectories of the documentation directories.",
    )
    check_parser.add_argument(
        "--doc-extensions",
        default=None,
        help="Documentation file extensions (default: .md).",
    )
    check_parser.add_argument(
        "--src-extensions",
        default=None,
        help="Source file extensions recognised as file tags.",
    )
    check_parser.add_argument(
        "--bot-login",
        default=None,
        help="Login of the account that owns the report comment.",
    )
    check_parser.add_argument(
        "--pull-request",
        type=int,
        default=None,
        help="Pull request number (defaults to the number in the workflow event payload).",
    )
    check_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the report instead of updating the pull request comment.",
    )
    check_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )

    tags_parser = subparsers.add_parser(
        "tags",
        help="List the tags declared by a documentation file.",
    )
    _add_verbose_option(tags_parser, suppress_default=True)
    tags_parser.add_argument("path", help="Documentation file to inspect.")
    tags_parser.add_argument(
        "--src-extensions",
        default=None,
        help="Source file extensions recognised as file tags.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for doctagchecker commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "check":
        _run_check(parser, args)
    elif args.command == "tags":
        _run_tags(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_check(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    logger = get_logger("cli")
    environ = os.environ
    inputs = _collect_inputs(args, environ)
    root = Path(args.root or environ.get("GITHUB_WORKSPACE") or ".")
    dry_run = bool(getattr(args, "dry_run", False))

    try:
        config = load_config(root, inputs)
        context = PullRequestContext.from_env(environ).with_pull_number(args.pull_request)
        context.require_pull_number()
        client = GitHubClient(
            context.owner,
            context.repo,
            config.token,
            api_url=context.api_url,
        )
        outcome = Checker(client, context).run(config, dry_run=dry_run)
    except (ConfigError, DocumentationError, ResolutionError, PlatformError, OSError) as exc:
        if logger.isEnabledFor(logging.DEBUG):
            logger.exception("Documentation check failed: %s", exc)
        set_failed(str(exc))
        parser.exit(1, f"doctagchecker check failed: {exc}\nRun with --verbose for more details.\n")

    set_output(OUTPUT_NAME, outcome.status, environ)
    if dry_run:
        print(outcome.report)
    print(outcome.status)


def _run_tags(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    path = Path(args.path)
    try:
        extensions = normalize_extensions(
            split_list(args.src_extensions or ""), INPUT_NAMES["src_extensions"]
        ) or list(DEFAULT_SOURCE_EXTENSIONS)
        text = path.read_text(encoding="utf-8")
    except (ConfigError, OSError, UnicodeDecodeError) as exc:
        parser.exit(1, f"{exc}\n")

    tags = extract_tags(text, extensions)
    for tag in tags.files:
        print(f"file\t{tag}")
    for tag in tags.directories:
        print(f"directory\t{tag}")


def _collect_inputs(
    args: argparse.Namespace, environ: Mapping[str, str]
) -> Dict[str, Optional[str]]:
    """Merge action inputs from the environment with command-line overrides."""
    inputs = read_inputs([*INPUT_NAMES.values(), TOKEN_INPUT], environ)
    overrides = {
        "docs_dirs": args.docs_dirs,
        "recurse": "true" if args.recurse else None,
        "doc_extensions": args.doc_extensions,
        "src_extensions": args.src_extensions,
        "bot_login": args.bot_login,
    }
    for key, value in overrides.items():
        if value is not None:
            inputs[INPUT_NAMES[key]] = value
    if not inputs.get(TOKEN_INPUT):
        inputs[TOKEN_INPUT] = environ.get("GITHUB_TOKEN") or None
    return inputs


if __name__ == "__main__":
    main(sys.argv[1:])
