"""Logging utilities for doctagchecker runs.

Inside a GitHub Actions job warnings and errors are emitted as workflow
commands (``::warning::``) so they show up as annotations on the run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_NAME = "doctagchecker"
_CONSOLE_FORMAT = "[doctagchecker] %(levelname)s %(message)s"


class ActionsFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands where one exists."""

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self._COMMANDS.get(record.levelno)
        if command is None:
            return message
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the doctagchecker hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    annotate: bool | None = None,
) -> logging.Logger:
    """Configure the doctagchecker logger with console output and optional file sink.

    ``annotate`` selects workflow-command output; by default it is enabled when
    ``GITHUB_ACTIONS=true``.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one interpreter must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if annotate is None:
        annotate = running_in_actions()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    if annotate:
        stream_handler.setFormatter(ActionsFormatter("%(message)s"))
    else:
        stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ActionsFormatter", "configure_logging", "get_logger", "running_in_actions"]
