"""GitHub Actions workflow I/O: inputs, outputs and failure annotations."""

from __future__ import annotations

import os
import sys
import uuid
from typing import Dict, Iterable, Mapping, Optional, TextIO

from ..logging import get_logger

_LOGGER = get_logger("actions")


def input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return the stripped value of action input ``name`` (``""`` when unset)."""
    env = os.environ if environ is None else environ
    return env.get(input_env_name(name), "").strip()


def read_inputs(
    names: Iterable[str], environ: Mapping[str, str] | None = None
) -> Dict[str, Optional[str]]:
    inputs: Dict[str, Optional[str]] = {}
    for name in names:
        value = get_input(name, environ)
        inputs[name] = value or None
    return inputs


def set_output(
    name: str, value: str, environ: Mapping[str, str] | None = None
) -> None:
    """Expose ``name=value`` to later workflow steps via ``$GITHUB_OUTPUT``."""
    env = os.environ if environ is None else environ
    output_path = env.get("GITHUB_OUTPUT")
    if not output_path:
        _LOGGER.info("Output %s=%s", name, value)
        return
    with open(output_path, "a", encoding="utf-8") as handle:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            handle.write(f"{name}={value}\n")


def set_failed(message: str, stream: TextIO | None = None) -> None:
    """Emit an error annotation for the workflow run."""
    stream = stream or sys.stdout
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    stream.write(f"::error::{escaped}\n")
    stream.flush()


__all__ = ["get_input", "input_env_name", "read_inputs", "set_failed", "set_output"]
