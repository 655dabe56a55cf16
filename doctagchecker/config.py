"""Configuration loading for doctagchecker (action inputs and .doctagchecker.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".doctagchecker.yml"

DEFAULT_DOC_EXTENSIONS = (".md",)
DEFAULT_SOURCE_EXTENSIONS = (
    ".c",
    ".cc",
    ".cpp",
    ".cxx",
    ".h",
    ".hh",
    ".hpp",
    ".hxx",
    ".cu",
    ".cuh",
)
DEFAULT_BOT_LOGIN = "github-actions[bot]"

# Action input names keyed by the attribute (and YAML key) they populate.
INPUT_NAMES: Dict[str, str] = {
    "docs_dirs": "userDocsDirs",
    "recurse": "recurseUserDocDirs",
    "doc_extensions": "userDocsExtensions",
    "src_extensions": "srcFileExtensions",
    "bot_login": "botLogin",
}
TOKEN_INPUT = "githubToken"

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]+$")
_SEPARATOR_RE = re.compile(r"[\s,;]+")
_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


class ConfigError(RuntimeError):
    """Raised when the run configuration is missing or malformed."""


@dataclass
class CheckerConfig:
    """Validated settings for a single documentation check run."""

    root: Path
    docs_dirs: List[Path]
    token: str = field(repr=False)
    recurse: bool = False
    doc_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_EXTENSIONS))
    src_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS))
    bot_login: str = DEFAULT_BOT_LOGIN


def load_config(root: Path, inputs: Mapping[str, Optional[str]]) -> CheckerConfig:
    """Build a validated configuration.

    ``inputs`` is keyed by action input name (``userDocsDirs``, ``githubToken``,
    ...). Missing or blank inputs fall back to ``.doctagchecker.yml`` in the
    repository root and then to the defaults. The token is only accepted from
    ``inputs``.
    """
    root = root.expanduser().resolve()
    if not root.is_dir():
        raise ConfigError(f"Repository root '{root}' does not exist or is not a directory")

    file_values = _read_config(root / CONFIG_FILENAME)

    def pick(key: str) -> Any:
        value = inputs.get(INPUT_NAMES[key])
        if isinstance(value, str) and value.strip():
            return value
        return file_values.get(key)

    token = inputs.get(TOKEN_INPUT)
    if not isinstance(token, str) or not token.strip():
        raise ConfigError(f"Input '{TOKEN_INPUT}' is required")

    doc_extensions = normalize_extensions(
        _as_str_list(pick("doc_extensions")), INPUT_NAMES["doc_extensions"]
    ) or list(DEFAULT_DOC_EXTENSIONS)
    src_extensions = normalize_extensions(
        _as_str_list(pick("src_extensions")), INPUT_NAMES["src_extensions"]
    ) or list(DEFAULT_SOURCE_EXTENSIONS)
    recurse = parse_bool(pick("recurse"), INPUT_NAMES["recurse"])

    dir_names = _as_str_list(pick("docs_dirs"))
    if not dir_names:
        raise ConfigError(f"Input '{INPUT_NAMES['docs_dirs']}' must name at least one directory")
    docs_dirs = [_resolve_docs_dir(root, name) for name in dir_names]

    bot_login = pick("bot_login")
    return CheckerConfig(
        root=root,
        docs_dirs=docs_dirs,
        token=token.strip(),
        recurse=recurse,
        doc_extensions=doc_extensions,
        src_extensions=src_extensions,
        bot_login=str(bot_login).strip() if bot_login else DEFAULT_BOT_LOGIN,
    )


def split_list(value: str) -> List[str]:
    """Split a whitespace, comma or semicolon separated input value."""
    return [part for part in _SEPARATOR_RE.split(value.strip()) if part]


def normalize_extensions(values: Sequence[str], input_name: str) -> List[str]:
    """Prefix missing dots and reject anything but ``.`` followed by letters/digits."""
    extensions: List[str] = []
    for raw in values:
        extension = raw if raw.startswith(".") else f".{raw}"
        if not _EXTENSION_RE.match(extension):
            raise ConfigError(
                f"Input '{input_name}' contains invalid file extension '{raw}'"
            )
        if extension not in extensions:
            extensions.append(extension)
    return extensions


def parse_bool(value: Any, input_name: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if not lowered or lowered in _FALSE_VALUES:
        return False
    if lowered in _TRUE_VALUES:
        return True
    raise ConfigError(f"Input '{input_name}' must be a boolean, got '{value}'")


def _resolve_docs_dir(root: Path, name: str) -> Path:
    path = Path(name).expanduser()
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise ConfigError(f"Documentation directory '{name}' does not exist")
    if not path.is_dir():
        raise ConfigError(f"Documentation directory '{name}' is not a directory")
    return path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_list(value)
    if isinstance(value, (list, tuple)):
        result: List[str] = []
        for item in value:
            if isinstance(item, (str, int, float)) and not isinstance(item, bool):
                result.extend(split_list(str(item)))
        return result
    return [str(value)]


__all__ = [
    "CONFIG_FILENAME",
    "CheckerConfig",
    "ConfigError",
    "DEFAULT_BOT_LOGIN",
    "DEFAULT_DOC_EXTENSIONS",
    "DEFAULT_SOURCE_EXTENSIONS",
    "INPUT_NAMES",
    "TOKEN_INPUT",
    "load_config",
    "normalize_extensions",
    "parse_bool",
    "split_list",
]
